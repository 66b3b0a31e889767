"""
Farming advisor: builds the FarmBot Kerala prompts and turns LLM output
into chat replies and stored suggestions.

Every LLM call has a fallback. Chat falls back to a fixed apology, and
suggestions fall back to the rule-based crop calendar, so onboarding never
ends with an empty task list.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from farmbot.crop_calendar import get_current_season_tasks, get_seasonal_maintenance_tasks
from farmbot.kerala import IST, get_kerala_season
from farmbot.llm_manager import LLMError, LLMManager
from farmbot.schemas import Farmer, Suggestion, SuggestionCreate, WeatherData

EMPTY_REPLY = "I'm sorry, I couldn't process your question. Please try again."
OFFLINE_REPLY = ("I'm having trouble connecting to my knowledge base. "
                 "Please check your internet connection and try again.")

PRIORITIES = ("high", "medium", "low")
INITIAL_DUE_DAYS = 7
SEASONAL_DUE_DAYS = 14

CHAT_SYSTEM_PROMPT = """You are FarmBot Kerala, an AI assistant specialized in Kerala farming practices.
Provide helpful, practical farming advice specific to Kerala's climate, soil, and agricultural practices.
Consider the monsoon (June-September), post-monsoon (October-February), and summer (March-May) seasons.
Keep responses concise but informative. Use simple language appropriate for farmers.
Include emojis when appropriate to make responses friendly and engaging.

If the question is about:
- Crop selection: Consider Kerala's tropical climate and seasonal patterns
- Pest control: Focus on organic and sustainable methods popular in Kerala
- Fertilizers: Emphasize organic options and local resources
- Weather: Reference Kerala's monsoon patterns and seasonal farming calendar
- Market: Consider local Kerala markets and traditional crops

Response should be natural and conversational, not structured JSON."""

SUGGESTION_FORMAT = """Provide suggestions in JSON format:
{
  "suggestions": [
    {
      "title": "Brief action title (max 50 chars)",
      "description": "Detailed description with specific steps",
      "priority": "high|medium|low",
      "category": "%s"
    }
  ]
}"""


def farmer_context(farmer: Optional[Farmer]) -> str:
    if not farmer:
        return ""
    return (
        "Farmer Profile:\n"
        f"- Name: {farmer.name}\n"
        f"- Location: {farmer.district}, Kerala\n"
        f"- Land Size: {farmer.land_size}\n"
        f"- Land Type: {farmer.land_type}\n"
        f"- Crops: {', '.join(farmer.crops)}\n"
        f"- Experience: {farmer.experience}\n"
        f"- Language: {farmer.language or 'en'}"
    )


def normalise_priority(value) -> str:
    value = str(value or "").strip().lower()
    return value if value in PRIORITIES else "medium"


class FarmAdvisor:

    def __init__(self, storage, llm: Optional[LLMManager] = None):
        self.storage = storage
        self.llm = llm or LLMManager()

    # --- Chat ---

    def generate_farming_response(self, message: str, farmer: Optional[Farmer]) -> str:
        context = farmer_context(farmer)
        prompt = f"{context}\n\nFarmer's question: \"{message}\"" if context else \
            f"Farmer's question: \"{message}\""
        try:
            reply = self.llm.query(prompt, system_prompt=CHAT_SYSTEM_PROMPT, max_tokens=500)
        except LLMError as e:
            print(f"⚠️ [Advisor] Chat LLM error: {e}")
            return OFFLINE_REPLY
        return reply or EMPTY_REPLY

    def answer_chat(self, message_id: str, message: str, farmer: Optional[Farmer]):
        reply = self.generate_farming_response(message, farmer)
        return self.storage.update_chat_message(message_id, reply)

    # --- Suggestions ---

    def generate_initial_suggestions(self, farmer: Farmer,
                                     now: Optional[datetime] = None) -> List[Suggestion]:
        """Three onboarding suggestions, due in a week."""
        now = now or datetime.now(IST)
        month = now.month
        season = get_kerala_season(month)
        prompt = (
            "Generate 3 farming suggestions for a Kerala farmer with this profile:\n"
            f"- District: {farmer.district}\n"
            f"- Land Size: {farmer.land_size}\n"
            f"- Land Type: {farmer.land_type}\n"
            f"- Crops: {', '.join(farmer.crops)}\n"
            f"- Experience: {farmer.experience}\n\n"
            f"Current season: {season} (Month: {month})\n"
            "Generate a mix of seasonal, maintenance, and planning suggestions.\n\n"
            + SUGGESTION_FORMAT % "planting|care|harvest|pest|fertilizer|irrigation|seasonal|planning"
        )
        due = now + timedelta(days=INITIAL_DUE_DAYS)

        try:
            items = self._ask_for_suggestions(prompt)
        except LLMError as e:
            print(f"⚠️ [Advisor] Initial suggestions falling back to crop calendar: {e}")
            tasks = get_current_season_tasks(farmer.crops, farmer.land_type, farmer.district,
                                             month=month, now=now)
            return self._store_tasks(farmer.id, tasks)

        return self._store_items(farmer.id, items, due, default_category="care")

    def generate_seasonal_suggestions(self, farmer: Farmer,
                                      now: Optional[datetime] = None) -> List[Suggestion]:
        """Two or three suggestions for the current Kerala season, due in two weeks."""
        now = now or datetime.now(IST)
        month = now.month
        season = get_kerala_season(month)
        prompt = (
            f"Generate 2-3 seasonal farming suggestions for {season} season in Kerala for:\n"
            f"- District: {farmer.district}\n"
            f"- Crops: {', '.join(farmer.crops)}\n"
            f"- Land Type: {farmer.land_type}\n\n"
            "Focus on seasonal activities like planting, harvesting, pest control, or preparation.\n\n"
            + SUGGESTION_FORMAT % "seasonal"
        )
        due = now + timedelta(days=SEASONAL_DUE_DAYS)

        try:
            items = self._ask_for_suggestions(prompt)
        except LLMError as e:
            print(f"⚠️ [Advisor] Seasonal suggestions falling back to maintenance tasks: {e}")
            tasks = get_seasonal_maintenance_tasks(month, farmer.land_type, farmer.district, now)
            return self._store_tasks(farmer.id, tasks)

        return self._store_items(farmer.id, items, due, default_category="seasonal")

    def _ask_for_suggestions(self, prompt: str) -> List[Dict]:
        result = self.llm.query_json(prompt)
        items = result.get("suggestions")
        if not isinstance(items, list):
            raise LLMError("LLM JSON has no 'suggestions' list")
        items = [item for item in items if isinstance(item, dict) and item.get("title")]
        if not items:
            raise LLMError("LLM returned no usable suggestions")
        return items

    def _store_items(self, farmer_id: str, items: List[Dict], due: datetime,
                     default_category: str) -> List[Suggestion]:
        stored = []
        for item in items:
            stored.append(self.storage.create_suggestion(SuggestionCreate(
                farmer_id=farmer_id,
                title=str(item["title"]),
                description=str(item.get("description") or ""),
                priority=normalise_priority(item.get("priority")),
                category=str(item.get("category") or default_category),
                due_date=due,
            )))
        print(f"[Advisor] Stored {len(stored)} suggestion(s) for farmer {farmer_id}")
        return stored

    def _store_tasks(self, farmer_id: str, tasks: List[Dict]) -> List[Suggestion]:
        return [
            self.storage.create_suggestion(SuggestionCreate(
                farmer_id=farmer_id,
                title=task["title"],
                description=task["description"],
                priority=task["priority"],
                category=task["category"],
                due_date=task["due_date"],
            ))
            for task in tasks
        ]

    # --- Weather ---

    def generate_weather_advice(self, weather: WeatherData, farmer: Farmer) -> str:
        """LLM-refined advice for the next week; the rule-based text on failure."""
        forecast = ", ".join(f"{day.condition} ({day.rain} rain)" for day in weather.forecast)
        prompt = (
            f"Based on this weather data for {farmer.district}, Kerala:\n"
            f"- Current Temperature: {weather.temperature}\n"
            f"- Humidity: {weather.humidity}\n"
            f"- Forecast: {forecast}\n\n"
            "Farmer Profile:\n"
            f"- Land Type: {farmer.land_type}\n"
            f"- Crops: {', '.join(farmer.crops)}\n\n"
            "Provide specific farming advice for the next 3-7 days considering this weather.\n"
            "Focus on irrigation, pest control, harvesting, and crop protection.\n"
            "Keep advice practical and actionable for Kerala farmers."
        )
        try:
            return self.llm.query(prompt, max_tokens=300) or (weather.farming_advice or "")
        except LLMError as e:
            print(f"⚠️ [Advisor] Weather advice LLM error: {e}")
            return weather.farming_advice or ""
