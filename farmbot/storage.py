import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from farmbot.kerala import IST
from farmbot.schemas import (
    ChatMessage,
    ChatMessageCreate,
    Farmer,
    FarmerCreate,
    MarketPrice,
    MarketPriceCreate,
    Suggestion,
    SuggestionCreate,
    WeatherData,
    WeatherReport,
)


def _now() -> datetime:
    return datetime.now(IST)


def _new_id() -> str:
    return str(uuid.uuid4())


class FarmStorage:
    """In-memory record store. Nothing survives a restart."""

    def __init__(self) -> None:
        self.farmers: Dict[str, Farmer] = {}
        self.chat_messages: Dict[str, ChatMessage] = {}
        self.suggestions: Dict[str, Suggestion] = {}
        self.weather_data: Dict[str, WeatherData] = {}
        self.market_prices: Dict[str, MarketPrice] = {}

    # --- Farmers ---

    def get_farmer(self, farmer_id: str) -> Optional[Farmer]:
        return self.farmers.get(farmer_id)

    def get_all_farmers(self) -> List[Farmer]:
        return list(self.farmers.values())

    def create_farmer(self, data: FarmerCreate) -> Farmer:
        farmer = Farmer(
            **data.model_dump(),
            id=_new_id(),
            created_at=_now(),
        )
        if not farmer.language:
            farmer.language = "en"
        self.farmers[farmer.id] = farmer
        return farmer

    def update_farmer(self, farmer_id: str, updates: Dict[str, Any]) -> Optional[Farmer]:
        farmer = self.farmers.get(farmer_id)
        if not farmer:
            return None
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at") and v is not None}
        updated = farmer.model_copy(update=updates)
        self.farmers[farmer_id] = updated
        return updated

    # --- Chat ---

    def get_chat_messages(self, farmer_id: str) -> List[ChatMessage]:
        messages = [m for m in self.chat_messages.values() if m.farmer_id == farmer_id]
        return sorted(messages, key=lambda m: m.timestamp)

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessage:
        message = ChatMessage(
            **data.model_dump(),
            id=_new_id(),
            response=None,
            timestamp=_now(),
        )
        self.chat_messages[message.id] = message
        return message

    def update_chat_message(self, message_id: str, response: str) -> Optional[ChatMessage]:
        message = self.chat_messages.get(message_id)
        if not message:
            return None
        updated = message.model_copy(update={"response": response})
        self.chat_messages[message_id] = updated
        return updated

    # --- Suggestions ---

    def get_suggestions(self, farmer_id: str) -> List[Suggestion]:
        items = [s for s in self.suggestions.values() if s.farmer_id == farmer_id]
        # newest first; equal timestamps keep insertion order
        return sorted(items, key=lambda s: s.created_at, reverse=True)

    def create_suggestion(self, data: SuggestionCreate) -> Suggestion:
        suggestion = Suggestion(
            **data.model_dump(),
            id=_new_id(),
            is_completed=False,
            created_at=_now(),
        )
        self.suggestions[suggestion.id] = suggestion
        return suggestion

    def update_suggestion(self, suggestion_id: str, updates: Dict[str, Any]) -> Optional[Suggestion]:
        suggestion = self.suggestions.get(suggestion_id)
        if not suggestion:
            return None
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at") and v is not None}
        updated = suggestion.model_copy(update=updates)
        self.suggestions[suggestion_id] = updated
        return updated

    # --- Weather ---

    def get_weather_data(self, district: str) -> Optional[WeatherData]:
        key = district.lower()
        latest = None
        for record in self.weather_data.values():
            if record.district.lower() != key:
                continue
            # ties go to the most recently inserted record
            if latest is None or record.timestamp >= latest.timestamp:
                latest = record
        return latest

    def create_weather_data(self, report: WeatherReport) -> WeatherData:
        record = WeatherData(
            **report.model_dump(),
            id=_new_id(),
            timestamp=_now(),
        )
        # one row per district
        key = record.district.lower()
        self.weather_data = {
            rid: r for rid, r in self.weather_data.items() if r.district.lower() != key
        }
        self.weather_data[record.id] = record
        return record

    # --- Market ---

    def get_market_prices(self, district: Optional[str] = None) -> List[MarketPrice]:
        prices = list(self.market_prices.values())
        if district:
            key = district.lower()
            prices = [p for p in prices if (p.district or "").lower() == key]
        return sorted(prices, key=lambda p: p.date, reverse=True)

    def create_market_price(self, data: MarketPriceCreate) -> MarketPrice:
        price = MarketPrice(
            **data.model_dump(),
            id=_new_id(),
            date=_now(),
        )
        self.market_prices[price.id] = price
        return price
