import os
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import requests
from dotenv import load_dotenv

from farmbot.kerala import IST, get_district
from farmbot.schemas import ForecastDay, WeatherData, WeatherReport

load_dotenv()

STALE_AFTER = timedelta(hours=6)

# WMO weather interpretation codes (Open-Meteo)
WEATHER_CODES: Dict[int, str] = {
    0: "Sunny",
    1: "Mostly Sunny",
    2: "Partly Cloudy",
    3: "Cloudy",
    45: "Fog",
    48: "Fog",
    51: "Drizzle",
    53: "Drizzle",
    55: "Drizzle",
    56: "Drizzle",
    57: "Drizzle",
    61: "Light Rain",
    63: "Rain",
    65: "Heavy Rain",
    66: "Rain",
    67: "Heavy Rain",
    80: "Light Rain",
    81: "Rain",
    82: "Heavy Rain",
    95: "Thunderstorm",
    96: "Thunderstorm",
    99: "Thunderstorm",
}

DEFAULT_ADVICE = "Good conditions for planting vegetables and routine field work."

SAMPLE_ADVICE = ("Good conditions for planting vegetables. "
                 "Delay irrigation due to expected rainfall.")


def sample_weather(district: str) -> WeatherReport:
    return WeatherReport(
        district=district,
        temperature="28°C",
        humidity="78%",
        rainfall="Light rain expected",
        forecast=[
            ForecastDay(day="Today", temp="32°/24°", condition="Sunny", rain="0%"),
            ForecastDay(day="Tomorrow", temp="29°/23°", condition="Light Rain", rain="60%"),
            ForecastDay(day="Wednesday", temp="30°/24°", condition="Cloudy", rain="20%"),
        ],
        farming_advice=SAMPLE_ADVICE,
    )


def describe_weather_code(code: Optional[int]) -> str:
    if code is None:
        return "Unknown"
    return WEATHER_CODES.get(int(code), "Cloudy")


def describe_rainfall(rain_mm: float, rain_probability: float) -> str:
    if rain_mm >= 20 or rain_probability >= 80:
        return "Heavy rain expected"
    if rain_mm >= 5 or rain_probability >= 60:
        return "Moderate rain expected"
    if rain_mm > 0 or rain_probability >= 30:
        return "Light rain expected"
    return "No rain expected"


def farming_advice(temp_c: float, humidity: float, rain_mm: float, rain_probability: float) -> str:
    """
    Fixed rule table: every rule that fires adds one sentence, in order.

      rain >= 20mm or chance >= 80%   -> hold sprays/fertilizer, clear drains
      rain >= 2mm or chance >= 50%    -> delay irrigation
      dry and temp >= 35C             -> irrigate early/late, mulch
      temp >= 32C                     -> shade seedlings
      humidity >= 85%                 -> fungal disease watch
      temp <= 18C                     -> protect seedlings from cold
    """
    advice: List[str] = []
    heavy_rain = rain_mm >= 20 or rain_probability >= 80
    some_rain = rain_mm >= 2 or rain_probability >= 50

    if heavy_rain:
        advice.append("Heavy rain expected: postpone pesticide spraying and fertilizer "
                      "application, and clear drainage channels to prevent waterlogging.")
    elif some_rain:
        advice.append("Delay irrigation due to expected rainfall.")

    if not some_rain and temp_c >= 35:
        advice.append("Very hot and dry: irrigate in the early morning or evening "
                      "and mulch to retain soil moisture.")
    if temp_c >= 32:
        advice.append("Provide shade for seedlings and young plants during the afternoon.")
    if humidity >= 85:
        advice.append("High humidity: watch for fungal diseases such as leaf spot "
                      "and blight, and ensure good air circulation.")
    if temp_c <= 18:
        advice.append("Cool temperatures: protect seedlings from cold stress.")

    if not advice:
        return DEFAULT_ADVICE
    return " ".join(advice)


def is_stale(record: WeatherData, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(IST)
    return record.timestamp < now - STALE_AFTER


class WeatherService:

    def __init__(self, base_url: str = None):
        self.base_url = base_url or os.getenv("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")
        self.geocode_url = "https://nominatim.openstreetmap.org/search"
        self.last_weather_cache: Dict[str, WeatherReport] = {}

    def geocode_district(self, district: str) -> Optional[Tuple[float, float]]:
        known = get_district(district)
        if known:
            return known["latitude"], known["longitude"]

        try:
            response = requests.get(
                self.geocode_url,
                params={"q": f"{district}, Kerala, India", "format": "json", "limit": 1},
                headers={"User-Agent": "FarmBotKerala/1.0"},
                timeout=5,
            )
            response.raise_for_status()
            results = response.json()
            if results:
                return float(results[0]["lat"]), float(results[0]["lon"])
        except Exception as e:
            print(f"⚠️ [Weather] Geocoding error for '{district}': {e}")
        return None

    def fetch_live(self, district: str) -> WeatherReport:
        """Call Open-Meteo for the district. Raises on any failure."""
        coords = self.geocode_district(district)
        if coords is None:
            raise ValueError(f"Unknown district '{district}'")
        lat, lon = coords

        response = requests.get(
            self.base_url,
            params={
                "latitude": lat,
                "longitude": lon,
                "current": "temperature_2m,relative_humidity_2m,precipitation,weather_code",
                "daily": ("weather_code,temperature_2m_max,temperature_2m_min,"
                          "precipitation_sum,precipitation_probability_max"),
                "forecast_days": 3,
                "timezone": "Asia/Kolkata",
            },
            timeout=5,
        )
        response.raise_for_status()
        report = self._build_report(district, response.json())

        self.last_weather_cache[district.lower()] = report
        return report

    def fetch_weather(self, district: str) -> WeatherReport:
        """Current conditions + 3-day forecast; last good report or sample on failure."""
        key = district.lower()
        try:
            return self.fetch_live(district)
        except Exception as e:
            print(f"⚠️ [Weather] API error for '{district}': {e}")
            cached = self.last_weather_cache.get(key)
            if cached:
                return cached
            return sample_weather(district)

    def _build_report(self, district: str, data: Dict) -> WeatherReport:
        current = data["current"]
        daily = data["daily"]

        temp = float(current["temperature_2m"])
        humidity = float(current["relative_humidity_2m"])
        rain_mm = float(daily["precipitation_sum"][0] or 0)
        rain_prob = float(daily["precipitation_probability_max"][0] or 0)

        return WeatherReport(
            district=district,
            temperature=f"{round(temp)}°C",
            humidity=f"{round(humidity)}%",
            rainfall=describe_rainfall(rain_mm, rain_prob),
            forecast=self._build_forecast(daily),
            farming_advice=farming_advice(temp, humidity, rain_mm, rain_prob),
        )

    def _build_forecast(self, daily: Dict) -> List[ForecastDay]:
        forecast = []
        for i, date in enumerate(daily["time"][:3]):
            if i == 0:
                label = "Today"
            elif i == 1:
                label = "Tomorrow"
            else:
                label = datetime.strptime(date, "%Y-%m-%d").strftime("%A")

            high = round(daily["temperature_2m_max"][i])
            low = round(daily["temperature_2m_min"][i])
            prob = daily["precipitation_probability_max"][i] or 0
            forecast.append(ForecastDay(
                day=label,
                temp=f"{high}°/{low}°",
                condition=describe_weather_code(daily["weather_code"][i]),
                rain=f"{round(prob)}%",
            ))
        return forecast

    def get_weather(self, district: str, storage, now: Optional[datetime] = None) -> WeatherData:
        """
        Serve the stored record while it is fresh, otherwise fetch and store.

        When the API is down a stale record is served with its original
        timestamp, so the next request retries. With nothing stored the
        sample report is stored instead.
        """
        cached = storage.get_weather_data(district)
        if cached and not is_stale(cached, now):
            return cached
        try:
            report = self.fetch_live(district)
        except Exception as e:
            print(f"⚠️ [Weather] API error for '{district}': {e}")
            if cached:
                return cached
            report = sample_weather(district)
        return storage.create_weather_data(report)
