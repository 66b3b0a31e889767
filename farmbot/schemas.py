"""
Request/response models for the FarmBot HTTP API.

Field names are snake_case in Python and camelCase on the wire so the
existing React client keeps working (landSize, isVoice, farmingAdvice...).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["high", "medium", "low"]
Trend = Literal["up", "down", "stable"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Farmers ---

class FarmerCreate(CamelModel):
    name: str
    district: str
    land_size: str
    land_type: str
    crops: List[str]
    experience: str
    language: Optional[str] = "en"


class FarmerUpdate(CamelModel):
    name: Optional[str] = None
    district: Optional[str] = None
    land_size: Optional[str] = None
    land_type: Optional[str] = None
    crops: Optional[List[str]] = None
    experience: Optional[str] = None
    language: Optional[str] = None


class Farmer(FarmerCreate):
    id: str
    created_at: datetime


# --- Chat ---

class ChatMessageCreate(CamelModel):
    farmer_id: Optional[str] = None
    message: str = Field(min_length=1)
    is_voice: bool = False


class ChatMessage(ChatMessageCreate):
    id: str
    response: Optional[str] = None
    timestamp: datetime


# --- Suggestions ---

class SuggestionCreate(CamelModel):
    farmer_id: Optional[str] = None
    title: str
    description: str
    priority: Priority
    category: str
    due_date: Optional[datetime] = None


class SuggestionUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    is_completed: Optional[bool] = None
    due_date: Optional[datetime] = None


class Suggestion(SuggestionCreate):
    id: str
    is_completed: bool = False
    created_at: datetime


# --- Weather ---

class ForecastDay(CamelModel):
    day: str
    temp: str
    condition: str
    rain: str


class WeatherReport(CamelModel):
    """Weather payload before it is stored (no id/timestamp yet)."""
    district: str
    temperature: Optional[str] = None
    humidity: Optional[str] = None
    rainfall: Optional[str] = None
    forecast: List[ForecastDay] = []
    farming_advice: Optional[str] = None


class WeatherData(WeatherReport):
    id: str
    timestamp: datetime


# --- Market ---

class MarketPriceCreate(CamelModel):
    crop: str
    price_per_kg: Optional[str] = None
    district: Optional[str] = None
    change: Optional[str] = None
    trend: Optional[Trend] = None


class MarketPrice(MarketPriceCreate):
    id: str
    date: datetime


class WeatherAdvice(CamelModel):
    farmer_id: str
    district: str
    advice: str
    weather: WeatherData


# --- Crop calendar / reference data ---

class FarmingTask(CamelModel):
    id: str
    title: str
    description: str
    priority: Priority
    category: str
    due_date: datetime
    is_completed: bool = False
    crops: List[str] = []
    land_types: List[str] = []


class LandTypeInfo(CamelModel):
    value: str
    label: str
    description: str
    icon: str
    suitable_crops: List[str]


class CropOptionInfo(CamelModel):
    value: str
    label: str
    icon: str
    season: str
    land_types: List[str]


class SeasonInfo(CamelModel):
    kerala_season: str
    name: str
    months: List[int]
    description: str
    main_activities: List[str]
    seasonal_crops: List[str] = []
