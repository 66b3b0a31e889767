from __future__ import annotations

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List, Optional

import pytz
import uvicorn
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from farmbot import kerala
from farmbot.advisor import FarmAdvisor
from farmbot.crop_calendar import get_current_season_tasks, validate_farmer_data
from farmbot.llm_manager import LLMManager
from farmbot.market import get_market_prices
from farmbot.schemas import (
    ChatMessage,
    ChatMessageCreate,
    CropOptionInfo,
    Farmer,
    FarmerCreate,
    FarmerUpdate,
    FarmingTask,
    LandTypeInfo,
    MarketPrice,
    SeasonInfo,
    Suggestion,
    SuggestionUpdate,
    WeatherAdvice,
    WeatherData,
)
from farmbot.storage import FarmStorage
from farmbot.weather import WeatherService

print("Initialising FarmBot Kerala API...")

storage = FarmStorage()
llm     = LLMManager()
weather = WeatherService()
advisor = FarmAdvisor(storage, llm)

IST = pytz.timezone("Asia/Kolkata")

SCHEDULER_ENABLED = os.getenv("FARMBOT_SCHEDULER", "1") != "0"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # ── startup ──
    if SCHEDULER_ENABLED:
        scheduler.start()
    print("\n" + "=" * 60)
    print("FARMBOT KERALA API STARTED")
    print("=" * 60)
    print(f"  LLM         : {llm.mode} ({'ready' if llm.available else 'fallback mode'})")
    print(f"  Weather     : {weather.base_url}")
    print(f"  Schedules   : {'weather refresh every 6 hours' if SCHEDULER_ENABLED else 'disabled'}")
    print("=" * 60 + "\n")

    yield  # server is running

    # ── shutdown ──
    if scheduler.running:
        scheduler.shutdown()
    print("FarmBot API stopped")


app = FastAPI(
    title="FarmBot Kerala API",
    description="AI farming assistant for Kerala farmers",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"message": details or "Invalid request"})


@app.exception_handler(Exception)
async def server_error(_request: Request, exc: Exception) -> JSONResponse:
    print(f"[API] Unhandled error: {exc}")
    return JSONResponse(status_code=500, content={"message": str(exc)})


@app.get("/")
async def health_check() -> Dict:
    return {
        "status":   "ok",
        "service":  "FarmBot Kerala API",
        "llm_mode": llm.mode,
        "llm":      llm.available,
        "farmers":  len(storage.get_all_farmers()),
        "time_ist": datetime.now(IST).strftime("%Y-%m-%d %H:%M IST"),
    }


# --- Farmers ---

@app.post("/api/farmers", response_model=Farmer)
def create_farmer(payload: FarmerCreate) -> Farmer:
    valid, errors = validate_farmer_data(payload.model_dump())
    if not valid:
        raise HTTPException(status_code=400, detail="; ".join(errors))

    farmer = storage.create_farmer(payload)
    print(f"[API] Farmer created: {farmer.name} ({farmer.district})")
    advisor.generate_initial_suggestions(farmer)
    return farmer


@app.get("/api/farmers/{farmer_id}", response_model=Farmer)
def get_farmer(farmer_id: str) -> Farmer:
    return _require_farmer(farmer_id)


@app.patch("/api/farmers/{farmer_id}", response_model=Farmer)
def update_farmer(farmer_id: str, payload: FarmerUpdate) -> Farmer:
    farmer = storage.update_farmer(farmer_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    if not farmer:
        raise HTTPException(status_code=404, detail="Farmer not found")
    return farmer


# --- Chat ---

@app.post("/api/chat", response_model=ChatMessage)
def post_chat(payload: ChatMessageCreate) -> ChatMessage:
    message = storage.create_chat_message(payload)
    farmer = storage.get_farmer(payload.farmer_id) if payload.farmer_id else None
    return advisor.answer_chat(message.id, payload.message, farmer)


@app.get("/api/chat/{farmer_id}", response_model=List[ChatMessage])
def get_chat(farmer_id: str) -> List[ChatMessage]:
    return storage.get_chat_messages(farmer_id)


# --- Suggestions ---

@app.get("/api/suggestions/{farmer_id}", response_model=List[Suggestion])
def get_suggestions(farmer_id: str) -> List[Suggestion]:
    return storage.get_suggestions(farmer_id)


@app.patch("/api/suggestions/{suggestion_id}", response_model=Suggestion)
def update_suggestion(suggestion_id: str, payload: SuggestionUpdate) -> Suggestion:
    suggestion = storage.update_suggestion(suggestion_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    if not suggestion:
        raise HTTPException(status_code=404, detail="Suggestion not found")
    return suggestion


@app.post("/api/generate-suggestions/{farmer_id}", response_model=List[Suggestion])
def generate_suggestions(farmer_id: str) -> List[Suggestion]:
    farmer = _require_farmer(farmer_id)
    advisor.generate_seasonal_suggestions(farmer)
    return storage.get_suggestions(farmer.id)


@app.get("/api/crop-calendar/{farmer_id}", response_model=List[FarmingTask])
def crop_calendar(farmer_id: str, month: Optional[int] = None) -> List[Dict]:
    farmer = _require_farmer(farmer_id)
    _check_month(month)
    return get_current_season_tasks(farmer.crops, farmer.land_type, farmer.district, month=month)


# --- Weather ---

@app.get("/api/weather/{district}", response_model=WeatherData)
def get_weather(district: str) -> WeatherData:
    return weather.get_weather(district, storage)


@app.get("/api/weather-advice/{farmer_id}", response_model=WeatherAdvice)
def get_weather_advice(farmer_id: str) -> WeatherAdvice:
    farmer = _require_farmer(farmer_id)
    report = weather.get_weather(farmer.district, storage)
    return WeatherAdvice(
        farmer_id=farmer.id,
        district=farmer.district,
        advice=advisor.generate_weather_advice(report, farmer),
        weather=report,
    )


# --- Market ---

@app.get("/api/market-prices", response_model=List[MarketPrice])
def market_prices(district: Optional[str] = None) -> List[MarketPrice]:
    return get_market_prices(storage, district)


# --- Reference data for the onboarding form ---

@app.get("/api/reference/districts")
def reference_districts(region: Optional[str] = None, climate: Optional[str] = None) -> List[Dict]:
    districts = kerala.get_districts_by_region(region) if region else kerala.KERALA_DISTRICTS
    if climate:
        by_climate = kerala.get_districts_by_climate(climate)
        districts = [d for d in districts if d in by_climate]
    return districts


@app.get("/api/reference/land-types", response_model=List[LandTypeInfo])
def reference_land_types() -> List[Dict]:
    return kerala.LAND_TYPES


@app.get("/api/reference/crops", response_model=List[CropOptionInfo])
def reference_crops(land_type: Optional[str] = Query(None, alias="landType"),
                    season: Optional[str] = None) -> List[Dict]:
    crops = kerala.get_crops_by_land_type(land_type) if land_type else kerala.CROP_OPTIONS
    if season:
        in_season = kerala.get_crops_by_season(season)
        crops = [c for c in crops if c in in_season]
    return crops


@app.get("/api/reference/experience-levels")
def reference_experience_levels() -> List[Dict]:
    return kerala.EXPERIENCE_LEVELS


@app.get("/api/reference/season", response_model=SeasonInfo)
def reference_season(land_type: Optional[str] = Query(None, alias="landType"),
                     month: Optional[int] = None) -> SeasonInfo:
    _check_month(month)
    month = month or datetime.now(IST).month
    season = kerala.get_current_season(month)
    kerala_season = kerala.get_kerala_season(month)
    return SeasonInfo(
        kerala_season=kerala_season,
        seasonal_crops=kerala.get_seasonal_crops(kerala_season, land_type) if land_type else [],
        **season,
    )


@app.get("/api/reference/recommendations")
def reference_recommendations(land_type: str = Query(..., alias="landType"),
                              district: str = "", experience: str = "") -> List[Dict]:
    return kerala.get_crop_recommendations(land_type, district, experience)


@app.get("/api/reference/crop-prices/{crop}")
def reference_crop_price(crop: str, month: Optional[int] = None) -> Dict:
    _check_month(month)
    info = kerala.get_crop_price_info(crop)
    if not info:
        raise HTTPException(status_code=404, detail="Crop not found")
    return {**info, "in_peak_season": kerala.is_harvest_season(crop, month)}


def _require_farmer(farmer_id: str) -> Farmer:
    farmer = storage.get_farmer(farmer_id)
    if not farmer:
        raise HTTPException(status_code=404, detail="Farmer not found")
    return farmer


def _check_month(month: Optional[int]) -> None:
    if month is not None and not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="month must be between 1 and 12")


def refresh_weather() -> None:
    """Re-fetch weather for every district that has a registered farmer."""
    print(f"\n[Scheduler] Weather refresh {datetime.now(IST).strftime('%Y-%m-%d %H:%M IST')}")
    districts = {f.district.lower(): f.district for f in storage.get_all_farmers()}
    if not districts:
        print("[Scheduler] No farmers registered -- skipping")
        return

    for district in districts.values():
        try:
            record = storage.create_weather_data(weather.fetch_live(district))
            print(f"  {district}: {record.temperature}, {record.rainfall}")
        except Exception as exc:
            print(f"  {district}: refresh failed, keeping stored record: {exc}")


scheduler = BackgroundScheduler(timezone=IST)

scheduler.add_job(
    refresh_weather,
    CronTrigger(hour="*/6", timezone=IST),
    id="weather_refresh",
    name="Weather refresh every 6 hours",
    replace_existing=True,
    misfire_grace_time=3600,   # fire within 1 hour of missed slot
)


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("server:app", host="0.0.0.0", port=port, reload=False)
