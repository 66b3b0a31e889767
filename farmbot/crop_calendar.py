"""
Rule-based farming tasks from the Kerala crop calendar.

Maps (crops, land type, month) to planting/harvest tasks and adds the
seasonal maintenance jobs (monsoon prep, post-monsoon care, summer water
management). Used directly by the crop-calendar endpoint and as the
fallback whenever the LLM cannot produce suggestions.
"""

import time
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from farmbot.kerala import IST, current_month

MAX_TASKS = 5
CROP_TASK_DUE_DAYS = 7
SEASONAL_TASK_DUE_DAYS = 14

KERALA_CROP_CALENDAR: List[Dict] = [
    {
        "crop": "Rice",
        "planting_months": [6, 7, 11, 12],   # Jun-Jul (Kharif), Nov-Dec (Rabi)
        "harvest_months": [10, 11, 3, 4],
        "care": {
            "watering": "Maintain 2-3 cm water level during growing season",
            "fertilizer": "Organic compost before planting, urea during tillering",
            "pest_control": "Neem oil spray, encourage beneficial insects",
        },
    },
    {
        "crop": "Coconut",
        "planting_months": [4, 5, 9, 10],
        "harvest_months": list(range(1, 13)),
        "care": {
            "watering": "Deep watering during dry months, mulching around base",
            "fertilizer": "Organic manure twice yearly, potash for better yield",
            "pest_control": "Regular inspection for rhinoceros beetle, red palm weevil",
        },
    },
    {
        "crop": "Pepper",
        "planting_months": [5, 6],
        "harvest_months": [12, 1, 2],
        "care": {
            "watering": "Regular watering, avoid waterlogging",
            "fertilizer": "Organic compost, bone meal for flowering",
            "pest_control": "Bordeaux mixture for fungal diseases",
        },
    },
    {
        "crop": "Vegetables",
        "planting_months": [10, 11, 12, 1],  # winter vegetables
        "harvest_months": [12, 1, 2, 3],
        "care": {
            "watering": "Morning watering, drip irrigation preferred",
            "fertilizer": "Compost before planting, liquid fertilizer bi-weekly",
            "pest_control": "Companion planting, organic sprays",
        },
    },
    {
        "crop": "Banana",
        "planting_months": [4, 5, 9, 10],
        "harvest_months": [1, 2, 3, 7, 8, 9, 10, 11, 12],
        "care": {
            "watering": "Consistent moisture, mulching recommended",
            "fertilizer": "High potash fertilizer, organic matter",
            "pest_control": "Remove diseased leaves, proper spacing",
        },
    },
]


def get_crop_info(crop: str) -> Optional[Dict]:
    for entry in KERALA_CROP_CALENDAR:
        if entry["crop"].lower() == crop.strip().lower():
            return entry
    return None


def _task(task_id: str, title: str, description: str, priority: str, category: str,
          due_date: datetime, land_type: str, crops: Optional[List[str]] = None) -> Dict:
    return {
        "id": task_id,
        "title": title,
        "description": description,
        "priority": priority,
        "category": category,
        "due_date": due_date,
        "is_completed": False,
        "crops": crops or [],
        "land_types": [land_type],
    }


def get_seasonal_maintenance_tasks(month: int, land_type: str, district: str,
                                   now: Optional[datetime] = None) -> List[Dict]:
    now = now or datetime.now(IST)
    due = now + timedelta(days=SEASONAL_TASK_DUE_DAYS)
    stamp = int(time.time() * 1000)
    tasks = []

    if 5 <= month <= 6:
        tasks.append(_task(
            f"monsoon-prep-{stamp}",
            "Prepare for Monsoon",
            "Clean drainage channels, secure plant supports, check irrigation systems",
            "high", "seasonal", due, land_type,
        ))

    if 10 <= month <= 11:
        tasks.append(_task(
            f"post-monsoon-{stamp}",
            "Post-Monsoon Field Care",
            "Check for waterlogging, fungal diseases, and damaged plants",
            "medium", "care", due, land_type,
        ))

    if 2 <= month <= 3:
        tasks.append(_task(
            f"summer-prep-{stamp}",
            "Summer Water Management",
            "Set up shade nets, check irrigation, mulch around plants",
            "high", "irrigation", due, land_type,
        ))

    return tasks


def get_current_season_tasks(crops: List[str], land_type: str, district: str,
                             month: Optional[int] = None,
                             now: Optional[datetime] = None) -> List[Dict]:
    """Planting/harvest tasks for the farmer's crops plus seasonal upkeep, top 5."""
    month = month or current_month()
    now = now or datetime.now(IST)
    due = now + timedelta(days=CROP_TASK_DUE_DAYS)
    stamp = int(time.time() * 1000)
    tasks: List[Dict] = []

    for crop in crops:
        info = get_crop_info(crop)
        if not info:
            continue
        task_id = f"{crop}-{month}-{stamp}"

        if month in info["planting_months"]:
            tasks.append(_task(
                f"plant-{task_id}",
                f"Plant {crop}",
                f"Optimal time to plant {crop}. {info['care']['watering']}",
                "high", "planting", due, land_type, [crop],
            ))

        if month in info["harvest_months"]:
            tasks.append(_task(
                f"harvest-{task_id}",
                f"Harvest {crop}",
                f"Time to harvest {crop}. Check for ripeness and weather conditions.",
                "high", "harvest", due, land_type, [crop],
            ))

    tasks.extend(get_seasonal_maintenance_tasks(month, land_type, district, now))
    return tasks[:MAX_TASKS]


def validate_farmer_data(data: Dict) -> Tuple[bool, List[str]]:
    """Onboarding form checks. Returns (is_valid, errors)."""
    errors = []

    name = data.get("name") or ""
    if len(name.strip()) < 2:
        errors.append("Name must be at least 2 characters long")
    if not data.get("district"):
        errors.append("District is required")
    if not data.get("land_size"):
        errors.append("Land size is required")
    if not data.get("land_type"):
        errors.append("Land type is required")
    if not data.get("experience"):
        errors.append("Experience level is required")
    if not data.get("crops"):
        errors.append("At least one crop must be selected")

    return (len(errors) == 0, errors)
