"""
Kerala reference data: districts, land types, crops, seasons and base prices.

Everything here is static lookup data plus small filters over it. Months are
1-12 throughout.
"""

from datetime import datetime
from typing import Dict, List, Optional

import pytz

IST = pytz.timezone("Asia/Kolkata")


KERALA_DISTRICTS: List[Dict] = [
    # Northern Kerala
    {"value": "kasaragod", "label": "Kasaragod", "region": "north", "climate": "coastal", "latitude": 12.4996, "longitude": 74.9869},
    {"value": "kannur", "label": "Kannur", "region": "north", "climate": "coastal", "latitude": 11.8745, "longitude": 75.3704},
    {"value": "wayanad", "label": "Wayanad", "region": "north", "climate": "highland", "latitude": 11.6854, "longitude": 76.1320},
    {"value": "kozhikode", "label": "Kozhikode", "region": "north", "climate": "coastal", "latitude": 11.2588, "longitude": 75.7804},
    {"value": "malappuram", "label": "Malappuram", "region": "north", "climate": "midland", "latitude": 11.0510, "longitude": 76.0711},
    # Central Kerala
    {"value": "palakkad", "label": "Palakkad", "region": "central", "climate": "midland", "latitude": 10.7867, "longitude": 76.6548},
    {"value": "thrissur", "label": "Thrissur", "region": "central", "climate": "coastal", "latitude": 10.5276, "longitude": 76.2144},
    {"value": "ernakulam", "label": "Ernakulam", "region": "central", "climate": "coastal", "latitude": 9.9312, "longitude": 76.2673},
    {"value": "idukki", "label": "Idukki", "region": "central", "climate": "highland", "latitude": 9.9100, "longitude": 76.9700},
    {"value": "kottayam", "label": "Kottayam", "region": "central", "climate": "midland", "latitude": 9.5916, "longitude": 76.5222},
    # Southern Kerala
    {"value": "alappuzha", "label": "Alappuzha", "region": "south", "climate": "coastal", "latitude": 9.4981, "longitude": 76.3388},
    {"value": "pathanamthitta", "label": "Pathanamthitta", "region": "south", "climate": "midland", "latitude": 9.2648, "longitude": 76.7870},
    {"value": "kollam", "label": "Kollam", "region": "south", "climate": "coastal", "latitude": 8.8932, "longitude": 76.6141},
    {"value": "thiruvananthapuram", "label": "Thiruvananthapuram", "region": "south", "climate": "coastal", "latitude": 8.5241, "longitude": 76.9366},
]

LAND_TYPES: List[Dict] = [
    {
        "value": "paddy",
        "label": "Paddy/Wetland",
        "description": "For rice cultivation",
        "icon": "💧",
        "suitable_crops": ["Rice", "Coconut", "Banana", "Fish", "Duck"],
    },
    {
        "value": "upland",
        "label": "Upland/Garden",
        "description": "For vegetables, fruits",
        "icon": "🏔️",
        "suitable_crops": ["Vegetables", "Fruits", "Pepper", "Cardamom", "Coffee"],
    },
    {
        "value": "plantation",
        "label": "Plantation",
        "description": "Coconut, rubber, spices",
        "icon": "🌴",
        "suitable_crops": ["Coconut", "Rubber", "Pepper", "Cardamom", "Coffee", "Cashew"],
    },
]

CROP_OPTIONS: List[Dict] = [
    {"value": "rice", "label": "Rice", "icon": "🌾", "season": "monsoon", "land_types": ["paddy"]},
    {"value": "coconut", "label": "Coconut", "icon": "🥥", "season": "all", "land_types": ["paddy", "upland", "plantation"]},
    {"value": "pepper", "label": "Pepper", "icon": "🌶️", "season": "post-monsoon", "land_types": ["upland", "plantation"]},
    {"value": "cardamom", "label": "Cardamom", "icon": "🌿", "season": "all", "land_types": ["upland", "plantation"]},
    {"value": "coffee", "label": "Coffee", "icon": "☕", "season": "all", "land_types": ["upland", "plantation"]},
    {"value": "rubber", "label": "Rubber", "icon": "🌳", "season": "all", "land_types": ["plantation"]},
    {"value": "banana", "label": "Banana", "icon": "🍌", "season": "all", "land_types": ["paddy", "upland"]},
    {"value": "vegetables", "label": "Vegetables", "icon": "🥬", "season": "post-monsoon", "land_types": ["paddy", "upland"]},
    {"value": "fruits", "label": "Fruits", "icon": "🍎", "season": "all", "land_types": ["upland", "plantation"]},
    {"value": "ginger", "label": "Ginger", "icon": "🫚", "season": "monsoon", "land_types": ["upland"]},
    {"value": "turmeric", "label": "Turmeric", "icon": "🟡", "season": "monsoon", "land_types": ["upland"]},
    {"value": "cashew", "label": "Cashew", "icon": "🥜", "season": "all", "land_types": ["plantation"]},
]

EXPERIENCE_LEVELS: List[Dict] = [
    {"value": "new", "label": "New Farmer", "description": "Less than 2 years"},
    {"value": "experienced", "label": "Experienced", "description": "2-10 years"},
    {"value": "veteran", "label": "Veteran Farmer", "description": "10+ years"},
]

# Descriptive calendar shown to farmers (four periods)
KERALA_SEASONS: List[Dict] = [
    {
        "name": "Pre-Monsoon/Summer",
        "months": [3, 4, 5],
        "description": "Hot and dry period, water management critical",
        "main_activities": [
            "Harvest summer crops",
            "Prepare fields for monsoon",
            "Water management",
            "Shade protection for plants",
        ],
    },
    {
        "name": "Southwest Monsoon",
        "months": [6, 7, 8, 9],
        "description": "Heavy rainfall period, main planting season",
        "main_activities": [
            "Plant rice and other monsoon crops",
            "Manage drainage",
            "Pest and disease control",
            "Weed management",
        ],
    },
    {
        "name": "Post-Monsoon",
        "months": [10, 11],
        "description": "Retreating monsoon, ideal for many crops",
        "main_activities": [
            "Plant winter vegetables",
            "Harvest monsoon crops",
            "Field preparation",
            "Irrigation setup",
        ],
    },
    {
        "name": "Winter/Northeast Monsoon",
        "months": [12, 1, 2],
        "description": "Cool and pleasant, good for vegetables and fruits",
        "main_activities": [
            "Vegetable cultivation",
            "Fruit harvesting",
            "Land preparation",
            "Organic matter addition",
        ],
    },
]

ALL_MONTHS = list(range(1, 13))

KERALA_CROP_PRICES: List[Dict] = [
    {"crop": "Rice", "base_price": 2800, "unit": "quintal", "seasonal": False,
     "peak_months": [4, 5, 11, 12], "market_centers": ["Palakkad", "Alappuzha", "Thrissur"]},
    {"crop": "Coconut", "base_price": 25, "unit": "piece", "seasonal": False,
     "peak_months": ALL_MONTHS, "market_centers": ["Pollachi", "Kozhikode", "Ernakulam"]},
    {"crop": "Pepper", "base_price": 450, "unit": "kg", "seasonal": True,
     "peak_months": [12, 1, 2, 3], "market_centers": ["Kochi", "Idukki", "Wayanad"]},
    {"crop": "Cardamom", "base_price": 1200, "unit": "kg", "seasonal": True,
     "peak_months": [10, 11, 12, 1], "market_centers": ["Kumily", "Vandiperiyar", "Idukki"]},
    {"crop": "Coffee", "base_price": 180, "unit": "kg", "seasonal": True,
     "peak_months": [12, 1, 2, 3, 4], "market_centers": ["Wayanad", "Idukki", "Nelliampathy"]},
    {"crop": "Rubber", "base_price": 160, "unit": "kg", "seasonal": False,
     "peak_months": ALL_MONTHS, "market_centers": ["Kottayam", "Pathanamthitta", "Kollam"]},
    {"crop": "Banana", "base_price": 30, "unit": "kg", "seasonal": False,
     "peak_months": ALL_MONTHS, "market_centers": ["Thrissur", "Ernakulam", "Wayanad"]},
]

SEASONAL_CROPS: Dict[str, Dict[str, List[str]]] = {
    "monsoon": {
        "paddy": ["Rice", "Coconut", "Banana", "Ginger", "Turmeric"],
        "upland": ["Pepper", "Cardamom", "Coffee", "Rubber", "Vegetables"],
        "plantation": ["Coconut", "Rubber", "Pepper", "Cardamom", "Coffee"],
    },
    "post-monsoon": {
        "paddy": ["Vegetables", "Coconut", "Banana", "Rice (second crop)"],
        "upland": ["Vegetables", "Fruits", "Spices", "Pepper", "Cardamom"],
        "plantation": ["Coconut", "Fruits", "Spices", "Coffee"],
    },
    "summer": {
        "paddy": ["Summer Rice", "Coconut", "Banana", "Vegetables (with irrigation)"],
        "upland": ["Fruits", "Vegetables (shade)", "Spices", "Coconut"],
        "plantation": ["Coconut", "Mango", "Jackfruit", "Cashew"],
    },
}

DEFAULT_SEASONAL_CROPS = ["Coconut", "Banana", "Vegetables"]


def current_month() -> int:
    return datetime.now(IST).month


def get_kerala_season(month: Optional[int] = None) -> str:
    """
    Three-bucket Kerala season used to pick seasonal advice.

      monsoon      - June to September
      post-monsoon - October to February (wraps the year end)
      summer       - March to May
    """
    month = month or current_month()
    if 6 <= month <= 9:
        return "monsoon"
    if month >= 10 or month <= 2:
        return "post-monsoon"
    return "summer"


def get_district(value: str) -> Optional[Dict]:
    """Look a district up by value or label, ignoring case."""
    key = (value or "").strip().lower()
    for district in KERALA_DISTRICTS:
        if key in (district["value"], district["label"].lower()):
            return district
    return None


def get_districts_by_region(region: str) -> List[Dict]:
    return [d for d in KERALA_DISTRICTS if d["region"] == region]


def get_districts_by_climate(climate: str) -> List[Dict]:
    return [d for d in KERALA_DISTRICTS if d["climate"] == climate]


def get_crops_by_land_type(land_type: str) -> List[Dict]:
    return [c for c in CROP_OPTIONS if land_type in c["land_types"]]


def get_crops_by_season(season: str) -> List[Dict]:
    return [c for c in CROP_OPTIONS if c["season"] in (season, "all")]


def get_current_season(month: Optional[int] = None) -> Dict:
    month = month or current_month()
    for season in KERALA_SEASONS:
        if month in season["months"]:
            return season
    return KERALA_SEASONS[0]


def get_crop_price_info(crop_name: str) -> Optional[Dict]:
    for info in KERALA_CROP_PRICES:
        if info["crop"].lower() == crop_name.lower():
            return info
    return None


def is_harvest_season(crop_name: str, month: Optional[int] = None) -> bool:
    info = get_crop_price_info(crop_name)
    if not info:
        return False
    return (month or current_month()) in info["peak_months"]


def get_seasonal_crops(season: str, land_type: str) -> List[str]:
    return SEASONAL_CROPS.get(season, {}).get(land_type, DEFAULT_SEASONAL_CROPS)


def _difficulty_for_experience(experience: str) -> str:
    if experience in ("new", "New Farmer"):
        return "easy"
    if experience in ("experienced", "Experienced"):
        return "medium"
    return "hard"


def get_crop_recommendations(land_type: str, district: str, experience: str) -> List[Dict]:
    """Up to three crops suited to the land type, with a reason and difficulty."""
    if land_type == "paddy":
        recommendations = [
            {"crop": "Rice", "reason": "Traditional crop, well-suited for wetland cultivation", "difficulty": "medium"},
            {"crop": "Coconut", "reason": "Long-term investment with steady income", "difficulty": "easy"},
            {"crop": "Banana", "reason": "Quick returns, grows well in Kerala climate", "difficulty": "easy"},
        ]
    elif land_type == "upland":
        recommendations = [
            {"crop": "Vegetables", "reason": "High demand, good returns with proper care",
             "difficulty": _difficulty_for_experience(experience)},
            {"crop": "Pepper", "reason": "High-value spice crop, traditional in Kerala", "difficulty": "medium"},
            {"crop": "Fruits", "reason": "Diversified income, local market demand", "difficulty": "medium"},
        ]
    elif land_type == "plantation":
        recommendations = [
            {"crop": "Coconut", "reason": "Main plantation crop in Kerala", "difficulty": "easy"},
            {"crop": "Rubber", "reason": "Good long-term income in suitable areas", "difficulty": "hard"},
            {"crop": "Coffee", "reason": "Premium crop for hill regions", "difficulty": "medium"},
        ]
    else:
        recommendations = []
    return recommendations[:3]
