from typing import List, Optional

from farmbot.schemas import MarketPrice, MarketPriceCreate

SAMPLE_MARKET_PRICES = [
    {"crop": "Tomatoes", "price_per_kg": "₹45", "change": "+15%", "trend": "up"},
    {"crop": "Chilli", "price_per_kg": "₹120", "change": "-8%", "trend": "down"},
    {"crop": "Onions", "price_per_kg": "₹35", "change": "0%", "trend": "stable"},
    {"crop": "Rice", "price_per_kg": "₹2,800", "change": "+5%", "trend": "up"},
    {"crop": "Coconut", "price_per_kg": "₹25", "change": "+3%", "trend": "up"},
]


def generate_sample_market_prices(storage, district: Optional[str] = None) -> List[MarketPrice]:
    """Store the sample price sheet for a district (or Kerala-wide) and return it."""
    return [
        storage.create_market_price(MarketPriceCreate(**row, district=district or "Kerala"))
        for row in SAMPLE_MARKET_PRICES
    ]


def get_market_prices(storage, district: Optional[str] = None) -> List[MarketPrice]:
    prices = storage.get_market_prices(district)
    if not prices:
        print(f"[Market] No prices stored for {district or 'Kerala'} - using sample sheet")
        prices = generate_sample_market_prices(storage, district)
    return prices
