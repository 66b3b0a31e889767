"""
FarmBot Kerala - Core Modules Package

Modules:
    - storage: In-memory record store for farmers, chat, suggestions, weather, prices
    - kerala: Kerala districts, land types, crops, seasons and reference prices
    - crop_calendar: Rule-based seasonal task generation
    - weather: Open-Meteo integration and farming advice rules
    - llm_manager: Cloud (OpenAI) / local (Ollama) LLM interface
    - advisor: Prompt building and fallbacks for chat and suggestions
    - market: Market price sampling
    - schemas: Request/response models for the HTTP API
"""

__version__ = "1.0.0"
__author__ = "FarmBot Kerala Team"
__description__ = "AI farming assistant for Kerala smallholder farmers"

from . import storage
from . import kerala
from . import crop_calendar
from . import weather
from . import llm_manager
from . import advisor
from . import market
from . import schemas

__all__ = [
    'storage',
    'kerala',
    'crop_calendar',
    'weather',
    'llm_manager',
    'advisor',
    'market',
    'schemas',
]
