"""
Tests for FarmAdvisor prompts, suggestion storage and fallbacks.
"""

from datetime import datetime, timedelta

from conftest import StubLLM
from farmbot.advisor import EMPTY_REPLY, OFFLINE_REPLY, FarmAdvisor, normalise_priority
from farmbot.kerala import IST
from farmbot.schemas import ChatMessageCreate
from farmbot.weather import sample_weather

JUNE = IST.localize(datetime(2026, 6, 10, 9, 0))
JANUARY = IST.localize(datetime(2026, 1, 15, 9, 0))


# ============================================================
# Chat
# ============================================================

def test_chat_prompt_carries_profile(storage, farmer):
    llm = StubLLM(reply="Use neem oil 🌿")
    advisor = FarmAdvisor(storage, llm)

    assert advisor.generate_farming_response("How to stop stem borer?", farmer) == "Use neem oil 🌿"
    prompt = llm.prompts[0]
    assert "Location: Thrissur, Kerala" in prompt
    assert "Crops: Rice, Coconut" in prompt
    assert 'Farmer\'s question: "How to stop stem borer?"' in prompt


def test_chat_without_profile(storage):
    llm = StubLLM()
    FarmAdvisor(storage, llm).generate_farming_response("Best monsoon crops?", None)
    assert "Farmer Profile" not in llm.prompts[0]


def test_chat_fallbacks(storage, farmer):
    assert FarmAdvisor(storage, StubLLM(fail=True)).generate_farming_response("hi", farmer) == OFFLINE_REPLY
    assert FarmAdvisor(storage, StubLLM(reply="")).generate_farming_response("hi", farmer) == EMPTY_REPLY


def test_answer_chat_stores_reply(storage, farmer):
    message = storage.create_chat_message(ChatMessageCreate(farmer_id=farmer.id, message="hello"))
    answered = FarmAdvisor(storage, StubLLM(reply="Namaskaram!")).answer_chat(message.id, "hello", farmer)
    assert answered.response == "Namaskaram!"
    assert storage.get_chat_messages(farmer.id)[0].response == "Namaskaram!"


# ============================================================
# Suggestions
# ============================================================

def test_normalise_priority():
    assert normalise_priority("HIGH") == "high"
    assert normalise_priority(" low ") == "low"
    assert normalise_priority("urgent") == "medium"
    assert normalise_priority(None) == "medium"


def test_initial_suggestions_from_llm(storage, farmer):
    llm = StubLLM()
    stored = FarmAdvisor(storage, llm).generate_initial_suggestions(farmer, now=JANUARY)

    assert [s.title for s in stored] == ["Apply compost", "Check drainage", "Scout for pests"]
    assert [s.priority for s in stored] == ["high", "medium", "low"]
    assert stored[2].category == "care"
    assert all(s.due_date == JANUARY + timedelta(days=7) for s in stored)
    assert all(s.farmer_id == farmer.id for s in stored)
    assert "Current season: post-monsoon (Month: 1)" in llm.prompts[0]


def test_initial_suggestions_fall_back_to_crop_calendar(storage, farmer):
    stored = FarmAdvisor(storage, StubLLM(fail=True)).generate_initial_suggestions(farmer, now=JUNE)

    # June: rice planting, coconut harvest (year-round), monsoon prep
    assert [s.title for s in stored] == ["Plant Rice", "Harvest Coconut", "Prepare for Monsoon"]
    assert len(storage.get_suggestions(farmer.id)) == 3


def test_llm_items_without_title_are_dropped(storage, farmer):
    llm = StubLLM(suggestions=[{"description": "no title"}, "junk", {"title": "Weed paddy"}])
    stored = FarmAdvisor(storage, llm).generate_initial_suggestions(farmer, now=JUNE)
    assert [s.title for s in stored] == ["Weed paddy"]


def test_seasonal_suggestions(storage, farmer):
    llm = StubLLM(suggestions=[{"title": "Drain fields", "description": "Open bunds", "priority": "high"}])
    stored = FarmAdvisor(storage, llm).generate_seasonal_suggestions(farmer, now=JUNE)

    assert stored[0].category == "seasonal"
    assert stored[0].due_date == JUNE + timedelta(days=14)
    assert "for monsoon season in Kerala" in llm.prompts[0]


def test_seasonal_suggestions_fallback(storage, farmer):
    stored = FarmAdvisor(storage, StubLLM(fail=True)).generate_seasonal_suggestions(farmer, now=JUNE)
    assert [s.title for s in stored] == ["Prepare for Monsoon"]
    assert stored[0].due_date == JUNE + timedelta(days=14)


# ============================================================
# Weather advice
# ============================================================

def test_weather_advice_uses_llm_then_rules(storage, farmer):
    weather = storage.create_weather_data(sample_weather("Thrissur"))

    llm = StubLLM(reply="Hold irrigation until Thursday.")
    assert FarmAdvisor(storage, llm).generate_weather_advice(weather, farmer) == "Hold irrigation until Thursday."
    assert "Light Rain (60% rain)" in llm.prompts[0]

    fallback = FarmAdvisor(storage, StubLLM(fail=True)).generate_weather_advice(weather, farmer)
    assert fallback == weather.farming_advice


def test_empty_llm_suggestions_fall_back_to_crop_calendar(storage, farmer):
    stored = FarmAdvisor(storage, StubLLM(suggestions=[])).generate_initial_suggestions(farmer, now=JUNE)
    assert [s.title for s in stored] == ["Plant Rice", "Harvest Coconut", "Prepare for Monsoon"]

    untitled = StubLLM(suggestions=[{"description": "no title"}])
    stored = FarmAdvisor(storage, untitled).generate_seasonal_suggestions(farmer, now=JUNE)
    assert [s.title for s in stored] == ["Prepare for Monsoon"]
