"""
Tests for the Kerala season buckets and rule-based task generation.
"""

from datetime import datetime, timedelta

from farmbot import kerala
from farmbot.crop_calendar import (
    get_current_season_tasks,
    get_seasonal_maintenance_tasks,
    validate_farmer_data,
)

NOW = kerala.IST.localize(datetime(2026, 6, 10, 9, 0))


# ============================================================
# Kerala seasons
# ============================================================

def test_kerala_season_buckets():
    assert [kerala.get_kerala_season(m) for m in (6, 7, 8, 9)] == ["monsoon"] * 4
    assert [kerala.get_kerala_season(m) for m in (10, 11, 12, 1, 2)] == ["post-monsoon"] * 5
    assert [kerala.get_kerala_season(m) for m in (3, 4, 5)] == ["summer"] * 3


def test_descriptive_season_lookup():
    assert kerala.get_current_season(7)["name"] == "Southwest Monsoon"
    assert kerala.get_current_season(1)["name"] == "Winter/Northeast Monsoon"
    assert kerala.get_current_season(4)["name"] == "Pre-Monsoon/Summer"


def test_seasonal_crops_default_for_unknown_land_type():
    assert kerala.get_seasonal_crops("summer", "plantation")[0] == "Coconut"
    assert kerala.get_seasonal_crops("monsoon", "rooftop") == ["Coconut", "Banana", "Vegetables"]


def test_reference_lookups():
    assert kerala.get_district("Wayanad")["climate"] == "highland"
    assert kerala.get_district("THRISSUR")["value"] == "thrissur"
    assert kerala.get_district("Chennai") is None
    assert {d["value"] for d in kerala.get_districts_by_region("south")} == {
        "alappuzha", "pathanamthitta", "kollam", "thiruvananthapuram"}
    assert [c["value"] for c in kerala.get_crops_by_land_type("paddy")] == [
        "rice", "coconut", "banana", "vegetables"]
    assert kerala.is_harvest_season("pepper", 1) is True
    assert kerala.is_harvest_season("pepper", 7) is False
    assert kerala.is_harvest_season("durian", 1) is False


def test_crop_recommendations_follow_experience():
    recs = kerala.get_crop_recommendations("upland", "idukki", "New Farmer")
    assert recs[0] == {"crop": "Vegetables", "reason": "High demand, good returns with proper care",
                       "difficulty": "easy"}
    assert kerala.get_crop_recommendations("upland", "idukki", "veteran")[0]["difficulty"] == "hard"
    assert kerala.get_crop_recommendations("desert", "idukki", "new") == []


# ============================================================
# Task generation
# ============================================================

def test_june_tasks_for_rice_and_pepper():
    tasks = get_current_season_tasks(["Rice", "Pepper"], "paddy", "thrissur", month=6, now=NOW)

    assert [t["title"] for t in tasks] == ["Plant Rice", "Plant Pepper", "Prepare for Monsoon"]
    assert tasks[0]["category"] == "planting"
    assert tasks[0]["priority"] == "high"
    assert "2-3 cm water level" in tasks[0]["description"]
    assert tasks[0]["due_date"] == NOW + timedelta(days=7)
    assert tasks[2]["due_date"] == NOW + timedelta(days=14)
    assert tasks[2]["land_types"] == ["paddy"]


def test_crop_match_is_case_insensitive_and_unknown_crops_skipped():
    tasks = get_current_season_tasks(["rice", "Cardamom"], "paddy", "thrissur", month=7, now=NOW)
    assert [t["title"] for t in tasks] == ["Plant rice"]
    assert get_current_season_tasks(["Cardamom"], "upland", "idukki", month=8, now=NOW) == []


def test_tasks_capped_at_five():
    tasks = get_current_season_tasks(
        ["Rice", "Coconut", "Banana", "Vegetables"], "upland", "kollam", month=10, now=NOW)

    assert len(tasks) == 5
    assert [t["title"] for t in tasks] == [
        "Harvest Rice", "Plant Coconut", "Harvest Coconut", "Plant Banana", "Harvest Banana"]


def test_maintenance_tasks_by_month():
    assert get_seasonal_maintenance_tasks(1, "paddy", "kollam", NOW) == []
    assert get_seasonal_maintenance_tasks(5, "paddy", "kollam", NOW)[0]["title"] == "Prepare for Monsoon"

    post = get_seasonal_maintenance_tasks(11, "paddy", "kollam", NOW)[0]
    assert (post["title"], post["priority"], post["category"]) == ("Post-Monsoon Field Care", "medium", "care")

    summer = get_seasonal_maintenance_tasks(3, "paddy", "kollam", NOW)[0]
    assert (summer["title"], summer["category"]) == ("Summer Water Management", "irrigation")


# ============================================================
# Onboarding validation
# ============================================================

def test_valid_farmer_data():
    ok, errors = validate_farmer_data({
        "name": "Raman", "district": "thrissur", "land_size": "2 acres",
        "land_type": "paddy", "experience": "new", "crops": ["Rice"],
    })
    assert ok is True
    assert errors == []


def test_invalid_farmer_data_lists_every_problem():
    ok, errors = validate_farmer_data({"name": " R ", "crops": []})
    assert ok is False
    assert errors == [
        "Name must be at least 2 characters long",
        "District is required",
        "Land size is required",
        "Land type is required",
        "Experience level is required",
        "At least one crop must be selected",
    ]
