import copy
import sys
import os
import pytest

current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

from savings_engine.rebate_estimator import (
    MINIMUM_REBATE_BASELINE,
    REBATE_BUCKETS,
    _rule_matches,
    estimate_rebates,
    find_matching_programs,
    recommend_upgrades,
)


# ============ TEST DATA & FIXTURES ============
@pytest.fixture
def profiles():
    """Answer sets for a few typical homes."""
    return {
        "Ottawa_Condo_Gas": {
            "postalCode": "K1A 0A6",
            "propertyType": "condo",
            "heatingSystem": "gas",
            "homeAge": "new",
            "insulationLevel": "good",
        },
        "Vancouver_Heritage_Oil": {
            "postalCode": "V6B 1A1",
            "propertyType": "detached",
            "heatingSystem": "oil",
            "homeAge": "heritage",
            "insulationLevel": "poor",
        },
        "Montreal_Townhouse_Electric": {
            "postalCode": "H2X 1Y4",
            "propertyType": "townhouse",
            "heatingSystem": "electric",
            "homeAge": "established",
            "insulationLevel": "fair",
        },
    }


def test_small_estimate_is_topped_up_to_the_baseline(profiles):
    results = estimate_rebates(profiles["Ottawa_Condo_Gas"])

    # Ontario municipal 1000 + gas utility 800, topped up federally to 8000
    assert results["total"] == MINIMUM_REBATE_BASELINE
    assert results["breakdown"] == {"federal": 6200, "provincial": 0, "municipal": 1000, "utility": 800}
    assert results["line_items"][-1]["id"] == "federal_baseline"
    assert results["line_items"][-1]["amount"] == 6200
    assert results["annual_savings"] == 1440
    assert results["carbon_reduction_tonnes"] == 80
    assert results["payback_years"] == 6


def test_oil_heated_heritage_detached_home(profiles):
    results = estimate_rebates(profiles["Vancouver_Heritage_Oil"])

    assert results["breakdown"] == {"federal": 17500, "provincial": 8000, "municipal": 1250, "utility": 1200}
    assert results["total"] == 27950
    assert results["annual_savings"] == 5031
    assert results["payback_years"] == 6
    assert "federal_baseline" not in [item["id"] for item in results["line_items"]]


def test_oil_heating_adds_fifteen_thousand():
    gas_home = {"postalCode": "K1A 0A6", "propertyType": "condo", "heatingSystem": "gas",
                "homeAge": "new", "insulationLevel": "excellent"}
    oil_home = dict(gas_home, heatingSystem="oil")
    oil_programs = [p for p in find_matching_programs(oil_home) if p["id"] not in
                    {q["id"] for q in find_matching_programs(gas_home)}]
    assert sum(p["amount"] for p in oil_programs) == 15000


@pytest.mark.parametrize("profile_name", ["Ottawa_Condo_Gas", "Vancouver_Heritage_Oil", "Montreal_Townhouse_Electric"])
def test_buckets_and_line_items_add_up_to_total(profiles, profile_name):
    results = estimate_rebates(profiles[profile_name])
    assert set(results["breakdown"]) == set(REBATE_BUCKETS)
    assert sum(results["breakdown"].values()) == results["total"]
    assert sum(item["amount"] for item in results["line_items"]) == results["total"]
    assert results["total"] >= MINIMUM_REBATE_BASELINE


def test_estimate_is_pure(profiles):
    answers = profiles["Montreal_Townhouse_Electric"]
    snapshot = copy.deepcopy(answers)
    assert estimate_rebates(answers) == estimate_rebates(answers)
    assert answers == snapshot


def test_empty_answers_give_only_the_baseline():
    results = estimate_rebates({})
    assert results["total"] == MINIMUM_REBATE_BASELINE
    assert [item["id"] for item in results["line_items"]] == ["federal_baseline"]


@pytest.mark.parametrize("postal_code, expected_program", [
    ("K1A 0A6", "municipal_ontario"),
    ("h2x 1y4", "municipal_quebec"),
    ("V6B 1A1", "municipal_bc"),
    ("T2P 1J9", "municipal_prairies"),
    ("B3H 1A1", "municipal_atlantic"),
])
def test_municipal_program_follows_postal_region(postal_code, expected_program):
    matched = [p["id"] for p in find_matching_programs({"postalCode": postal_code}) if p["bucket"] == "municipal"]
    assert matched == [expected_program]


def test_unknown_rule_condition_raises():
    with pytest.raises(ValueError):
        _rule_matches({"field": "homeAge", "condition": "is_older_than", "value": 1950}, {"homeAge": "heritage"})


@pytest.mark.parametrize("heating, expected_ids", [
    ("oil", ["heat_pump", "insulation", "windows_doors"]),
    ("propane", ["heat_pump", "insulation", "windows_doors"]),
    ("gas", ["insulation", "windows_doors"]),
    ("", ["insulation", "windows_doors"]),
])
def test_recommend_upgrades(heating, expected_ids):
    assert [r["id"] for r in recommend_upgrades({"heatingSystem": heating})] == expected_ids
