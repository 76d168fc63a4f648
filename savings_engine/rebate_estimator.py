"""
Deterministic rebate estimate from a completed answer set.

This is a scoring table, not a model: each program below pays a fixed amount
into one of four buckets when all of its rules match the answers.
"""

REBATE_BUCKETS = ("federal", "provincial", "municipal", "utility")

MINIMUM_REBATE_BASELINE = 8000  # the estimate never drops below this
ANNUAL_SAVINGS_RATIO = 0.18  # 18% of the rebate total per year
CARBON_DOLLARS_PER_TONNE = 100  # rough: 1 tonne CO2/yr per $100 of rebates

# Postal code first letter -> province, used by the municipal programs
ONTARIO_PREFIXES = ["K", "L", "M", "N", "P"]
QUEBEC_PREFIXES = ["G", "H", "J"]
BC_PREFIXES = ["V"]
PRAIRIE_PREFIXES = ["R", "S", "T"]
ATLANTIC_PREFIXES = ["A", "B", "C", "E"]

# Structured definitions for each mocked incentive program
REBATE_RULES = [
    # =======================================================
    # 1. FEDERAL PROGRAMS
    # =======================================================
    {
        "id": "federal_heat_pump_oil",
        "name": "Oil to Heat Pump Affordability Grant",
        "bucket": "federal",
        "amount": 10000,
        "rules": [
            {"field": "heatingSystem", "condition": "is_equal_to", "value": "oil"}
        ],
    },
    {
        "id": "federal_heat_pump_fossil",
        "name": "Heat Pump Replacement Grant",
        "bucket": "federal",
        "amount": 5000,
        "rules": [
            {"field": "heatingSystem", "condition": "is_one_of", "value": ["propane", "electric"]}
        ],
    },
    {
        "id": "federal_deep_retrofit",
        "name": "Deep Retrofit Grant (Heritage Homes)",
        "bucket": "federal",
        "amount": 5000,
        "rules": [
            {"field": "homeAge", "condition": "is_equal_to", "value": "heritage"}
        ],
    },
    {
        "id": "federal_insulation",
        "name": "Home Insulation Grant",
        "bucket": "federal",
        "amount": 2500,
        "rules": [
            {"field": "insulationLevel", "condition": "is_one_of", "value": ["poor", "fair"]}
        ],
    },

    # =======================================================
    # 2. PROVINCIAL PROGRAMS
    # =======================================================
    {
        "id": "provincial_oil_conversion",
        "name": "Provincial Oil Furnace Conversion Rebate",
        "bucket": "provincial",
        "amount": 5000,
        "rules": [
            {"field": "heatingSystem", "condition": "is_equal_to", "value": "oil"}
        ],
    },
    {
        "id": "provincial_detached_envelope",
        "name": "Detached Home Envelope Rebate",
        "bucket": "provincial",
        "amount": 3000,
        "rules": [
            {"field": "propertyType", "condition": "is_equal_to", "value": "detached"}
        ],
    },
    {
        "id": "provincial_attached_envelope",
        "name": "Attached Home Envelope Rebate",
        "bucket": "provincial",
        "amount": 1500,
        "rules": [
            {"field": "propertyType", "condition": "is_one_of", "value": ["semi", "townhouse"]}
        ],
    },
    {
        "id": "provincial_older_home",
        "name": "Older Home Energy Audit Rebate",
        "bucket": "provincial",
        "amount": 2000,
        "rules": [
            {"field": "homeAge", "condition": "is_one_of", "value": ["established", "mature"]}
        ],
    },

    # =======================================================
    # 3. MUNICIPAL PROGRAMS (keyed on postal region)
    # =======================================================
    {
        "id": "municipal_ontario",
        "name": "Ontario Municipal Home Energy Loan Credit",
        "bucket": "municipal",
        "amount": 1000,
        "rules": [
            {"field": "postalCode", "condition": "starts_with_one_of", "value": ONTARIO_PREFIXES}
        ],
    },
    {
        "id": "municipal_quebec",
        "name": "Québec Municipal Renovation Credit",
        "bucket": "municipal",
        "amount": 750,
        "rules": [
            {"field": "postalCode", "condition": "starts_with_one_of", "value": QUEBEC_PREFIXES}
        ],
    },
    {
        "id": "municipal_bc",
        "name": "BC Municipal Top-Up",
        "bucket": "municipal",
        "amount": 1250,
        "rules": [
            {"field": "postalCode", "condition": "starts_with_one_of", "value": BC_PREFIXES}
        ],
    },
    {
        "id": "municipal_prairies",
        "name": "Prairie Municipal Retrofit Incentive",
        "bucket": "municipal",
        "amount": 600,
        "rules": [
            {"field": "postalCode", "condition": "starts_with_one_of", "value": PRAIRIE_PREFIXES}
        ],
    },
    {
        "id": "municipal_atlantic",
        "name": "Atlantic Municipal Efficiency Incentive",
        "bucket": "municipal",
        "amount": 800,
        "rules": [
            {"field": "postalCode", "condition": "starts_with_one_of", "value": ATLANTIC_PREFIXES}
        ],
    },

    # =======================================================
    # 4. UTILITY PROGRAMS
    # =======================================================
    {
        "id": "utility_smart_thermostat_gas",
        "name": "Gas Utility Smart Thermostat & Furnace Tune-Up",
        "bucket": "utility",
        "amount": 800,
        "rules": [
            {"field": "heatingSystem", "condition": "is_equal_to", "value": "gas"}
        ],
    },
    {
        "id": "utility_electric_load",
        "name": "Electric Utility Peak Saver",
        "bucket": "utility",
        "amount": 600,
        "rules": [
            {"field": "heatingSystem", "condition": "is_one_of", "value": ["electric", "heatpump"]}
        ],
    },
    {
        "id": "utility_air_sealing",
        "name": "Utility Air Sealing Rebate",
        "bucket": "utility",
        "amount": 1200,
        "rules": [
            {"field": "insulationLevel", "condition": "is_one_of", "value": ["poor", "fair"]},
            {"field": "propertyType", "condition": "is_one_of", "value": ["detached", "semi", "townhouse"]},
        ],
    },
]

BASELINE_LINE_ITEM = {
    "id": "federal_baseline",
    "name": "Canada-wide Energy Efficiency Baseline",
    "bucket": "federal",
}


def _rule_matches(rule, answers):
    user_value = answers.get(rule["field"])
    if user_value is None or user_value == "":
        return False  # Can't evaluate if data is missing

    condition = rule["condition"]
    required_value = rule["value"]
    if condition == "is_equal_to":
        return user_value == required_value
    if condition == "is_one_of":
        return user_value in required_value
    if condition == "starts_with_one_of":
        return str(user_value).strip().upper()[:1] in required_value
    raise ValueError(f"Unknown rebate rule condition: '{condition}'")


def find_matching_programs(answers):
    """Returns the REBATE_RULES programs whose rules all match, in table order."""
    return [program for program in REBATE_RULES
            if all(_rule_matches(rule, answers) for rule in program["rules"])]


def estimate_rebates(answers):
    """
    Maps an answer set to a rebate estimate:
      total, breakdown (federal/provincial/municipal/utility), annual_savings,
      carbon_reduction_tonnes, payback_years and the matched line_items.
    The same answers always produce the same result.
    """
    breakdown = {bucket: 0 for bucket in REBATE_BUCKETS}
    line_items = []

    for program in find_matching_programs(answers):
        breakdown[program["bucket"]] += program["amount"]
        line_items.append({"id": program["id"], "name": program["name"],
                           "bucket": program["bucket"], "amount": program["amount"]})

    # Floor the total; the top-up is booked as a federal line so the buckets still add up
    subtotal = sum(breakdown.values())
    if subtotal < MINIMUM_REBATE_BASELINE:
        top_up = MINIMUM_REBATE_BASELINE - subtotal
        breakdown[BASELINE_LINE_ITEM["bucket"]] += top_up
        line_items.append({**BASELINE_LINE_ITEM, "amount": top_up})

    total = sum(breakdown.values())
    annual_savings = round(total * ANNUAL_SAVINGS_RATIO)
    results = {
        "total": total,
        "breakdown": breakdown,
        "annual_savings": annual_savings,
        "carbon_reduction_tonnes": round(total / CARBON_DOLLARS_PER_TONNE),
        "payback_years": round(total / annual_savings) if annual_savings > 0 else 0,
        "line_items": line_items,
    }
    return results


# --- Recommended upgrades shown on the results page ---
UPGRADE_RECOMMENDATIONS = [
    {
        "id": "heat_pump",
        "title": "Heat Pump Installation",
        "description": "Replace your oil heating with an efficient heat pump. Up to $15,000 in rebates available.",
        "rules": [{"field": "heatingSystem", "condition": "is_one_of", "value": ["oil", "propane"]}],
    },
    {
        "id": "insulation",
        "title": "Insulation Upgrade",
        "description": "Improve your home's thermal envelope. Rebates up to $3,000 available.",
        "rules": [],
    },
    {
        "id": "windows_doors",
        "title": "Windows & Doors",
        "description": "Energy-efficient windows can save 10-15% on energy bills.",
        "rules": [],
    },
]


def recommend_upgrades(answers):
    return [{"id": r["id"], "title": r["title"], "description": r["description"]}
            for r in UPGRADE_RECOMMENDATIONS
            if all(_rule_matches(rule, answers) for rule in r["rules"])]
