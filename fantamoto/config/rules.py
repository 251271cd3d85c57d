MOTOGP_CATEGORY_TABLE_2025 = {
    "version": "2025.1",
    # current_career_step.category.legacy_id on the riders endpoint
    "legacy_ids": {
        3: "MOTOGP",
        2: "MOTO2",
        1: "MOTO3",
    },
    # category uuids on the results endpoints (sessions, classification)
    "uuids": {
        "e8c110ad-64aa-4e8e-8a86-f2f152f6a942": "MOTOGP",
        "549640b8-fd9c-4245-acfd-60e4bc38b25c": "MOTO2",
        "954f7e65-2ef2-4423-b949-4961cc603e45": "MOTO3",
    },
    # category whose session calendar defines the race weekend times
    "calendar_category": "MOTOGP",
}

CURRENT_CATEGORY_TABLE = MOTOGP_CATEGORY_TABLE_2025


RIDER_VALUE_RULES = {
    "base": 50,
    "cap": 200,
    "championship_weight": 30,
    "win_weight": 2,
}

# current_career_step.type -> Rider.rider_type
RIDER_TYPE_CODES = {
    "official": "OFFICIAL",
    "permanent": "OFFICIAL",
    "wildcard": "WILDCARD",
    "wild card": "WILDCARD",
    "replacement": "REPLACEMENT",
    "substitute": "REPLACEMENT",
    "test": "TEST",
    "test rider": "TEST",
}


SCORING_RULES = {
    "lineup": {
        "min_predicted_position": 1,
        "max_predicted_position": 30,
    },
    # Base points for a pick with no usable position when the category has no
    # classified finisher to derive max position + 1 from. Lower totals win.
    "fallback_penalty_position": 25,
}

FALLBACK_PENALTY_POSITION = SCORING_RULES["fallback_penalty_position"]
MIN_PREDICTED_POSITION = SCORING_RULES["lineup"]["min_predicted_position"]
MAX_PREDICTED_POSITION = SCORING_RULES["lineup"]["max_predicted_position"]


RESULT_STATUS_CODES = {
    # upstream classification status -> RaceResult.status
    "DNF": "DNF",
    "OUTSTND": "DNF",
    "DNS": "DNS",
    "DSQ": "DSQ",
}

# upstream session type codes
SESSION_TYPE_CODES = {
    "MAIN": "RAC",
    "SPRINT": "SPR",
}


RACE_WEEKEND_WINDOW = {
    # detector: days before the next race / after the last race
    "days_ahead": 3,
    "days_behind": 2,
}

RESULTS_POLLING_WINDOW = {
    # scheduled polling: races whose main session is within
    # [now - days_behind, now + days_ahead]
    "days_behind": 3,
    "days_ahead": 2,
}
