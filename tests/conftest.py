import pytest

from catalogs import default_catalogs


@pytest.fixture
def catalogs():
    return default_catalogs()


@pytest.fixture
def golden_state():
    """One baseline line, one new business line and a tier 1 goal"""
    return {
        "Sheet1!C9": 120,
        "Sheet1!F9": "5%",
        "Sheet1!K9": 15,
        "Sheet1!N9": "$18,000",
        "Sheet1!C38": 140,
    }


@pytest.fixture
def full_goals_state(golden_state):
    state = dict(golden_state)
    for offset, goal in enumerate([140, 160, 180, 200, 220, 240, 260]):
        state[f"Sheet1!C{38 + offset}"] = goal
    return state
