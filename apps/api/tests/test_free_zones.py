import sys
import os
import random

import pytest

# ensure local app package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from free_zones import (
    FREE_ZONES,
    MAX_COMPARE,
    BudgetTier,
    SortKey,
    budget_tier_of,
    filter_and_sort,
    toggle_selection,
    compare,
)


def ids(zones):
    return [z.id for z in zones]


def test_reference_list():
    assert len(FREE_ZONES) == 10
    assert len({z.id for z in FREE_ZONES}) == 10


def test_finance_filter_popular_sort():
    assert ids(filter_and_sort(FREE_ZONES, "Finance")) == ["dmcc", "difc", "adgm"]


def test_finance_filter_price_sort():
    assert ids(filter_and_sort(FREE_ZONES, "Finance", sort_key=SortKey.PRICE)) == ["dmcc", "adgm", "difc"]


def test_finance_filter_rating_sort():
    assert ids(filter_and_sort(FREE_ZONES, "Finance", sort_key="rating")) == ["difc", "dmcc", "adgm"]


def test_all_industries_sentinel_keeps_everything():
    assert len(filter_and_sort(FREE_ZONES, "All Industries")) == 10
    assert len(filter_and_sort(FREE_ZONES, "all")) == 10
    assert len(filter_and_sort(FREE_ZONES, None)) == 10


def test_industry_outside_filter_list_still_filters():
    assert ids(filter_and_sort(FREE_ZONES, "Banking")) == ["difc"]


def test_unknown_industry_falls_back_to_all():
    assert len(filter_and_sort(FREE_ZONES, "Aerospace")) == 10


@pytest.mark.parametrize("amount, tier", [
    (0, BudgetTier.BUDGET),
    (14999.99, BudgetTier.BUDGET),
    (15000, BudgetTier.MID),
    (29999, BudgetTier.MID),
    (30000, BudgetTier.PREMIUM),
    (45000, BudgetTier.PREMIUM),
])
def test_budget_tier_boundaries(amount, tier):
    assert budget_tier_of(amount) is tier


def test_budget_filters():
    assert set(ids(filter_and_sort(FREE_ZONES, budget="budget"))) == {"ifza", "rakez", "shams"}
    assert set(ids(filter_and_sort(FREE_ZONES, budget="mid"))) == {"dmcc", "dafza", "jafza", "dso"}
    # TECOM starts at exactly 30,000
    assert set(ids(filter_and_sort(FREE_ZONES, budget="premium"))) == {"difc", "tecom", "adgm"}


def test_unknown_budget_and_sort_fall_back():
    assert ids(filter_and_sort(FREE_ZONES, budget="cheap", sort_key="newest")) == ids(filter_and_sort(FREE_ZONES))


def test_popular_sort_is_stable_partition():
    assert ids(filter_and_sort(FREE_ZONES)) == [
        "dmcc", "difc", "dafza", "jafza", "ifza",
        "rakez", "dso", "tecom", "adgm", "shams",
    ]


def test_popular_sort_keeps_order_of_shuffled_input():
    shuffled = list(FREE_ZONES)
    random.Random(7).shuffle(shuffled)
    result = filter_and_sort(shuffled, sort_key=SortKey.POPULAR)
    assert ids(result) == [z.id for z in shuffled if z.is_popular] + [z.id for z in shuffled if not z.is_popular]


def test_price_sort_ascending_with_stable_ties():
    result = filter_and_sort(FREE_ZONES, sort_key="price")
    prices = [z.costs.package_from for z in result]
    assert prices == sorted(prices)
    # RAKEZ and SHAMS both start at 9,500
    assert ids(result)[:2] == ["rakez", "shams"]


def test_rating_sort_descending():
    ratings = [z.rating for z in filter_and_sort(FREE_ZONES, sort_key="rating")]
    assert ratings == sorted(ratings, reverse=True)


def test_source_is_not_mutated():
    source = list(FREE_ZONES)
    before = ids(source)
    result = filter_and_sort(source, sort_key="price")
    assert ids(source) == before
    assert result is not source


# ─────────────────────────────────────────────
# Selection + comparison
# ─────────────────────────────────────────────

def test_toggle_adds_until_cap():
    assert toggle_selection([], "dmcc") == ["dmcc"]
    assert toggle_selection(["dmcc"], "difc") == ["dmcc", "difc"]


def test_toggle_at_cap_is_noop():
    assert toggle_selection(["a", "b", "c"], "d") == ["a", "b", "c"]


def test_toggle_removes_selected():
    assert toggle_selection(["a", "b"], "a") == ["b"]


def test_toggle_does_not_mutate_input():
    selected = ["a", "b"]
    toggle_selection(selected, "c")
    assert selected == ["a", "b"]


def test_selection_never_exceeds_cap():
    rng = random.Random(42)
    zone_ids = [z.id for z in FREE_ZONES]
    selected = []
    for _ in range(500):
        selected = toggle_selection(selected, rng.choice(zone_ids))
        assert len(selected) <= MAX_COMPARE
        assert len(set(selected)) == len(selected)


def test_compare_columns_follow_selection_order():
    table = compare(["adgm", "dmcc"])
    assert [c.id for c in table.columns] == ["adgm", "dmcc"]
    assert table.columns[0].short_name == "ADGM"
    assert table.columns[0].location == "Al Maryah Island, Abu Dhabi"


def test_compare_rows():
    table = compare(["difc", "rakez"])
    rows = {r.feature: r.values for r in table.rows}

    assert [r.feature for r in table.rows] == [
        "Package From", "License Cost", "Visa Cost", "Visa Allocation",
        "Processing Time", "Ownership", "Industries", "Rating",
    ]
    assert rows["Package From"] == [45000, 9500]
    assert rows["Industries"] == [["Finance", "Banking", "Insurance"], ["Trading", "Consulting", "E-commerce"]]
    assert rows["Rating"] == [4.9, 4.3]


def test_compare_skips_unknown_ids_and_caps_columns():
    table = compare(["nope", "dmcc", "difc", "dafza", "jafza"])
    assert [c.id for c in table.columns] == ["dmcc", "difc", "dafza"]


def test_compare_empty_selection():
    table = compare([])
    assert table.columns == []
    assert all(r.values == [] for r in table.rows)


def test_compare_ignores_repeated_ids():
    table = compare(["dmcc", "dmcc", "adgm", "dmcc"])
    assert [c.id for c in table.columns] == ["dmcc", "adgm"]
    assert table.rows[0].values == [22000, 35000]
