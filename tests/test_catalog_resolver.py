"""
Catalog resolver tests - each matching strategy in isolation, the cascade
order, and tier price selection.
"""
import copy

from cabinet_pricing.engine import catalog_resolver as cr
from cabinet_pricing.engine.catalog_resolver import (
    CatalogIndex, resolve, resolve_item, select_tier_price,
)
from conftest import make_item


def std(price):
    return {"Standard": price}


def test_exact():
    match = resolve("W3030", {"W3030": std(100)}, "Standard")
    assert match.price == 100
    assert match.strategy == cr.EXACT
    assert match.tier_column == "Standard"
    assert match.tier_selection == "exact"


def test_hyphen_insensitive():
    match = resolve("VDB27AH-3", {"VDB27AH3": std(90)}, "Standard")
    assert match.strategy == cr.HYPHEN_INSENSITIVE
    assert match.matched_sku == "VDB27AH3"


def test_hyphen_insertion():
    match = resolve("VDB27AH3", {"VDB27AH-3": std(90)}, "Standard")
    assert match.strategy == cr.HYPHEN_INSERTION
    assert match.matched_sku == "VDB27AH-3"


def test_neighbor_height():
    match = resolve("W3030", {"W3031": std(105)}, "Standard")
    assert match.strategy == cr.NEIGHBOR
    assert match.matched_sku == "W3031"
    assert match.price == 105


def test_neighbor_prefers_plus_one():
    match = resolve("W3030", {"W3029": std(1), "W3031": std(2)}, "Standard")
    assert match.matched_sku == "W3031"


def test_neighbor_keeps_two_digit_height():
    match = resolve("W3010", {"W308": std(50), "W3008": std(60)}, "Standard")
    assert match.matched_sku == "W3008"
    assert match.detail == "height 10 -> 08"


def test_neighbor_drops_trailing_letters():
    match = resolve("W3030GD", {"W3032": std(150)}, "Standard")
    assert match.strategy == cr.NEIGHBOR
    assert match.matched_sku == "W3032"


def test_suffix_strip_records_remainder():
    match = resolve("VDB27AH-3", {"VDB27": std(80)}, "Standard")
    assert match.strategy == cr.SUFFIX_STRIP
    assert "AH-3" in match.detail
    assert "stripped 'AH-3'" in match.source


def test_suffix_strip_minimum_length():
    assert resolve("B15X", {"B1": std(10)}, "Standard") is None


def test_core_extraction_matcher():
    assert cr.match_core("SB36XYZ-2", {"SB36": std(1)}) == ("SB36", None)
    assert cr.match_core("36SB", {"SB36": std(1)}) is None


def test_matchers_in_priority_order():
    names = [name for name, _ in cr.MATCHERS]
    assert names == [cr.EXACT, cr.HYPHEN_INSENSITIVE, cr.HYPHEN_INSERTION,
                     cr.NEIGHBOR, cr.SUFFIX_STRIP, cr.CORE_EXTRACTION]


def test_unknown_and_empty_keys():
    assert resolve("", {"B15": std(1)}, "Standard") is None
    assert resolve("unknown", {"UNKNOWN": std(1)}, "Standard") is None


def test_entry_without_prices_keeps_cascading():
    match = resolve("W3030", {"W3030": {}, "W3031": std(5)}, "Standard")
    assert match.matched_sku == "W3031"


def test_tier_selection_exact():
    assert select_tier_price({"Oak": 1, "Standard": 2}, "Standard") == (2.0, "Standard", "exact")


def test_tier_selection_fuzzy_either_direction():
    assert select_tier_price({"Oak Standard": 3}, "standard") == (3.0, "Oak Standard", "fuzzy")
    assert select_tier_price({"Oak": 4}, "Select Oak") == (4.0, "Oak", "fuzzy")


def test_tier_selection_fallback_skips_bad_prices():
    price, column, selection = select_tier_price({"Oak": "n/a", "Maple": 90, "Cherry": 95}, "Painted")
    assert (price, column, selection) == (90.0, "Maple", "fallback")


def test_tier_selection_empty_entry():
    assert select_tier_price({}, "Standard") is None


def test_resolve_item_whitespace_code():
    item = make_item("W30 30", "Wall", width=30, height=30)
    match = resolve_item(item, {"W3030": std(100)}, "Standard")
    assert match.price == 100
    assert match.strategy == cr.EXACT
    assert match.tier_column == "Standard"


def test_resolve_item_zero_pad():
    match = resolve_item(make_item("B015"), {"B15": std(50)}, "Standard")
    assert match.price == 50
    assert match.matched_sku == "B15"


def test_exact_canonical_beats_fuzzy_raw():
    """B01 would be a suffix-strip hit on the raw code; exact B15 must win."""
    catalog = {"B01": std(1), "B15": std(50)}
    match = resolve_item(make_item("B015"), catalog, "Standard")
    assert match.strategy == cr.EXACT
    assert match.matched_sku == "B15"


def test_resolve_item_transposition_and_strip():
    match = resolve_item(make_item("VBD27AH-3"), {"VDB27": std(80)}, "Standard")
    assert match.price == 80
    assert match.strategy == cr.SUFFIX_STRIP
    assert match.candidate_key == "VDB27AH-3"
    assert "via candidate 'VDB27AH-3'" in match.source


def test_resolve_item_neighbor():
    item = make_item("W3030", "Wall", width=30, height=30)
    match = resolve_item(item, {"W3031": std(110)}, "Standard")
    assert match.strategy == cr.NEIGHBOR
    assert match.matched_sku == "W3031"


def test_resolve_item_dimension_fallback():
    item = make_item("DRAWER BASE", "Base", width=18)
    match = resolve_item(item, {"DB18": std(300)}, "Standard")
    assert match.matched_sku == "DB18"
    assert match.candidate_key is not None


def test_resolve_item_not_found():
    assert resolve_item(make_item("ZZZ999"), {"B15": std(1)}, "Standard") is None


def test_catalog_index_is_private_copy():
    catalog = {"w 30 30": std(100), "B15": std(50)}
    original = copy.deepcopy(catalog)

    index = CatalogIndex.build(catalog)
    assert "W3030" in index
    assert catalog == original
