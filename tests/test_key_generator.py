"""
Candidate key generation tests - order, uniqueness and each heuristic.
"""
from cabinet_pricing.engine.confusions import ConfusionTable
from cabinet_pricing.engine.key_generator import candidate_keys
from conftest import make_item


def test_original_code_comes_first():
    keys = candidate_keys(make_item("B15"))
    assert keys[0] == "B15"
    assert "B-15" in keys


def test_whitespace_removed_from_literal_code():
    keys = candidate_keys(make_item("W30 30", "Wall", width=30, height=30))
    assert keys[0] == "W3030"


def test_no_duplicates():
    item = make_item("VBD27AH-3", "Base", width=27, height=34.5, depth=21, normalized_code="VDB27")
    keys = candidate_keys(item)
    assert len(keys) == len(set(keys))


def test_canonical_form_follows_literal():
    keys = candidate_keys(make_item("B015"))
    assert keys.index("B015") < keys.index("B15")


def test_alternate_code_included():
    keys = candidate_keys(make_item("XX9", normalized_code="sb 36"))
    assert "SB36" in keys


def test_transposition_then_reductions():
    """VBD27AH-3: swapped prefix before infix strip before base family."""
    keys = candidate_keys(make_item("VBD27AH-3"))
    assert keys.index("VDB27AH-3") < keys.index("VBD27-3") < keys.index("VBD27")
    # base family carries its typo sibling
    assert "VDB27" in keys


def test_height_suffix_reduction():
    assert "3DB21" in candidate_keys(make_item("3DB2136"))


def test_height_suffix_outside_range_ignored():
    assert "B21" not in candidate_keys(make_item("B2124"))


def test_wall_diagonal_remap():
    keys = candidate_keys(make_item("WDH24"))
    remapped = [k for k in keys if k in ("VDB24", "VBD24", "VSB24", "SB24", "DB24", "B24")]
    assert remapped == ["VDB24", "VBD24", "VSB24", "SB24", "DB24", "B24"]


def test_dash_collapse():
    assert "VDB27AH3" in candidate_keys(make_item("VDB-27-AH-3"))


def test_single_letter_suffix_stripped():
    assert "VDB24" in candidate_keys(make_item("VDB24-W"))


def test_wall_dimension_keys():
    keys = candidate_keys(make_item("???", "Wall", width=30, height=30, depth=24))
    assert "W3030" in keys
    assert "W3030-24" in keys


def test_shallow_wall_has_no_deep_variant():
    keys = candidate_keys(make_item("???", "Wall", width=30, height=0, depth=12))
    assert "W3030" in keys
    assert "W3030-24" not in keys


def test_base_dimension_keys():
    keys = candidate_keys(make_item("???", "Base", width=18.0))
    for key in ("B18", "DB18", "SB18", "3DB18"):
        assert key in keys


def test_tall_filler_panel_dimension_keys():
    assert {"U2484", "T2484"} <= set(candidate_keys(make_item("?", "Tall", width=24)))
    assert "F3" in candidate_keys(make_item("?", "Filler", width=3))
    assert {"PNL24", "BP24"} <= set(candidate_keys(make_item("?", "Panel", width=24)))


def test_no_dimension_keys_without_width():
    keys = candidate_keys(make_item("ZZ1", "Base", width=0))
    assert "B0" not in keys
    assert not any(k.startswith("DB") for k in keys)


def test_custom_confusion_table():
    table = ConfusionTable(transpositions=(("SB", "S8"),), family_remaps={"WBD": ("VDB",)})

    assert "VDB24" in candidate_keys(make_item("WBD24"), table)
    assert "S836" in candidate_keys(make_item("SB36"), table)
    # default remaps do not leak into a custom table
    assert "VSB24" not in candidate_keys(make_item("WDH24"), table)


def test_confusion_table_from_dict():
    table = ConfusionTable.from_dict({
        "transpositions": [["vdb", "vbd"]],
        "family_remaps": {"wdh": ["vsb"]},
    })
    assert table.transpositions == (("VDB", "VBD"),)
    assert table.family_remaps == {"WDH": ("VSB",)}
