"""
Key Generator - ranked candidate catalog keys for a cabinet item.

Candidates are tried in order by the resolver and the first hit wins, so
the order below is the matching priority:

1. Original code (literal, then canonical)
2. Supplied alternate code (literal, then canonical)
3. Prefix transpositions from the confusion table
4. Height suffix reduction (3DB2136 -> 3DB21)
5. Family remaps for misread prefixes (WDH24 -> VDB24, VSB24, ...)
6. Middle infix stripping (VDB27AH-3 -> VDB27-3)
7. Base family (VDB27AH-3 -> VDB27)
8. Dash collapse (VDB-27-AH-3 -> VDB27AH3)
9. Keys synthesized from the item dimensions
"""
import re
from typing import Optional

from .confusions import ConfusionTable, DEFAULT_CONFUSIONS
from .models import CabinetItem, BASE, WALL, TALL, FILLER, PANEL
from .normalizer import normalize_code

# Heights that show up appended to base/vanity codes
HEIGHT_SUFFIX_RANGE = (30, 42)
DEFAULT_WALL_HEIGHT = 30
DEFAULT_TALL_HEIGHT = 84
DEEP_WALL_THRESHOLD = 12

_LETTERS_DIGITS = re.compile(r'^([A-Z]+)(\d+)$')
_SINGLE_LETTER_SUFFIX = re.compile(r'^([^-]{3,})-[A-Z]$')
_HEIGHT_SUFFIX = re.compile(r'^([0-9A-Z]+)(\d{2})$')
_MIDDLE_INFIX = re.compile(r'^([A-Z0-9]+)(\d{2})([A-Z]+)(-\d+)$')
_BASE_FAMILY = re.compile(r'^([A-Z]+)(\d+)')


def _dim(value: float) -> str:
    """Render a dimension the way codes spell it: 15.0 -> '15', 34.5 -> '34.5'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class _KeyList:
    """Ordered, de-duplicated key collector."""

    def __init__(self):
        self.keys: list[str] = []
        self._seen: set[str] = set()

    def _push(self, key: str):
        if key and key not in self._seen:
            self._seen.add(key)
            self.keys.append(key)

    def add(self, raw: Optional[str]):
        """Add a key plus its hyphenated and suffix-stripped variants."""
        if not raw:
            return
        key = re.sub(r'\s+', '', str(raw).upper())
        self._push(key)

        # VDB24 -> VDB-24
        split = _LETTERS_DIGITS.match(key)
        if split:
            self._push(f"{split.group(1)}-{split.group(2)}")

        # VDB24-W -> VDB24
        suffixed = _SINGLE_LETTER_SUFFIX.match(key)
        if suffixed:
            self._push(suffixed.group(1))


def _dimension_keys(item: CabinetItem) -> list[str]:
    """NKBA-style codes built from the item's type and size."""
    if item.width <= 0:
        return []

    w = _dim(item.width)
    if item.type == WALL:
        h = _dim(item.height or DEFAULT_WALL_HEIGHT)
        keys = [f"W{w}{h}"]
        if item.depth > DEEP_WALL_THRESHOLD:
            keys.append(f"W{w}{h}-24")
        return keys
    if item.type == BASE:
        return [f"B{w}", f"DB{w}", f"SB{w}", f"3DB{w}"]
    if item.type == TALL:
        h = _dim(item.height or DEFAULT_TALL_HEIGHT)
        return [f"U{w}{h}", f"T{w}{h}"]
    if item.type == FILLER:
        return [f"F{w}"]
    if item.type == PANEL:
        return [f"PNL{w}", f"BP{w}"]
    return []


def candidate_keys(item: CabinetItem, confusions: ConfusionTable = DEFAULT_CONFUSIONS) -> list[str]:
    """
    Derive the ordered candidate lookup keys for an item.

    Args:
        item: Cabinet item as extracted
        confusions: Manufacturer-specific misread table

    Returns:
        Keys in priority order with no duplicates
    """
    keys = _KeyList()
    clean = normalize_code(item.original_code)

    keys.add(item.original_code)
    keys.add(clean)
    if item.normalized_code:
        keys.add(item.normalized_code)
        keys.add(normalize_code(item.normalized_code))

    for swapped in confusions.swaps_for(clean):
        keys.add(swapped)

    height_match = _HEIGHT_SUFFIX.match(clean)
    if height_match:
        low, high = HEIGHT_SUFFIX_RANGE
        if low <= int(height_match.group(2)) <= high:
            keys.add(height_match.group(1))

    for misread, families in confusions.family_remaps.items():
        if clean.startswith(misread):
            remainder = clean[len(misread):]
            for family in families:
                keys.add(f"{family}{remainder}")

    infix = _MIDDLE_INFIX.match(clean)
    if infix:
        keys.add(f"{infix.group(1)}{infix.group(2)}{infix.group(4)}")

    base = _BASE_FAMILY.match(clean)
    if base:
        prefix, digits = base.group(1), base.group(2)
        keys.add(f"{prefix}{digits}")
        for sibling in confusions.sibling_prefixes(prefix):
            keys.add(f"{sibling}{digits}")

    if clean.count('-') > 1:
        keys.add(clean.replace('-', ''))

    for key in _dimension_keys(item):
        keys.add(key)

    return keys.keys
