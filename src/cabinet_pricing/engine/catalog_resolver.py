"""
Catalog Resolver - matches candidate keys against a manufacturer catalog.

Each matching strategy is an independent pure function
``(key, catalog) -> (matched_sku, detail) | None``. ``MATCHERS`` lists them
in priority order; ``resolve`` runs the whole cascade for one key and
``resolve_item`` drives the item's own code and then every candidate key.
"""
import logging
import re
from typing import Callable, Mapping, Optional

from .confusions import ConfusionTable, DEFAULT_CONFUSIONS
from .key_generator import candidate_keys
from .models import CabinetItem, CatalogMatch, coerce_float
from .normalizer import normalize_catalog_key, normalize_code

logger = logging.getLogger(__name__)

Catalog = Mapping[str, Mapping[str, float]]
MatchResult = Optional[tuple[str, Optional[str]]]

EXACT = "Exact"
HYPHEN_INSENSITIVE = "Hyphen-Insensitive"
HYPHEN_INSERTION = "Inserted-Hyphen"
NEIGHBOR = "Neighbor"
SUFFIX_STRIP = "Similar"
CORE_EXTRACTION = "Core Extraction"

# Shortest prefix the suffix strip may test ("B15" is fine, "B1" is not)
MIN_STRIP_LENGTH = 3

_TRAILING_DIGITS = re.compile(r'^(.*[A-Z])(\d+)$')
_NEIGHBOR_SHAPE = re.compile(r'^([A-Z]{1,2}\d{2})(\d{2})([A-Z]*)$')
_CORE = re.compile(r'^[A-Z]{1,4}\d{2,5}')


class CatalogIndex(dict):
    """
    Private lookup copy of a catalog keyed by normalized SKU.

    Built once per pricing call; the manufacturer's own mapping is never
    modified. The first entry wins when two raw keys normalize alike.
    """

    @classmethod
    def build(cls, catalog: Optional[Catalog]) -> 'CatalogIndex':
        index = cls()
        for sku, prices in (catalog or {}).items():
            key = normalize_catalog_key(sku)
            if key and key not in index:
                index[key] = prices
        return index


def match_exact(key: str, catalog: Catalog) -> MatchResult:
    if key in catalog:
        return key, None
    return None


def match_hyphen_insensitive(key: str, catalog: Catalog) -> MatchResult:
    """VDB27AH-3 -> VDB27AH3"""
    no_dash = key.replace('-', '')
    if no_dash != key and no_dash in catalog:
        return no_dash, "dashes removed"
    return None


def match_hyphen_insertion(key: str, catalog: Catalog) -> MatchResult:
    """VDB27AH3 -> VDB27AH-3"""
    split = _TRAILING_DIGITS.match(key)
    if not split:
        return None
    with_dash = f"{split.group(1)}-{split.group(2)}"
    if with_dash in catalog:
        return with_dash, f"inserted hyphen before '{split.group(2)}'"
    return None


def match_neighbor(key: str, catalog: Catalog) -> MatchResult:
    """W3030 -> W3031, W3029, W3032, W3028 (height +/- 2 inches)."""
    shape = _NEIGHBOR_SHAPE.match(key)
    if not shape:
        return None
    prefix, height_text, suffix = shape.groups()
    height = int(height_text)
    for neighbor in (height + 1, height - 1, height + 2, height - 2):
        if neighbor <= 0:
            continue
        candidate = f"{prefix}{neighbor:02d}{suffix}"
        if candidate in catalog:
            return candidate, f"height {height} -> {neighbor:02d}"
        if suffix:
            simple = f"{prefix}{neighbor:02d}"
            if simple in catalog:
                return simple, f"height {height} -> {neighbor:02d}, dropped '{suffix}'"
    return None


def match_suffix_strip(key: str, catalog: Catalog) -> MatchResult:
    """VDB27AH-3 -> VDB27AH-, VDB27AH, ... first prefix in the catalog."""
    for end in range(len(key) - 1, MIN_STRIP_LENGTH - 1, -1):
        prefix = key[:end]
        if prefix in catalog:
            return prefix, f"stripped '{key[end:]}'"
    return None


def match_core(key: str, catalog: Catalog) -> MatchResult:
    """Leading letters+digits core: SB36XYZ-2 -> SB36"""
    core = _CORE.match(key)
    if core and core.group(0) in catalog:
        return core.group(0), None
    return None


MATCHERS: list[tuple[str, Callable[[str, Catalog], MatchResult]]] = [
    (EXACT, match_exact),
    (HYPHEN_INSENSITIVE, match_hyphen_insensitive),
    (HYPHEN_INSERTION, match_hyphen_insertion),
    (NEIGHBOR, match_neighbor),
    (SUFFIX_STRIP, match_suffix_strip),
    (CORE_EXTRACTION, match_core),
]


def select_tier_price(entry: Mapping[str, float], tier_name: str) -> Optional[tuple[float, str, str]]:
    """
    Pick a price from a catalog entry for the requested tier.

    Resolution order:
    1. Exact tier column
    2. Case-insensitive substring match in either direction
    3. First numeric price in the entry

    Returns (price, tier_column, selection) or None if the entry has no
    usable price.
    """
    prices = {}
    for column, value in entry.items():
        price = coerce_float(value, -1.0)
        if price >= 0:
            prices[str(column)] = price
    if not prices:
        return None

    if tier_name in prices:
        return prices[tier_name], tier_name, "exact"

    wanted = (tier_name or "").strip().lower()
    if wanted:
        for column, price in prices.items():
            have = column.strip().lower()
            if have and (wanted in have or have in wanted):
                return price, column, "fuzzy"

    column = next(iter(prices))
    return prices[column], column, "fallback"


def _lookup_key(raw: Optional[str]) -> Optional[str]:
    key = normalize_catalog_key(raw)
    if not key or key == "UNKNOWN":
        return None
    return key


def _price_match(catalog: Catalog, sku: str, strategy: str, detail: Optional[str], tier_name: str) -> Optional[CatalogMatch]:
    selected = select_tier_price(catalog[sku], tier_name)
    if selected is None:
        logger.debug(f"Catalog entry {sku} has no usable price")
        return None
    price, column, selection = selected
    return CatalogMatch(
        price=price,
        matched_sku=sku,
        strategy=strategy,
        detail=detail,
        tier_column=column,
        tier_selection=selection,
    )


def resolve(raw_key: str, catalog: Catalog, tier_name: str) -> Optional[CatalogMatch]:
    """Run the full matching cascade for one key; first strategy hit wins."""
    key = _lookup_key(raw_key)
    if key is None:
        return None
    for strategy, matcher in MATCHERS:
        hit = matcher(key, catalog)
        if hit is None:
            continue
        match = _price_match(catalog, hit[0], strategy, hit[1], tier_name)
        if match:
            return match
    return None


def _resolve_own_code(item: CabinetItem, catalog: Catalog, tier_name: str) -> Optional[CatalogMatch]:
    """
    Cascade for the item's own code.

    The raw code and its canonical form go through each strategy together,
    so an exact hit on the canonical code beats any fuzzy hit on the raw one.
    """
    forms = []
    for form in (_lookup_key(item.original_code), _lookup_key(normalize_code(item.original_code))):
        if form and form not in forms:
            forms.append(form)

    for strategy, matcher in MATCHERS:
        for key in forms:
            hit = matcher(key, catalog)
            if hit is None:
                continue
            match = _price_match(catalog, hit[0], strategy, hit[1], tier_name)
            if match:
                return match
    return None


def resolve_item(
    item: CabinetItem,
    catalog: Catalog,
    tier_name: str,
    confusions: ConfusionTable = DEFAULT_CONFUSIONS,
) -> Optional[CatalogMatch]:
    """
    Resolve an item's catalog price.

    The item's own code goes first; only when its cascade fails is each
    candidate key from ``candidate_keys`` run through the full cascade.
    """
    match = _resolve_own_code(item, catalog, tier_name)
    if match:
        return match

    for key in candidate_keys(item, confusions):
        match = resolve(key, catalog, tier_name)
        if match:
            match.candidate_key = key
            return match
    return None
