"""
Data models for the cabinet pricing engine.

Uses dataclasses for structured, type-safe data representation. Inputs
(items, manufacturers) are built with ``from_dict`` so malformed upstream
fields degrade to defaults instead of raising.
"""
import math
import re
from dataclasses import dataclass, field, asdict
from typing import Optional

from .confusions import ConfusionTable
from .normalizer import normalize_catalog_key


# Cabinet types
BASE = "Base"
WALL = "Wall"
TALL = "Tall"
PANEL = "Panel"
FILLER = "Filler"
ACCESSORY = "Accessory"
MODIFICATION = "Modification"

CABINET_TYPES = (BASE, WALL, TALL, PANEL, FILLER, ACCESSORY, MODIFICATION)

NOT_FOUND = "NOT FOUND"
EXTRACTED_SOURCE = "Extracted from PDF"


def coerce_float(value, default: float = 0.0) -> float:
    """Convert to a finite float, falling back to ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_price(value, default: float = 0.0) -> float:
    """
    Parse a money value such as ``150``, ``"$1,234.50"`` or ``"+$90"``.

    Negative and unparseable values give ``default``.
    """
    if isinstance(value, str):
        cleaned = re.sub(r'[^0-9.\-]', '', value)
        value = cleaned or None
    number = coerce_float(value, default)
    return number if number >= 0 else default


def coerce_quantity(value) -> int:
    """Quantities are positive integers; anything else counts as 1."""
    number = coerce_float(value, 1.0)
    if number < 1:
        return 1
    return int(number)


def _pick(data: dict, *keys, default=None):
    """First present key from a dict accepting camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class CabinetModification:
    """Item-level surcharge captured during extraction (e.g. finished end)."""
    description: str
    price: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'CabinetModification':
        return cls(
            description=str(data.get('description') or ''),
            price=coerce_price(data.get('price')),
        )


@dataclass
class CabinetItem:
    """A single cabinet row as extracted from a source document."""
    id: str
    original_code: str
    type: str = ACCESSORY
    description: str = ""
    width: float = 0.0
    height: float = 0.0
    depth: float = 0.0
    quantity: int = 1
    normalized_code: Optional[str] = None
    notes: Optional[str] = None
    extracted_price: Optional[float] = None
    modifications: list[CabinetModification] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'CabinetItem':
        """Build an item from upstream JSON, coercing malformed fields."""
        item_type = str(_pick(data, 'type', default=ACCESSORY)).strip().title()
        if item_type not in CABINET_TYPES:
            item_type = ACCESSORY

        extracted = _pick(data, 'extractedPrice', 'extracted_price')
        mods = _pick(data, 'modifications', default=[])
        if not isinstance(mods, list):
            mods = []

        return cls(
            id=str(_pick(data, 'id', default='')),
            original_code=str(_pick(data, 'originalCode', 'original_code', default='')),
            type=item_type,
            description=str(_pick(data, 'description', default='')),
            width=max(0.0, coerce_float(_pick(data, 'width'))),
            height=max(0.0, coerce_float(_pick(data, 'height'))),
            depth=max(0.0, coerce_float(_pick(data, 'depth'))),
            quantity=coerce_quantity(_pick(data, 'quantity')),
            normalized_code=_pick(data, 'normalizedCode', 'normalized_code'),
            notes=_pick(data, 'notes'),
            extracted_price=coerce_price(extracted) if extracted is not None else None,
            modifications=[
                CabinetModification.from_dict(m) for m in mods if isinstance(m, dict)
            ],
        )


@dataclass
class ManufacturerOption:
    """A manufacturer-level selectable upgrade."""
    id: str
    name: str
    category: str = "Other"
    section: str = "Unknown"  # workbook section the option was discovered in
    pricing_type: str = "included"  # fixed | percentage | included
    price: float = 0.0  # dollars if fixed, fraction 0-1 if percentage
    description: Optional[str] = None
    availability: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'ManufacturerOption':
        pricing_type = str(_pick(data, 'pricingType', 'pricing_type', default='included')).lower()
        if pricing_type not in ('fixed', 'percentage', 'included'):
            pricing_type = 'included'
        price = coerce_price(data.get('price'))
        if pricing_type == 'included':
            price = 0.0
        elif pricing_type == 'percentage' and price > 1:
            # "15%" and 15 both mean fifteen percent
            price = price / 100
        return cls(
            id=str(_pick(data, 'id', default='')),
            name=str(_pick(data, 'name', default='')),
            category=str(_pick(data, 'category', default='Other')),
            section=str(_pick(data, 'section', default='Unknown')),
            pricing_type=pricing_type,
            price=price,
            description=_pick(data, 'description'),
            availability=_pick(data, 'availability'),
        )


@dataclass
class PricingTier:
    """A named price column (material/finish grade)."""
    id: str
    name: str
    multiplier: float = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingTier':
        return cls(
            id=str(_pick(data, 'id', default='')),
            name=str(_pick(data, 'name', default='')),
            multiplier=coerce_float(_pick(data, 'multiplier'), 1.0),
        )


@dataclass
class Manufacturer:
    """A manufacturer with its tiers, options and price catalog."""
    id: str
    name: str
    base_pricing_multiplier: float = 1.0
    tiers: list[PricingTier] = field(default_factory=list)
    options: list[ManufacturerOption] = field(default_factory=list)
    # SKU -> {tier name -> price}
    catalog: dict[str, dict[str, float]] = field(default_factory=dict)
    confusions: Optional[ConfusionTable] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'Manufacturer':
        raw_catalog = data.get('catalog')
        if not isinstance(raw_catalog, dict):
            raw_catalog = {}
        tiers = data.get('tiers')
        if not isinstance(tiers, list):
            tiers = []
        options = data.get('options')
        if not isinstance(options, list):
            options = []

        catalog = {}
        for sku, prices in raw_catalog.items():
            key = normalize_catalog_key(sku)
            if key and isinstance(prices, dict) and key not in catalog:
                catalog[key] = dict(prices)

        confusions = data.get('confusions')
        if not isinstance(confusions, dict):
            confusions = None
        return cls(
            id=str(_pick(data, 'id', default='')),
            name=str(_pick(data, 'name', default='')),
            base_pricing_multiplier=coerce_float(
                _pick(data, 'basePricingMultiplier', 'base_pricing_multiplier'), 1.0
            ),
            tiers=[PricingTier.from_dict(t) for t in tiers if isinstance(t, dict)],
            options=[ManufacturerOption.from_dict(o) for o in options if isinstance(o, dict)],
            catalog=catalog,
            confusions=ConfusionTable.from_dict(confusions) if confusions else None,
        )


@dataclass
class ProjectSpecs:
    """Project-level selections that drive option pricing."""
    selected_options: dict[str, bool] = field(default_factory=dict)
    price_group: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'ProjectSpecs':
        selected = _pick(data, 'selectedOptions', 'selected_options', default={})
        if not isinstance(selected, dict):
            selected = {}
        return cls(
            selected_options={str(k): bool(v) for k, v in selected.items()},
            price_group=_pick(data, 'priceGroup', 'price_group'),
            notes=_pick(data, 'notes'),
        )


@dataclass
class AppliedOption:
    """An option or modification charged on a line."""
    name: str
    price: float
    source_section: Optional[str] = None


@dataclass
class CatalogMatch:
    """A successful catalog resolution with its provenance."""
    price: float
    matched_sku: str
    strategy: str
    tier_column: str
    tier_selection: str  # exact | fuzzy | fallback
    detail: Optional[str] = None
    candidate_key: Optional[str] = None

    @property
    def source(self) -> str:
        """Human-readable provenance for audit display."""
        parts = [f"{self.strategy} '{self.matched_sku}'"]
        if self.detail:
            parts.append(self.detail)
        if self.tier_selection == "exact":
            parts.append(f"tier '{self.tier_column}'")
        else:
            parts.append(f"{self.tier_selection} tier '{self.tier_column}'")
        text = f"Catalog ({', '.join(parts)})"
        if self.candidate_key:
            text += f" via candidate '{self.candidate_key}'"
        return text


@dataclass
class PricingLineItem:
    """A priced line in a quote result."""
    id: str
    original_code: str
    normalized_code: Optional[str]
    type: str
    description: str
    width: float
    height: float
    depth: float
    quantity: int
    base_price: float = 0.0
    options_price: float = 0.0
    tier_multiplier: float = 1.0
    final_unit_price: float = 0.0
    total_price: float = 0.0
    tier_name: str = "Standard"
    source: str = NOT_FOUND
    matched_sku: Optional[str] = None
    notes: Optional[str] = None
    extracted_price: Optional[float] = None
    modifications: list[CabinetModification] = field(default_factory=list)
    applied_options: list[AppliedOption] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @classmethod
    def from_item(cls, item: CabinetItem, quantity: int) -> 'PricingLineItem':
        """Start a fresh line from an input item; the item itself is not touched."""
        return cls(
            id=item.id,
            original_code=item.original_code,
            normalized_code=item.normalized_code,
            type=item.type,
            description=item.description,
            width=item.width,
            height=item.height,
            depth=item.depth,
            quantity=quantity,
            notes=item.notes,
            extracted_price=item.extracted_price,
            modifications=[
                CabinetModification(m.description, m.price) for m in item.modifications
            ],
        )

    @property
    def needs_review(self) -> bool:
        """Zero-priced lines are flagged for manual price checking."""
        return self.total_price <= 0

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this line item."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning for this line item."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['needs_review'] = self.needs_review
        return data


@dataclass
class QuoteFinancials:
    """Dealer-level adjustments applied on top of the line subtotal."""
    tax_rate: float = 0.0  # percent, 7.5 means 7.5%
    shipping_cost: float = 0.0
    discount_rate: float = 0.0  # percent
    fuel_surcharge: float = 0.0
    misc_charge: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'QuoteFinancials':
        return cls(
            tax_rate=coerce_price(_pick(data, 'taxRate', 'tax_rate')),
            shipping_cost=coerce_price(_pick(data, 'shippingCost', 'shipping_cost')),
            discount_rate=min(100.0, coerce_price(_pick(data, 'discountRate', 'discount_rate'))),
            fuel_surcharge=coerce_price(_pick(data, 'fuelSurcharge', 'fuel_surcharge')),
            misc_charge=coerce_price(_pick(data, 'miscCharge', 'misc_charge')),
        )


@dataclass
class QuoteSummary:
    """Totals for a priced project."""
    subtotal: float
    discount_amount: float
    post_discount: float
    tax_amount: float
    grand_total: float
    line_count: int
    review_count: int
