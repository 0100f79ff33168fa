"""
Pricing Engine - composes line prices for a cabinet order.

Pipeline per item:
1. Drop extraction garbage (headers, totals, appliance text)
2. Sum the item's own modifications
3. Add applicable fixed-price manufacturer options
4. Resolve the base price through the catalog cascade
   (own code, then candidate keys, then the extracted price)
5. Add percentage options on the resolved base price
6. Apply the manufacturer multiplier and the tier multiplier
7. Round each output field to whole currency units

Everything here is a pure function of its inputs; no I/O, no state.
"""
import logging
import math
from typing import Optional

from ..config.settings import get_settings, Settings
from .catalog_resolver import CatalogIndex, resolve_item
from .confusions import DEFAULT_CONFUSIONS
from .garbage_filter import filter_items
from .models import (
    CabinetItem, Manufacturer, ManufacturerOption, PricingTier, ProjectSpecs,
    PricingLineItem, AppliedOption, BASE, WALL, FILLER, PANEL,
    NOT_FOUND, EXTRACTED_SOURCE, coerce_float, coerce_price, coerce_quantity,
)

logger = logging.getLogger(__name__)

DEFAULT_TIER_NAME = "Standard"
MODIFICATION_SECTION = "PDF Extraction"

DRAWER_SECTION = "E-Drawer"
HINGE_SECTION = "F-Hinge"
FINISH_SECTION = "D-Finish"


def round_currency(amount: float) -> float:
    """Round half up to a whole currency unit."""
    return float(math.floor(amount + 0.5))


def resolve_tier(manufacturer: Manufacturer, tier_id: Optional[str], specs: Optional[ProjectSpecs] = None,
                 default_name: str = DEFAULT_TIER_NAME) -> PricingTier:
    """
    Find the pricing tier for a run.

    Falls back to the manufacturer's first tier, then to a synthetic tier
    named after the project's price group (or "Standard") at multiplier 1.0.
    """
    for tier in manufacturer.tiers:
        if tier.id == tier_id:
            return tier
    if manufacturer.tiers:
        return manufacturer.tiers[0]
    name = (specs.price_group if specs and specs.price_group else None) or default_name
    return PricingTier(id=name, name=name, multiplier=1.0)


def active_options(manufacturer: Manufacturer, specs: Optional[ProjectSpecs]) -> list[ManufacturerOption]:
    """Manufacturer options the project has switched on, in manufacturer order."""
    if specs is None:
        return []
    return [opt for opt in manufacturer.options if specs.selected_options.get(opt.id)]


def option_applies(option: ManufacturerOption, item: CabinetItem) -> bool:
    """Whether a fixed-price option is charged on this item type."""
    category = (option.category or "").lower()
    name = (option.name or "").lower()

    if (option.section == DRAWER_SECTION or category == "drawer") and item.type != BASE:
        return False
    if (option.section == HINGE_SECTION or category == "hinge") and item.type in (FILLER, PANEL):
        return False
    if "wall" in name and item.type != WALL:
        return False
    if "base" in name and item.type != BASE:
        return False
    return True


def is_percentage_option(option: ManufacturerOption) -> bool:
    """Percentage options, and finish options not already charged as fixed."""
    if option.pricing_type == "percentage":
        return True
    is_finish = option.section == FINISH_SECTION or (option.category or "").lower() == "finish"
    return is_finish and option.pricing_type != "fixed"


def compose_line(
    item: CabinetItem,
    manufacturer: Manufacturer,
    tier: PricingTier,
    options: list[ManufacturerOption],
    catalog: Optional[CatalogIndex] = None,
) -> PricingLineItem:
    """
    Price a single item.

    Args:
        item: Cabinet item (not modified)
        manufacturer: Manufacturer record (not modified)
        tier: Tier whose name selects the catalog column
        options: Active manufacturer options
        catalog: Prebuilt lookup index; built from the manufacturer if omitted

    Returns:
        A new PricingLineItem with rounded price fields and an audit trace
    """
    if catalog is None:
        catalog = CatalogIndex.build(manufacturer.catalog)

    quantity = coerce_quantity(item.quantity)
    line = PricingLineItem.from_item(item, quantity)
    line.tier_name = tier.name
    line.tier_multiplier = coerce_float(tier.multiplier, 1.0)
    options_price = 0.0

    # 1. Item modifications
    for mod in item.modifications:
        price = coerce_price(mod.price)
        options_price += price
        line.applied_options.append(AppliedOption(mod.description, price, MODIFICATION_SECTION))
        line.add_trace("Modification", mod.description, f"${price:.2f}")

    # 2. Fixed manufacturer options
    for opt in options:
        if opt.pricing_type != "fixed" or not option_applies(opt, item):
            continue
        price = coerce_price(opt.price)
        if price > 0:
            options_price += price
            line.applied_options.append(AppliedOption(opt.name, price, opt.section))
            line.add_trace("Option", f"{opt.name} [{opt.section}]", f"${price:.2f}")

    # 3. Base price
    confusions = manufacturer.confusions or DEFAULT_CONFUSIONS
    match = resolve_item(item, catalog, tier.name, confusions)
    extracted = coerce_price(item.extracted_price)
    if match:
        base_price = match.price
        line.source = match.source
        line.matched_sku = match.matched_sku
        line.normalized_code = match.matched_sku
        line.add_trace("Price Resolution", match.source, f"${base_price:.2f}")
        if match.tier_selection != "exact":
            line.add_warning(f"{item.original_code}: no '{tier.name}' column, used '{match.tier_column}'")
    elif extracted > 0:
        base_price = extracted
        line.source = EXTRACTED_SOURCE
        line.add_trace("Price Resolution", "No catalog match, using extracted price", f"${base_price:.2f}")
        line.add_warning(f"{item.original_code}: priced from source document")
    else:
        base_price = 0.0
        line.source = NOT_FOUND
        line.add_trace("Price Resolution", "No catalog match and no extracted price")
        line.add_warning(f"{item.original_code}: not found in catalog, check price")

    # 4. Percentage options on the resolved base
    for opt in options:
        if not is_percentage_option(opt):
            continue
        price = base_price * coerce_price(opt.price)
        options_price += price
        line.applied_options.append(AppliedOption(f"{opt.name} (%)", price, opt.section))
        line.add_trace("Option", f"{opt.name} {coerce_price(opt.price):.0%} of base", f"${price:.2f}")

    # 5-7. Multipliers and extension
    adjusted_base = base_price * coerce_float(manufacturer.base_pricing_multiplier, 1.0)
    final_unit_price = (adjusted_base + options_price) * line.tier_multiplier
    total_price = final_unit_price * quantity

    # 8. Each field rounded on its own
    line.base_price = round_currency(adjusted_base)
    line.options_price = round_currency(options_price)
    line.final_unit_price = round_currency(final_unit_price)
    line.total_price = round_currency(total_price)
    line.add_trace("Extension", f"Quantity {quantity} × ${final_unit_price:.2f}", f"${line.total_price:.2f}")

    return line


def _unpriced_line(item: CabinetItem, tier: PricingTier, error: Exception) -> PricingLineItem:
    line = PricingLineItem.from_item(item, coerce_quantity(item.quantity))
    line.tier_name = tier.name
    line.tier_multiplier = coerce_float(tier.multiplier, 1.0)
    line.source = NOT_FOUND
    line.add_warning(f"{item.original_code}: pricing failed ({error}), check price")
    return line


def price_items(
    items: list[CabinetItem],
    manufacturer: Manufacturer,
    tier_id: Optional[str],
    specs: Optional[ProjectSpecs] = None,
    default_tier_name: str = DEFAULT_TIER_NAME,
) -> list[PricingLineItem]:
    """
    Price an order.

    Garbage rows are dropped; every remaining item yields exactly one line,
    in input order. An unmatched item is a zero-priced "NOT FOUND" line and
    a failure on one item never stops the others.
    """
    tier = resolve_tier(manufacturer, tier_id, specs, default_tier_name)
    options = active_options(manufacturer, specs)
    catalog = CatalogIndex.build(manufacturer.catalog)

    lines = []
    for item in filter_items(items):
        try:
            line = compose_line(item, manufacturer, tier, options, catalog)
        except Exception as e:
            logger.exception(f"Pricing failed for item {item.id} ({item.original_code})")
            line = _unpriced_line(item, tier, e)
        if line.source == NOT_FOUND:
            logger.info(f"No price for {item.original_code!r} (item {item.id})")
        lines.append(line)
    return lines


class PricingEngine:
    """
    Prices cabinet orders against manufacturer catalogs.

    Thin wrapper over ``price_items`` carrying settings (default tier name)
    and a run-level log line.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def price(
        self,
        items: list[CabinetItem],
        manufacturer: Manufacturer,
        tier_id: Optional[str],
        specs: Optional[ProjectSpecs] = None,
    ) -> list[PricingLineItem]:
        lines = price_items(items, manufacturer, tier_id, specs, self.settings.default_tier_name)
        unpriced = sum(1 for line in lines if line.needs_review)
        logger.info(
            f"Priced {len(lines)} of {len(items)} items for {manufacturer.name} "
            f"({unpriced} need review)"
        )
        return lines
