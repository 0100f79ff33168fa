"""Engine subpackage - code matching and price composition."""
from .pricing_engine import PricingEngine, price_items, compose_line
from .normalizer import normalize_code
from .key_generator import candidate_keys
from .catalog_resolver import resolve, resolve_item
from .garbage_filter import is_garbage
from .quote_summary import summarize_quote
from .models import (
    CabinetItem, Manufacturer, PricingTier, ManufacturerOption, ProjectSpecs,
    PricingLineItem, QuoteFinancials, QuoteSummary,
)

__all__ = [
    'PricingEngine', 'price_items', 'compose_line', 'normalize_code',
    'candidate_keys', 'resolve', 'resolve_item', 'is_garbage', 'summarize_quote',
    'CabinetItem', 'Manufacturer', 'PricingTier', 'ManufacturerOption',
    'ProjectSpecs', 'PricingLineItem', 'QuoteFinancials', 'QuoteSummary',
]
