"""
Garbage Filter - drops extraction artifacts that are not cabinets.

Document extraction sometimes returns page footers, totals and header
text as items. These are dropped silently before pricing.
"""
import logging
import re

from .models import CabinetItem

logger = logging.getLogger(__name__)


MARKER_PHRASES = (
    'PAGE ', 'OF PAGE', 'SUB TOTAL', 'SUBTOTAL', 'GRAND TOTAL', 'ORDER TOTAL',
    'TAX', 'SHIPPING', 'JOB NAME', 'PROJECT:', 'QUOTE:', 'DATE:', 'SIGNATURE',
    'CABINET SPECIFICATIONS', 'CONSTRUCTION:', 'DOOR STYLE:', 'LAYOUT',
)

_PAGE_OF = re.compile(r'PAGE\s+\d+\s+OF\s+\d+')


def is_garbage(item: CabinetItem) -> bool:
    """Return True when the item is a structural artifact, not a cabinet."""
    code = str(item.original_code or "")
    description = str(item.description or "")
    text = f"{code} {description}".upper()

    if _PAGE_OF.search(text):
        return True

    if any(phrase in text for phrase in MARKER_PHRASES):
        return True

    # A sentence in the code column
    if len(code) > 20 and ' ' in code:
        return True

    if code.strip().upper() == 'KITCHEN' or description.strip().upper() == 'KITCHEN':
        return True

    # Appliance headers; panels and cabinets around them are real items
    if 'REFRIGERATOR' in text and 'PANEL' not in text and 'CABINET' not in text:
        return True
    if 'RANGE' in text and 'HOOD' not in text and 'CABINET' not in text:
        return True

    return False


def filter_items(items: list[CabinetItem]) -> list[CabinetItem]:
    """Keep real cabinet items, preserving input order."""
    kept = []
    for item in items:
        if is_garbage(item):
            logger.debug(f"Dropped non-cabinet row: {item.original_code!r} {item.description!r}")
            continue
        kept.append(item)
    return kept
