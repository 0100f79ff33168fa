#!/usr/bin/env python
"""
Price an extracted order file from the command line.

Usage:
    python scripts/quote_order.py order.json --manufacturer demo --tier oak

The order file is a JSON list of items (as produced by document
extraction) or an object with "items", "specs" and "financials" keys.
"""
import argparse
import json
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from cabinet_pricing.config.logging import setup_logging
from cabinet_pricing.config.settings import get_settings
from cabinet_pricing.data.catalog_repository import (
    CsvCatalogRepository, ManufacturerRepository, ManufacturerNotFoundError,
)
from cabinet_pricing.engine import (
    PricingEngine, CabinetItem, ProjectSpecs, QuoteFinancials, summarize_quote,
)


def main():
    parser = argparse.ArgumentParser(description="Price a cabinet order")
    parser.add_argument('order', type=Path)
    parser.add_argument('--manufacturer', required=True)
    parser.add_argument('--tier', default=None)
    parser.add_argument('--trace', action='store_true', help="Print the resolution trace per line")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level)

    with open(args.order, 'r', encoding='utf-8') as f:
        order = json.load(f)
    if isinstance(order, list):
        order = {"items": order}

    repo = ManufacturerRepository(settings.manufacturers_dir, CsvCatalogRepository(settings.catalogs_dir))
    try:
        manufacturer = repo.get(args.manufacturer)
    except ManufacturerNotFoundError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    items = [CabinetItem.from_dict(i) for i in order.get("items", [])]
    specs = ProjectSpecs.from_dict(order["specs"]) if order.get("specs") else None
    financials = QuoteFinancials.from_dict(order["financials"]) if order.get("financials") else None

    lines = PricingEngine(settings).price(items, manufacturer, args.tier, specs)

    print("=" * 72)
    print(f"{manufacturer.name.upper()} QUOTE")
    print("=" * 72)
    for line in lines:
        flag = "  CHECK PRICE" if line.needs_review else ""
        print(f"{line.quantity:>3} x {line.original_code:<16} ${line.final_unit_price:>9,.0f}  ${line.total_price:>10,.0f}{flag}")
        print(f"      {line.source}")
        if args.trace:
            for text in line.get_trace_text().splitlines():
                print(f"      {text}")

    summary = summarize_quote(lines, financials)
    print("-" * 72)
    print(f"Subtotal:     ${summary.subtotal:>12,.2f}")
    if summary.discount_amount:
        print(f"Discount:    (${summary.discount_amount:>12,.2f})")
    if summary.tax_amount:
        print(f"Tax:          ${summary.tax_amount:>12,.2f}")
    print(f"Grand Total:  ${summary.grand_total:>12,.2f}")
    if summary.review_count:
        print(f"\n{summary.review_count} line(s) need a manual price check")


if __name__ == "__main__":
    main()
