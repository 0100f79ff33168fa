"""Project totals from priced lines and dealer financials."""
from typing import Optional

from .models import PricingLineItem, QuoteFinancials, QuoteSummary


def summarize_quote(lines: list[PricingLineItem], financials: Optional[QuoteFinancials] = None) -> QuoteSummary:
    """
    Roll priced lines up into quote totals.

    Discount comes off the subtotal, tax is charged on the discounted
    amount, then shipping, fuel surcharge and misc charges are added.
    """
    fin = financials or QuoteFinancials()

    subtotal = sum(line.total_price for line in lines)
    discount_amount = subtotal * (fin.discount_rate / 100)
    post_discount = subtotal - discount_amount
    tax_amount = post_discount * (fin.tax_rate / 100)
    grand_total = post_discount + tax_amount + fin.shipping_cost + fin.fuel_surcharge + fin.misc_charge

    return QuoteSummary(
        subtotal=round(subtotal, 2),
        discount_amount=round(discount_amount, 2),
        post_discount=round(post_discount, 2),
        tax_amount=round(tax_amount, 2),
        grand_total=round(grand_total, 2),
        line_count=len(lines),
        review_count=sum(1 for line in lines if line.needs_review),
    )
