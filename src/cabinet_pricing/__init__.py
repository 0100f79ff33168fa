"""
Cabinet Pricing Package

Quotes cabinet orders by matching OCR'd product codes against a
manufacturer's price catalog: Code → Candidate Keys → Catalog Match → Price.
"""

__version__ = "1.0.0"
