"""
Shared test fixtures - small manufacturer records built in memory.
"""
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from cabinet_pricing.engine.models import (
    CabinetItem, Manufacturer, ManufacturerOption, PricingTier, ProjectSpecs,
)


def make_item(code, item_type="Base", width=0, height=0, depth=0, quantity=1, **kwargs):
    """Build a CabinetItem with an id derived from its code."""
    return CabinetItem(
        id=kwargs.pop('id', code),
        original_code=code,
        type=item_type,
        description=kwargs.pop('description', ''),
        width=width,
        height=height,
        depth=depth,
        quantity=quantity,
        **kwargs,
    )


@pytest.fixture
def standard_tier():
    return PricingTier(id="std", name="Standard", multiplier=1.0)


@pytest.fixture
def manufacturer(standard_tier):
    """Manufacturer with a handful of catalog rows and a few options."""
    return Manufacturer(
        id="acme",
        name="Acme Cabinets",
        base_pricing_multiplier=1.0,
        tiers=[standard_tier, PricingTier(id="paint", name="Painted", multiplier=1.2)],
        options=[
            ManufacturerOption(id="dovetail", name="Dovetail Drawers", category="Drawer",
                               section="E-Drawer", pricing_type="fixed", price=40),
            ManufacturerOption(id="softclose", name="Soft Close Hinges", category="Hinge",
                               section="F-Hinge", pricing_type="fixed", price=10),
            ManufacturerOption(id="wallglass", name="Wall Glass Doors", category="Door",
                               section="C-Door", pricing_type="fixed", price=60),
            ManufacturerOption(id="glaze", name="Glaze", category="Finish",
                               section="D-Finish", pricing_type="percentage", price=0.10),
        ],
        catalog={
            "B15": {"Standard": 100, "Painted": 130},
            "W3030": {"Standard": 200, "Painted": 240},
            "F3": {"Standard": 20},
            "VDB27": {"Standard": 80},
        },
    )


@pytest.fixture
def select():
    """Build ProjectSpecs selecting the given option ids."""
    def _select(*option_ids):
        return ProjectSpecs(selected_options={oid: True for oid in option_ids})
    return _select
