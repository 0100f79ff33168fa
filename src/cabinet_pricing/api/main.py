from fastapi import FastAPI, HTTPException, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging

from cabinet_pricing.engine import (
    PricingEngine, CabinetItem, ProjectSpecs, QuoteFinancials,
    normalize_code, candidate_keys, summarize_quote,
)
from cabinet_pricing.engine.pricing_engine import resolve_tier
from cabinet_pricing.data.catalog_repository import ManufacturerNotFoundError
from cabinet_pricing.api.state import get_engine, get_manufacturers

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cabinet Pricing API",
    description="Quotes cabinet orders against manufacturer price catalogs",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PriceRequest(BaseModel):
    manufacturer_id: str
    tier_id: Optional[str] = None
    items: List[Dict[str, Any]]
    specs: Optional[Dict[str, Any]] = None
    financials: Optional[Dict[str, Any]] = None


class NormalizeRequest(BaseModel):
    codes: List[str]


class CandidatesRequest(BaseModel):
    item: Dict[str, Any]


def _load_manufacturer(manufacturer_id: str, repo):
    try:
        return repo.get(manufacturer_id)
    except ManufacturerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/")
async def root():
    return {"status": "online", "message": "Cabinet Pricing API Active"}


@app.post("/price")
async def price_order(req: PriceRequest,
                      engine: PricingEngine = Depends(get_engine),
                      repo=Depends(get_manufacturers)):
    manufacturer = _load_manufacturer(req.manufacturer_id, repo)
    try:
        items = [CabinetItem.from_dict(i) for i in req.items]
        specs = ProjectSpecs.from_dict(req.specs) if req.specs else None
        financials = QuoteFinancials.from_dict(req.financials) if req.financials else None

        lines = engine.price(items, manufacturer, req.tier_id, specs)
        tier = resolve_tier(manufacturer, req.tier_id, specs, engine.settings.default_tier_name)
        return {
            "manufacturer": manufacturer.name,
            "tier": jsonable_encoder(tier),
            "lines": [line.to_dict() for line in lines],
            "summary": jsonable_encoder(summarize_quote(lines, financials)),
        }
    except Exception as e:
        logger.exception("Pricing request failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/normalize")
async def normalize_codes(req: NormalizeRequest):
    return {code: normalize_code(code) for code in req.codes}


@app.post("/candidates")
async def list_candidates(req: CandidatesRequest):
    item = CabinetItem.from_dict(req.item)
    return {"code": item.original_code, "candidates": candidate_keys(item)}


@app.get("/manufacturers/{manufacturer_id}/catalog")
async def get_catalog(manufacturer_id: str, search: Optional[str] = None, repo=Depends(get_manufacturers)):
    manufacturer = _load_manufacturer(manufacturer_id, repo)
    entries = manufacturer.catalog
    if search:
        needle = search.strip().upper()
        entries = {sku: prices for sku, prices in entries.items() if needle in sku}

    # Limit results
    limit = 200 if search else 100
    result = dict(list(entries.items())[:limit])
    return {
        "manufacturer": manufacturer.name,
        "sku_count": len(manufacturer.catalog),
        "catalog": result,
    }
