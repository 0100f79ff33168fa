"""
Catalog Repositories - read-only access to manufacturer catalogs.

The pricing engine never touches storage. Callers fetch a Manufacturer
(with its catalog) through one of these repositories and pass it in.

Catalog CSV layout (one file per manufacturer, ``<id>.csv``):

    SKU,Oak,Maple,Painted
    B15,210,235,260
    W3030,"$1,180.00",1240,

Every column besides the SKU column is a tier price column.
"""
import json
import logging
from pathlib import Path
from typing import Optional, Protocol

import pandas as pd

from ..engine.models import Manufacturer, coerce_price
from ..engine.normalizer import normalize_catalog_key

logger = logging.getLogger(__name__)

Catalog = dict[str, dict[str, float]]


class ManufacturerNotFoundError(LookupError):
    """Raised when a manufacturer or its catalog is not available."""


class CatalogRepository(Protocol):
    def get(self, manufacturer_id: str) -> Catalog:
        ...


def catalog_from_frame(df: pd.DataFrame, sku_column: str = 'SKU') -> Catalog:
    """
    Convert a wide price sheet into a catalog mapping.

    SKUs are normalized (upper case, no whitespace); blank SKUs and empty
    prices are dropped; the first row wins for duplicate SKUs.
    """
    if sku_column not in df.columns:
        raise ValueError(f"Catalog sheet has no '{sku_column}' column")

    frame = df.copy()
    frame[sku_column] = frame[sku_column].map(normalize_catalog_key)
    frame = frame[frame[sku_column] != '']
    frame = frame[frame[sku_column] != 'NAN']

    duplicates = frame[sku_column].duplicated().sum()
    if duplicates:
        logger.debug(f"Dropped {duplicates} duplicate SKUs")
    frame = frame.drop_duplicates(sku_column)

    tier_columns = [c for c in frame.columns if c != sku_column]
    catalog: Catalog = {}
    for record in frame.to_dict(orient='records'):
        prices = {}
        for column in tier_columns:
            value = record.get(column)
            if value is None or pd.isna(value) or str(value).strip() == '':
                continue
            prices[str(column).strip()] = coerce_price(value)
        if prices:
            catalog[record[sku_column]] = prices
    return catalog


class InMemoryCatalogRepository:
    """Catalogs held in a dict, keyed by manufacturer id."""

    def __init__(self, catalogs: Optional[dict[str, Catalog]] = None):
        self._catalogs = {
            mid: {normalize_catalog_key(sku): dict(prices) for sku, prices in catalog.items()}
            for mid, catalog in (catalogs or {}).items()
        }

    def get(self, manufacturer_id: str) -> Catalog:
        if manufacturer_id not in self._catalogs:
            raise ManufacturerNotFoundError(f"No catalog for manufacturer {manufacturer_id}")
        return self._catalogs[manufacturer_id]


class CsvCatalogRepository:
    """Catalogs stored as ``<manufacturer_id>.csv`` price sheets."""

    def __init__(self, directory: Path, sku_column: str = 'SKU'):
        self.directory = Path(directory)
        self.sku_column = sku_column
        self._cache: dict[str, Catalog] = {}

    def get(self, manufacturer_id: str) -> Catalog:
        if manufacturer_id in self._cache:
            return self._cache[manufacturer_id]

        path = self.directory / f'{manufacturer_id}.csv'
        if not path.exists():
            raise ManufacturerNotFoundError(f"Catalog file not found: {path}")

        df = pd.read_csv(path, dtype={self.sku_column: str})
        catalog = catalog_from_frame(df, self.sku_column)
        logger.info(f"Loaded {len(catalog)} SKUs for {manufacturer_id} from {path.name}")

        self._cache[manufacturer_id] = catalog
        return catalog


class ManufacturerRepository:
    """
    Manufacturer records stored as ``<id>.json``.

    A record without an inline ``catalog`` gets one from the catalog
    repository.
    """

    def __init__(self, directory: Path, catalogs: Optional[CatalogRepository] = None):
        self.directory = Path(directory)
        self.catalogs = catalogs

    def list_ids(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob('*.json'))

    def get(self, manufacturer_id: str) -> Manufacturer:
        path = self.directory / f'{manufacturer_id}.json'
        if not path.exists():
            raise ManufacturerNotFoundError(f"Manufacturer not found: {manufacturer_id}")

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not data.get('catalog') and self.catalogs is not None:
            data['catalog'] = self.catalogs.get(manufacturer_id)

        data.setdefault('id', manufacturer_id)
        return Manufacturer.from_dict(data)
