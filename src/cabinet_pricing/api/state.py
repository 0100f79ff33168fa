"""Shared API state - engine and repositories built once per process."""
from ..config.settings import get_settings
from ..data.catalog_repository import CsvCatalogRepository, ManufacturerRepository
from ..engine import PricingEngine

settings = get_settings()

engine = PricingEngine(settings)
catalogs = CsvCatalogRepository(settings.catalogs_dir)
manufacturers = ManufacturerRepository(settings.manufacturers_dir, catalogs)


def get_engine() -> PricingEngine:
    return engine


def get_manufacturers() -> ManufacturerRepository:
    return manufacturers
