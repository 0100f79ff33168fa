"""
Centralized settings and path configuration for the cabinet pricing tool.
"""
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Manufacturer records (<id>.json) and their catalogs (<id>.csv)
    manufacturers_dir: Path
    catalogs_dir: Path

    # Tier name used when a manufacturer defines no tiers
    default_tier_name: str = 'Standard'

    log_level: str = 'INFO'

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure."""
        root = project_root or get_project_root()
        data_dir = root / 'data'

        return cls(
            project_root=root,
            manufacturers_dir=data_dir / 'manufacturers',
            catalogs_dir=data_dir / 'catalogs',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
