"""
Centralized settings and path configuration for the repricing tool.

Every field can be overridden with a REPRICING_<FIELD> environment variable
(or a .env file in the project root). Values are validated on load so a bad
configuration stops the application at startup.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

ENV_PREFIX = 'REPRICING_'


def get_project_root() -> Path:
    """Get the project root directory (where the seed file or database lives)."""
    env_root = os.environ.get(f'{ENV_PREFIX}PROJECT_ROOT')
    if env_root:
        return Path(env_root).resolve()
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'products_initial.json').exists() or (parent / 'database.sqlite').exists():
            return parent
    # Fallback to 4 levels up from this file (src/repricing_tool/config/settings.py)
    return Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseModel):
    """Typed application settings with sensible defaults."""

    model_config = ConfigDict(extra="ignore")

    # Project paths
    project_root: Path

    # Storage
    database_path: Path
    exports_dir: Path
    backups_dir: Path

    # Input files
    seed_file: Path

    # Pricing
    markup: float = Field(1.06, gt=0, allow_inf_nan=False)

    # Listing
    default_page_size: int = Field(50, ge=1)
    max_page_size: int = Field(500, ge=1)

    # Runtime
    log_level: str = 'INFO'
    api_host: str = '0.0.0.0'
    api_port: int = Field(8000, ge=1, le=65535)

    @model_validator(mode='after')
    def _check_page_sizes(self) -> 'Settings':
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds max_page_size ({self.max_page_size})"
            )
        return self

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.database_path}"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """
        Load settings from the project structure and environment.

        Raises:
            RuntimeError: an environment override fails validation
        """
        root = project_root or get_project_root()
        load_dotenv(root / '.env')

        values = {
            'project_root': root,
            'database_path': root / 'database.sqlite',
            'exports_dir': root / 'public' / 'exports',
            'backups_dir': root / 'backups',
            'seed_file': root / 'products_initial.json',
        }

        for name in cls.model_fields:
            raw = os.environ.get(f'{ENV_PREFIX}{name.upper()}')
            if raw is None or name == 'project_root':
                continue
            values[name] = raw

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            problems = "; ".join(
                f"{ENV_PREFIX}{str(err['loc'][0]).upper()}: {err['msg']}" if err['loc'] else err['msg']
                for err in exc.errors()
            )
            raise RuntimeError(f"Invalid configuration: {problems}") from exc

    def ensure_dirs(self):
        """Create the export and backup directories if missing."""
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        self.backups_dir.mkdir(parents=True, exist_ok=True)


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call reloads them."""
    global _settings
    _settings = None
