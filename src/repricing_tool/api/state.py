"""
Shared service instances used by the API routers.

Built lazily from settings so tests can point them at a temporary project.
"""
from dataclasses import dataclass
from typing import Optional

from ..config.settings import get_settings, Settings
from ..services.backup_service import BackupService
from ..services.catalog_service import CatalogService
from ..services.export_service import ExportService
from ..services.seed_service import SeedService
from ..store.database import Database


@dataclass
class AppState:
    settings: Settings
    database: Database
    catalog: CatalogService
    backups: BackupService
    seeder: SeedService
    exports: ExportService

    @classmethod
    def build(cls, settings: Settings) -> 'AppState':
        settings.ensure_dirs()
        database = Database(settings.database_url)
        database.init_db()
        catalog = CatalogService(
            database,
            markup=settings.markup,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )
        backups = BackupService(database, settings.backups_dir)
        return cls(
            settings=settings,
            database=database,
            catalog=catalog,
            backups=backups,
            seeder=SeedService(database, backups, settings.seed_file),
            exports=ExportService(database, catalog, settings.exports_dir),
        )


_state: Optional[AppState] = None


def get_state() -> AppState:
    """Get the global application state, building it on first use."""
    global _state
    if _state is None:
        _state = AppState.build(get_settings())
    return _state


def reset_state():
    """Dispose the current state; the next request rebuilds it."""
    global _state
    if _state is not None:
        _state.database.dispose()
    _state = None


def get_catalog_service() -> CatalogService:
    return get_state().catalog


def get_seed_service() -> SeedService:
    return get_state().seeder


def get_export_service() -> ExportService:
    return get_state().exports


def get_backup_service() -> BackupService:
    return get_state().backups
