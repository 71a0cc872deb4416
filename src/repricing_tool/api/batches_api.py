"""
Batches API - FastAPI router for seeding, Excel exports and backups.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel

from ..engine.errors import EmptyBatchError, SeedError
from ..services.backup_service import BackupService
from ..services.export_service import ExportService
from ..services.seed_service import SeedService
from .state import get_backup_service, get_export_service, get_seed_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["batches"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class SeedResponse(BaseModel):
    success: bool
    message: str
    inserted: int
    skipped: int
    skip_reasons: dict[str, int]


class BatchResponse(BaseModel):
    """Response model for a created export batch."""
    success: bool
    batch_id: int
    count: int
    filename: str
    download_url: str


class BatchFile(BaseModel):
    """One export file in the history."""
    id: str
    name: str
    date: str
    size: int
    url: str


class BackupResponse(BaseModel):
    success: bool
    message: str
    filename: str


@router.post("/seed", response_model=SeedResponse)
def seed(seeder: SeedService = Depends(get_seed_service)):
    """Replace all products with the seed file (backs up the database first)."""
    try:
        report = seeder.seed_products()
    except SeedError as e:
        logger.error("Seed failed: %s", e)
        raise HTTPException(status_code=500, detail={"error": "Seed failed", "details": str(e)})
    return {
        "success": True,
        "message": f"Database updated. Loaded: {report['inserted']}, Skipped: {report['skipped']}",
        "inserted": report['inserted'],
        "skipped": report['skipped'],
        "skip_reasons": report['skip_reasons'],
    }


@router.post("/batches/create", response_model=BatchResponse)
def create_batch(exports: ExportService = Depends(get_export_service)):
    """Export all approved products into a new Excel batch."""
    try:
        return exports.create_batch()
    except EmptyBatchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Export failed")
        raise HTTPException(status_code=500, detail={"error": "Export failed", "details": str(e)})


@router.get("/batches", response_model=list[BatchFile])
def list_batches(exports: ExportService = Depends(get_export_service)):
    """History of export files, newest first."""
    return exports.list_batches()


@router.get("/download/{filename}")
def download(filename: str, exports: ExportService = Depends(get_export_service)):
    """Download an export file by name."""
    try:
        path = exports.resolve_download(filename)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return FileResponse(path, filename=path.name, media_type=XLSX_MEDIA_TYPE)


@router.post("/backup", response_model=BackupResponse)
def create_backup(backups: BackupService = Depends(get_backup_service)):
    """Create a manual database backup."""
    try:
        filename = backups.create_backup('user_request')
    except Exception as e:
        logger.exception("Backup failed")
        raise HTTPException(status_code=500, detail={"error": "Backup failed", "details": str(e)})
    return {"success": True, "message": f"Backup created: {filename}", "filename": filename}
