"""
Export Service - writes approved products to Excel batches.

Each batch is one xlsx file named batch_<ms timestamp>.xlsx; the products
in it move to status "exported" and remember the batch id.
"""
import logging
import re
import time
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
from sqlalchemy import insert, update

from ..engine.errors import EmptyBatchError
from ..engine.models import ProductStatus
from ..store.database import Database, batches, products
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)

SHEET_NAME = 'Export'

# Product attribute → (column header, width)
EXPORT_COLUMNS = {
    'sku': ('SKU', 15),
    'name': ('Наименование', 50),
    'current_price': ('Старая цена', 15),
    'new_price': ('Новая цена', 15),
}

BATCH_FILE_PATTERN = re.compile(r'batch_(\d+)\.xlsx')


def batch_filename(batch_id: int) -> str:
    return f"batch_{batch_id}.xlsx"


def download_url(filename: str) -> str:
    return f"/api/download/{filename}"


class ExportService:
    """Creates and lists export batches."""

    def __init__(self, database: Database, catalog: CatalogService, exports_dir: Path):
        self.database = database
        self.catalog = catalog
        self.exports_dir = Path(exports_dir)

    def create_batch(self) -> dict:
        """
        Export every approved product into a new batch file.

        Returns:
            Dict with batch_id, count, filename and download_url

        Raises:
            EmptyBatchError: no product is approved
        """
        approved = self.catalog.find_by_status(ProductStatus.APPROVED)
        if not approved:
            raise EmptyBatchError("No approved products to export")

        batch_id = int(time.time() * 1000)
        filename = batch_filename(batch_id)
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.exports_dir / filename

        df = pd.DataFrame(
            [{attr: getattr(p, attr) for attr in EXPORT_COLUMNS} for p in approved],
            columns=list(EXPORT_COLUMNS),
        ).rename(columns={attr: header for attr, (header, _) in EXPORT_COLUMNS.items()})

        with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            sheet = writer.sheets[SHEET_NAME]
            for letter, (_, width) in zip('ABCD', EXPORT_COLUMNS.values()):
                sheet.column_dimensions[letter].width = width

        skus = [p.sku for p in approved]
        with self.database.begin() as conn:
            conn.execute(
                update(products)
                .where(products.c.sku.in_(skus))
                .values(status=ProductStatus.EXPORTED.value, batch_id=batch_id)
            )
            conn.execute(insert(batches).values(
                id=batch_id, item_count=len(skus), filename=filename,
            ))

        logger.info("Batch %s exported with %d products to %s", batch_id, len(skus), file_path)
        return {
            'success': True,
            'batch_id': batch_id,
            'count': len(skus),
            'filename': filename,
            'download_url': download_url(filename),
        }

    def list_batches(self) -> list[dict]:
        """Exported batch files, newest first."""
        if not self.exports_dir.exists():
            return []

        history = []
        for path in self.exports_dir.glob('*.xlsx'):
            stats = path.stat()
            match = BATCH_FILE_PATTERN.fullmatch(path.name)
            timestamp_ms = int(match.group(1)) if match else stats.st_mtime * 1000
            date = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
            history.append((timestamp_ms, {
                'id': path.name,
                'name': path.name,
                'date': date.isoformat(),
                'size': stats.st_size,
                'url': download_url(path.name),
            }))

        history.sort(key=lambda entry: entry[0], reverse=True)
        return [entry for _, entry in history]

    def resolve_download(self, filename: str) -> Path:
        """
        Path of an export file, restricted to the exports directory.

        Raises:
            FileNotFoundError: no such export
        """
        safe_name = Path(filename).name
        path = self.exports_dir / safe_name
        if not safe_name or not path.is_file():
            raise FileNotFoundError(f"Export '{safe_name}' not found")
        return path
