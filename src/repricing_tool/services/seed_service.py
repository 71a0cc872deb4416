"""
Seed Service - replaces the product table with the contents of a JSON export.

Loads products_initial.json with added:
- Automatic backup before the table is cleared
- Key normalization for the export's inconsistent casing
- Skip report with a reason for every rejected row
"""
import json
import hashlib
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import delete, insert

from ..engine.errors import SeedError
from ..store.database import Database, products
from .backup_service import BackupService

logger = logging.getLogger(__name__)

# Column → accepted spellings in the source JSON, in lookup order
KEY_ALIASES = {
    'sku': ('sku', 'SKU', 'Sku'),
    'name': ('name', 'Name', 'NAME'),
    'stock': ('stock', 'Stock'),
    'cost_price': ('costPrice', 'CostPrice'),
    'current_price': ('currentPrice', 'CurrentPrice'),
    'sales_qty': ('salesQty', 'SalesQty'),
    'abc_margin': ('abcMargin', 'AbcMargin'),
    'margin_total': ('marginTotal', 'MarginTotal'),
    'source_status': ('sourceStatus', 'SourceStatus'),
}

SKIP_MISSING_KEYS = 'Missing SKU/Name'
SKIP_NEGATIVE_STOCK = 'Stock < 0'
SKIP_ABC_ONLY = 'Source=ABC_Only'
SKIP_INVALID_NUMBER = 'Invalid number'


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def _first_truthy(item: dict, keys: tuple):
    for key in keys:
        if item.get(key):
            return item[key]
    return None


def _first_present(item: dict, keys: tuple):
    """First value that is set; 0 counts, None and blank strings do not."""
    for key in keys:
        value = item.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def normalize_item(item: dict) -> dict:
    """
    Map one raw JSON object onto product columns.

    Stock keeps an explicit 0 and treats a blank value as 0; every other
    field falls back to its default when missing or empty.

    Raises:
        ValueError: a numeric field cannot be parsed
    """
    stock = _first_present(item, KEY_ALIASES['stock'])
    return {
        'sku': _first_truthy(item, KEY_ALIASES['sku']),
        'name': _first_truthy(item, KEY_ALIASES['name']),
        'stock': int(float(stock if stock is not None else 0)),
        'cost_price': float(_first_truthy(item, KEY_ALIASES['cost_price']) or 0),
        'current_price': float(_first_truthy(item, KEY_ALIASES['current_price']) or 0),
        'sales_qty': int(float(_first_truthy(item, KEY_ALIASES['sales_qty']) or 0)),
        'abc_margin': _first_truthy(item, KEY_ALIASES['abc_margin']) or 'N',
        'margin_total': float(_first_truthy(item, KEY_ALIASES['margin_total']) or 0),
        'source_status': _first_truthy(item, KEY_ALIASES['source_status']) or '',
    }


def skip_reason(row: dict) -> Optional[str]:
    """Why a normalized row must not be loaded, or None to keep it."""
    if not row['sku'] or not row['name']:
        return SKIP_MISSING_KEYS
    # Zero stock is kept
    if row['stock'] < 0:
        return SKIP_NEGATIVE_STOCK
    if row['source_status'] == 'ABC_Only':
        return SKIP_ABC_ONLY
    return None


def load_seed_file(path: Path) -> list:
    """Read and validate the seed JSON array."""
    if not path.exists():
        raise SeedError(f"Seed file {path} not found")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SeedError(f"Seed file is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise SeedError("Seed JSON must be an array of objects")
    return data


class SeedService:
    """Loads the initial product list into the database."""

    def __init__(self, database: Database, backup_service: BackupService, seed_file: Path):
        self.database = database
        self.backup_service = backup_service
        self.seed_file = Path(seed_file)

    def seed_products(self, path: Optional[Path] = None) -> dict:
        """
        Replace all products with the rows of the seed file.

        Args:
            path: Optional seed file override

        Returns:
            Report dict with inserted, skipped and skip_reasons

        Raises:
            SeedError: the seed file is missing or malformed
        """
        path = Path(path) if path else self.seed_file
        logger.info("Seed started from %s", path)

        try:
            backup_name = self.backup_service.create_backup('before_seed')
            logger.info("Auto-backup created: %s", backup_name)
        except Exception:
            logger.warning("Could not create backup before seed", exc_info=True)
            backup_name = None

        raw_items = load_seed_file(path)
        logger.info("Found %d items in seed file", len(raw_items))

        rows = []
        reasons = Counter()
        for item in raw_items:
            if not isinstance(item, dict):
                reasons[SKIP_MISSING_KEYS] += 1
                continue
            try:
                row = normalize_item(item)
            except (TypeError, ValueError):
                reasons[SKIP_INVALID_NUMBER] += 1
                continue
            reason = skip_reason(row)
            if reason:
                reasons[reason] += 1
                continue
            row['sku'] = str(row['sku']).strip()
            row['name'] = str(row['name'])
            rows.append(row)

        with self.database.begin() as conn:
            conn.execute(delete(products))
            if rows:
                conn.execute(insert(products).prefix_with('OR REPLACE'), rows)

        skipped = sum(reasons.values())
        logger.info("Seed finished. Inserted: %d, Skipped: %d", len(rows), skipped)
        if reasons:
            logger.info("Skip reasons: %s", dict(reasons))

        return {
            'timestamp': datetime.now().isoformat(),
            'input_file': {'path': str(path), 'hash': get_file_hash(path)},
            'backup': backup_name,
            'inserted': len(rows),
            'skipped': skipped,
            'skip_reasons': dict(reasons),
        }
