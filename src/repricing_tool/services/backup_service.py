"""
Backup Service - snapshots of the sqlite database.
"""
import logging
from datetime import datetime, timezone
from pathlib import Path

from ..store.database import Database

logger = logging.getLogger(__name__)


class BackupService:
    """Creates timestamped copies of the live database."""

    def __init__(self, database: Database, backups_dir: Path):
        self.database = database
        self.backups_dir = Path(backups_dir)

    def create_backup(self, prefix: str = 'manual') -> str:
        """
        Snapshot the database into the backups directory.

        Returns:
            Filename of the backup, e.g. backup_manual_2026-01-31T10-15-00-123Z.sqlite
        """
        timestamp = _iso_timestamp().replace(':', '-').replace('.', '-')
        filename = f"backup_{prefix}_{timestamp}.sqlite"
        self.backups_dir.mkdir(parents=True, exist_ok=True)
        self.database.backup_to(self.backups_dir / filename)
        logger.info("Backup created: %s", filename)
        return filename

    def list_backups(self) -> list[str]:
        """Backup filenames, newest first."""
        if not self.backups_dir.exists():
            return []
        files = sorted(
            self.backups_dir.glob('backup_*.sqlite'),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        return [p.name for p in files]


def _iso_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"
