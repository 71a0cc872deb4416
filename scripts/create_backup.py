#!/usr/bin/env python
"""
Create a manual database backup.

Usage:
    python scripts/create_backup.py [prefix]
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from repricing_tool.api.state import get_state
from repricing_tool.config.logging import configure_logging


def main():
    configure_logging()
    prefix = sys.argv[1] if len(sys.argv) > 1 else 'manual'
    filename = get_state().backups.create_backup(prefix)
    print(f"✅ Backup created: {filename}")


if __name__ == "__main__":
    main()
