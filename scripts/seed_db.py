#!/usr/bin/env python
"""
Seed the product database from products_initial.json.

Usage:
    python scripts/seed_db.py [path/to/products.json]
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from repricing_tool.api.state import get_state
from repricing_tool.config.logging import configure_logging
from repricing_tool.engine.errors import SeedError


def main():
    configure_logging()
    seed_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    print("=" * 60)
    print("REPRICING TOOL SEED")
    print("=" * 60)
    print()

    state = get_state()
    try:
        report = state.seeder.seed_products(seed_path)
    except SeedError as e:
        print(f"\n❌ SEED FAILED: {e}")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ SEED COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Source: {report['input_file']['path']} ({report['input_file']['hash']})")
    print(f"  Backup: {report['backup'] or 'not created'}")
    print(f"  Inserted: {report['inserted']}")
    print(f"  Skipped: {report['skipped']}")
    for reason, count in report['skip_reasons'].items():
        print(f"    {reason}: {count}")


if __name__ == "__main__":
    main()
