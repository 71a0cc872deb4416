#!/usr/bin/env python
"""
Print price suggestions with their resolution trace.

Usage:
    python scripts/suggest_prices.py 40 100 471.70 2000
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from repricing_tool.engine import suggest


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    for arg in sys.argv[1:]:
        try:
            result = suggest(float(arg))
        except ValueError as e:
            print(f"❌ {arg}: {e}")
            continue
        print(f"{arg}: {result.candidates}")
        print(result.get_trace_text())
        print()


if __name__ == "__main__":
    main()
