#!/usr/bin/env python3
"""Launch the UV Projection Lab web UI on http://localhost:8080."""

import argparse
import logging
import sys
from pathlib import Path

# Add src/ to Python path so bare imports work (project convention)
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ui.app import main

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Launch the UV Projection Lab web UI.")
    parser.add_argument("--port", type=int, default=8080, help="HTTP port (default: 8080)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    main(port=args.port)
