"""
Review Harvest - Command Line Entry Point
=========================================

Collect reviews for every product in a catalog:
    python main.py scrape --catalog catalog.xlsx --shop-domain https://myshop.com

Build a catalog from category listing pages:
    python main.py harvest-catalog "https://global.oliveyoung.com/display/category?ctgrNo=1"

Installed as a package, the same commands run as `reviewharvest ...`.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from reviewharvest.cli import main


if __name__ == "__main__":
    sys.exit(main())
