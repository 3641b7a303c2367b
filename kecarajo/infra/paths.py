from pathlib import Path

from kecarajo.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
PANTRY_FILE: Path = DATA_DIR / 'pantry.json'
SHOPPING_LISTS_FILE: Path = DATA_DIR / 'shopping_lists.json'
PRICES_DIR: Path = DATA_DIR / 'precios'

__all__ = ['DATA_DIR', 'PANTRY_FILE', 'SHOPPING_LISTS_FILE', 'PRICES_DIR']
