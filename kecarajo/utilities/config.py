"""Configuration management for the KeCarajoComer service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Pantry Alerts Configuration
DAYS_BEFORE_EXPIRY: Final[int] = int(os.getenv('DAYS_BEFORE_EXPIRY', '5'))
LOW_STOCK_THRESHOLD: Final[dict[str, float]] = {
    "g": float(os.getenv('LOW_STOCK_THRESHOLD_G', '200')),
    "kg": float(os.getenv('LOW_STOCK_THRESHOLD_KG', '0.25')),
    "ml": float(os.getenv('LOW_STOCK_THRESHOLD_ML', '500')),
    "L": float(os.getenv('LOW_STOCK_THRESHOLD_L', '0.5')),
    "unidades": float(os.getenv('LOW_STOCK_THRESHOLD_UNIDADES', '2')),
}

# Shopping list generation
PLANNING_HORIZON_DAYS: Final[int] = int(os.getenv('PLANNING_HORIZON_DAYS', '7'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('KECARAJO_DATA_DIR', str(BASE_DIR / 'data'))).resolve()
