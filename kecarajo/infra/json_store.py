"""JSON file helpers shared by the repositories."""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def load_json(path: Path, default: Any) -> Any:
    """Read a JSON document, returning `default` when the file is missing or unreadable."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug("Data file not found: %s. Using default.", path)
        return default
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        return default


def atomic_write_json(path: Path, data: Any) -> None:
    """Write through a temp file in the same directory, then move it over `path`."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}_", suffix=".json")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
            json.dump(data, tmp, indent=2, ensure_ascii=False)
        shutil.move(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
