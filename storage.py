# storage.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]+")


class LocalStore:
    """
    Tiny key-value store: one UTF-8 file per key under `directory`.

    Errors are logged and reported through return values; nothing here raises
    for an unavailable or unwritable directory.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.last_error: Optional[str] = None

    def _path(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        self.last_error = None
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            self.last_error = f"Could not read {path}: {e}"
            log.error("Storage read error: %s", e)
            return None

    def set(self, key: str, value: str) -> bool:
        self.last_error = None
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
            return True
        except OSError as e:
            self.last_error = f"Could not write {path}: {e}"
            log.error("Storage write error: %s", e)
            return False

