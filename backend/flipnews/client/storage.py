"""JSON-file key/value store with ``localStorage`` semantics."""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterator, Optional

from loguru import logger


class LocalStorage:
    """
    String keys to string values, persisted as one JSON object on disk.

    The whole file is rewritten on every mutation (write to a temp file, then
    rename). A missing or unreadable file behaves as an empty store. A failed
    write is logged and the value stays in memory for the session.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._items: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Local storage at {self.path} is unreadable, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Local storage at {self.path} is not an object, starting empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._items, fh, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def _persist(self) -> bool:
        try:
            self._flush()
        except OSError as e:
            logger.error(f"Could not write local storage at {self.path}: {e}")
            return False
        return True

    def set_item(self, key: str, value: str) -> bool:
        """Store ``value``; returns False when the file could not be written."""
        self._items[key] = value
        return self._persist()

    def remove_item(self, key: str) -> bool:
        if self._items.pop(key, None) is None:
            return True
        return self._persist()

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
