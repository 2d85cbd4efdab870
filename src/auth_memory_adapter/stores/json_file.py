"""JSONFileStore — write-through store persisted to a single JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

from auth_memory_adapter.records import Record
from auth_memory_adapter.stores.base import Store

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class JSONFileStore(Store[R]):
    """File-backed store for development use.

    Keeps records in a dict and rewrites the whole file after every ``set``
    and ``delete``.  The file's top-level value is an object mapping each key
    to ``record.to_dict()``.

    On construction the file is loaded.  A missing file, unreadable content,
    invalid or too deeply nested JSON, or a record that fails to decode all
    result in an empty store and the file being reset to ``{}``.

    Write failures (``OSError``) propagate to the caller of ``set`` /
    ``delete``.  The in-memory change has already been applied by then, so
    after a failed write the store and the file disagree until the next
    successful write.  There is no locking and no atomic rename: concurrent
    writers in other processes will clobber each other.

    Parameters:
        path:        Location of the JSON file.  Parent directories are
                     created on demand.
        record_type: The :class:`Record` subclass stored in this file.
    """

    def __init__(self, path: str | Path, record_type: type[R]) -> None:
        self._path = Path(path)
        self._record_type = record_type
        self._data: dict[str, R] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    # ── persistence ──────────────────────────────────────────

    def _load(self) -> dict[str, R]:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
            return {key: self._record_type.from_dict(value) for key, value in raw.items()}
        except FileNotFoundError:
            logger.debug("Store file %s does not exist; creating it", self._path)
        except (OSError, ValueError, TypeError, RecursionError) as exc:
            logger.warning("Discarding unreadable store file %s: %s", self._path, exc)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text("{}", encoding="utf-8")
        return {}

    def _dump(self) -> None:
        payload = {key: record.to_dict() for key, record in self._data.items()}
        self._path.write_text(json.dumps(payload), encoding="utf-8")
        logger.debug(
            "Wrote %d %s record(s) to %s",
            len(payload),
            self._record_type.__name__,
            self._path,
        )

    # ── Store protocol ───────────────────────────────────────

    def get(self, key: str) -> R | None:
        return self._data.get(key)

    def set(self, key: str, value: R) -> None:
        self._data[key] = value
        self._dump()

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
        self._dump()

    def items(self) -> list[tuple[str, R]]:
        return list(self._data.items())

    def __len__(self) -> int:
        return len(self._data)
