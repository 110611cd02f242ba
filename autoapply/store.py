"""Persistent key-value store and the versioned configuration on top of it."""
from __future__ import annotations

import fcntl
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from autoapply.config import CONFIG_KEY
from autoapply.defaults import default_config
from autoapply.errors import ConfigConflict, StorageError
from autoapply.log import get_logger
from autoapply.migrate import migrate_document
from autoapply.models import Configuration
from autoapply.retry import retry

log = get_logger(__name__)


class JsonStore:
    """A JSON file mapping namespaced keys to documents.

    Writes take an advisory lock on a sidecar ``.lock`` file and replace the
    data file atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock_path = self.path.with_name(self.path.name + ".lock")

    @contextmanager
    def _locked(self, exclusive: bool = True) -> Iterator[None]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fh = open(self._lock_path, "a+")
        except OSError as exc:
            raise StorageError(f"cannot open {self._lock_path}: {exc}") from exc
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
            yield
        finally:
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
            except OSError:
                pass
            fh.close()

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    @retry(max_attempts=3, base_delay=0.2, max_delay=2.0, retryable=(OSError,))
    def _write_file(self, data: dict[str, Any]) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _write_all(self, data: dict[str, Any]) -> None:
        try:
            self._write_file(data)
        except OSError as exc:
            raise StorageError(f"cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> Any:
        with self._locked(exclusive=False):
            return self._read_all().get(key)

    def update(self, mutate: Callable[[dict[str, Any]], None]) -> None:
        """Read, apply ``mutate`` in place and write back, all under one lock."""
        with self._locked():
            data = self._read_all()
            mutate(data)
            self._write_all(data)

    def set(self, key: str, value: Any) -> None:
        self.update(lambda data: data.__setitem__(key, value))

    def remove(self, *keys: str) -> None:
        def drop(data: dict[str, Any]) -> None:
            for key in keys:
                data.pop(key, None)

        self.update(drop)

    def clear(self) -> None:
        self.update(lambda data: data.clear())


class ConfigStore:
    """Loads, migrates and saves the answer configuration."""

    def __init__(self, store: JsonStore, key: str = CONFIG_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> Configuration:
        """Stored configuration (migrated), or a freshly persisted default.

        Raises StorageError when the store cannot be read or written.
        """
        raw = self.store.get(self.key)
        if raw is None:
            log.info("No configuration found, writing defaults")
            config = default_config()
            self.save(config)
            return config
        if not isinstance(raw, dict):
            raise StorageError(f"{self.key} is not a JSON object")

        doc, changed = migrate_document(raw)
        config = Configuration.from_dict(doc)
        if changed:
            self.store.set(self.key, config.to_dict())
            log.info("Saved migrated configuration")
        else:
            log.debug("Configuration loaded (revision %d)", config.revision)
        return config

    def load_or_default(self) -> Configuration:
        """Like ``load`` but falls back to an in-memory default for the session."""
        try:
            return self.load()
        except StorageError as exc:
            log.warning("Configuration unavailable (%s); using defaults for this session", exc)
            return default_config()

    def save(self, config: Configuration) -> None:
        """Persist ``config`` if nobody saved since it was loaded.

        Raises ConfigConflict on a stale revision, StorageError on I/O failure.
        """
        new_revision = config.revision + 1

        def write(data: dict[str, Any]) -> None:
            current = data.get(self.key)
            found = int(current.get("revision") or 0) if isinstance(current, dict) else 0
            if found != config.revision:
                raise ConfigConflict(config.revision, found)
            doc = config.to_dict()
            doc["revision"] = new_revision
            data[self.key] = doc

        self.store.update(write)
        config.revision = new_revision
        log.debug("Configuration saved (revision %d)", new_revision)

    def clear(self) -> None:
        """Remove every key from the underlying store."""
        self.store.clear()
        log.info("All stored data cleared")
