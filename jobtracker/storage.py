"""Local persistence for the job tracker.

Manages two data files:

1. **State snapshot** (`data/state.json`)
   - Folders, jobs, chat sessions, the live transcript, the active
     session id and the signed-in user profile
   - Rewritten after every store mutation

2. **Accounts** (`data/accounts.json`)
   - Local user profiles and password hashes, owned by ``accounts``

All writes use the atomic write pattern:
  1. Write to .tmp file
  2. fsync
  3. Rename to target (atomic on POSIX)

Before each write, a .bak backup is created. If the primary file is
corrupted, it's restored from .bak automatically. Snapshots are not
versioned; there are no migrations.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Callable

from jobtracker.store import AppStore

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")
STATE_FILE = "state.json"
ACCOUNTS_FILE = "accounts.json"


# ── Snapshot ───────────────────────────────────────────────────────────────

def state_path(data_dir: str | Path = DEFAULT_DATA_DIR) -> Path:
    return Path(data_dir) / STATE_FILE


def save_snapshot(snapshot: dict, data_dir: str | Path = DEFAULT_DATA_DIR) -> Path:
    """Write a store snapshot with backup + atomic rename."""
    d = Path(data_dir)
    d.mkdir(parents=True, exist_ok=True)
    path = d / STATE_FILE
    _backup_and_write(path, snapshot)
    logger.debug(
        "Saved snapshot: %d folders, %d jobs, %d sessions",
        len(snapshot.get("folders", [])),
        len(snapshot.get("jobs", [])),
        len(snapshot.get("chat_sessions", [])),
    )
    return path


def load_snapshot(data_dir: str | Path = DEFAULT_DATA_DIR) -> dict | None:
    """Return the saved snapshot, or None when nothing usable exists."""
    path = state_path(data_dir)
    if not path.exists():
        return None
    data = _safe_read_json(path, default={})
    if not isinstance(data, dict) or not data:
        return None
    return data


def attach_persistence(
    store: AppStore,
    data_dir: str | Path = DEFAULT_DATA_DIR,
    seed: Callable[[], dict] | None = None,
) -> Callable[[], None]:
    """Load the saved state into ``store`` and save it after every change.

    On first run (no snapshot) the store is filled from ``seed()`` when
    given. Returns the unsubscribe callable.
    """
    snapshot = load_snapshot(data_dir)
    if snapshot is not None:
        store.restore(snapshot)
        logger.info("Loaded state from %s", state_path(data_dir))
    elif seed is not None:
        store.restore(seed())
        logger.info("No saved state in %s, loaded seed data", data_dir)

    save_snapshot(store.snapshot(), data_dir)
    return store.subscribe(lambda s: save_snapshot(s.snapshot(), data_dir))


# ── Internal Helpers ───────────────────────────────────────────────────────

def read_json(path: Path, default: Any = None) -> Any:
    return _safe_read_json(path, default)


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    _backup_and_write(path, data)


def _safe_read_json(path: Path, default: Any = None) -> Any:
    """Read a JSON file, restoring from .bak if corrupted.

    If the primary file can't be parsed, tries .bak. If both fail,
    returns the default value and logs an error.
    """
    if not path.exists():
        return default if default is not None else {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s: %s, trying backup", path, exc)

    bak_path = path.with_suffix(path.suffix + ".bak")
    if bak_path.exists():
        try:
            with open(bak_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            logger.info("Restored %s from backup", path)
            _atomic_write_json(path, data)
            return data
        except (json.JSONDecodeError, OSError) as exc:
            logger.error("Backup %s also corrupted: %s", bak_path, exc)

    logger.error("Could not read %s or its backup, using default", path)
    return default if default is not None else {}


def _backup_and_write(path: Path, data: Any) -> None:
    """Create a .bak backup of the current file, then atomically write new data."""
    if path.exists():
        bak_path = path.with_suffix(path.suffix + ".bak")
        try:
            shutil.copy2(path, bak_path)
        except OSError as exc:
            logger.warning("Failed to create backup of %s: %s", path, exc)

    _atomic_write_json(path, data)


def _atomic_write_json(path: Path, data: Any) -> None:
    """Write JSON data atomically using temp file + rename."""
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())

        tmp_path.replace(path)
    except OSError as exc:
        logger.error("Failed to write %s: %s", path, exc)
        if tmp_path.exists():
            tmp_path.unlink()
        raise
