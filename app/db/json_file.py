import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Union

from app.core.errors import StorageError

logger = logging.getLogger("app")


def pick_latest_file(candidates: Iterable[Union[str, Path]]) -> Path:
    """Return the existing candidate with the newest mtime, or the first candidate if none exist"""
    paths = [Path(p) for p in candidates]
    if not paths:
        raise ValueError("At least one candidate path is required")

    best = None
    best_time = -1.0
    for path in paths:
        try:
            st = path.stat()
        except OSError:
            continue
        if path.is_file() and st.st_mtime > best_time:
            best, best_time = path, st.st_mtime
    return best or paths[0]


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Write `data` as JSON to `path` so readers see either the old or the new
    document, never a partial one.

    The payload goes to a temporary sibling file, is flushed to disk, and
    then replaces the target with os.replace. Any OS failure is raised as
    StorageError and the target is left untouched.
    """
    path = Path(path)
    payload = json.dumps(data, ensure_ascii=False, indent=2)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise StorageError(f"Failed to write {path.name}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning(f"Could not remove temporary file {tmp_name}")


class JsonDocument:
    """A single JSON array on disk, loaded fail-open and persisted atomically"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def ensure_exists(self) -> bool:
        """Create the document holding an empty array. Returns True if it was created."""
        if self.path.exists():
            return False
        write_json_atomic(self.path, [])
        return True

    def load(self) -> Any:
        """
        Read and parse the document.

        Missing, unreadable or unparsable files yield an empty list so the
        service stays available.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning(f"Could not read {self.path}, treating as empty: {e}")
            return []
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Invalid JSON in {self.path}, treating as empty: {e}")
            return []

    def persist(self, records: List[Any]) -> None:
        write_json_atomic(self.path, records)
