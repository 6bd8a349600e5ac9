"""
Per-client flags recording which posts this client has liked or disliked.

Keys are ``liked:<id>`` and ``disliked:<id>``; a set flag is stored as
``"1"`` and a cleared flag is removed. The flags are never synchronized
with the server.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from app.db.json_file import write_json_atomic
from app.modules.posts.reactions.schemas.reaction import ReactionKind

logger = logging.getLogger(__name__)

FLAG_PREFIXES = {
    ReactionKind.LIKE: "liked",
    ReactionKind.DISLIKE: "disliked",
}


def flag_key(kind: ReactionKind, post_id: str) -> str:
    return f"{FLAG_PREFIXES[ReactionKind(kind)]}:{post_id}"


class FlagStore:
    """In-memory key-value flag store"""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values = dict(values or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove_item(self, key: str) -> None:
        self._values.pop(key, None)

    def is_set(self, kind: ReactionKind, post_id: str) -> bool:
        return self.get_item(flag_key(kind, post_id)) == "1"

    def set_flag(self, kind: ReactionKind, post_id: str, value: bool) -> None:
        key = flag_key(kind, post_id)
        if value:
            self.set_item(key, "1")
        else:
            self.remove_item(key)


class FileFlagStore(FlagStore):
    """Flag store persisted to a JSON object on disk after every change"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> Dict[str, str]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable flag file {self.path}: {e}")
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self) -> None:
        write_json_atomic(self.path, self._values)

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._save()

    def remove_item(self, key: str) -> None:
        if key in self._values:
            super().remove_item(key)
            self._save()
