"""
Profile Prefs - The local player's nickname, color and avatar.

Stored as one small JSON document on disk. Reads are forgiving: a missing
or unreadable file just means "no profile yet".
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from pathlib import Path
import json
import logging

logger = logging.getLogger(__name__)


class PrefsStoreError(Exception):
    """The profile could not be written or removed."""


@dataclass(frozen=True)
class ProfilePrefs:
    name: str
    color: str | None = None
    avatar_uri: str | None = None


class PrefsStore:
    """File-based store for ProfilePrefs."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def save(self, prefs: ProfilePrefs):
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump(asdict(prefs), f)
            tmp_path.replace(self.path)
        except OSError as e:
            logger.warning("Failed to save profile prefs to %s: %s", self.path, e)
            raise PrefsStoreError(f"Could not save profile: {e}") from e

    def load(self) -> ProfilePrefs | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                data = json.load(f)
            return ProfilePrefs(
                name=data["name"],
                color=data.get("color"),
                avatar_uri=data.get("avatar_uri"),
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Failed to load profile prefs from %s: %s", self.path, e)
            return None

    def remove(self):
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PrefsStoreError(f"Could not remove profile: {e}") from e
