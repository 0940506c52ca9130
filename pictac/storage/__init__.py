"""
Storage - Everything that survives a restart.

- MatchStore: finished matches (SQLAlchemy, SQLite by default)
- PrefsStore: the local player's profile (JSON file)
"""

from .codec import CODEC_VERSION, BoardCodecError, decode_board, encode_board
from .store import CorruptRecordError, MatchRecord, MatchStore, MatchStoreError
from .prefs import PrefsStore, PrefsStoreError, ProfilePrefs

__all__ = [
    "CODEC_VERSION",
    "BoardCodecError",
    "decode_board",
    "encode_board",
    "CorruptRecordError",
    "MatchRecord",
    "MatchStore",
    "MatchStoreError",
    "PrefsStore",
    "PrefsStoreError",
    "ProfilePrefs",
]
