"""
Board Codec - Stable text encoding for a finished board.

Format (version 1):

    {"version": 1,
     "cells": [null | {"photoRef": "<uri>", "player": "P1" | "P2"}, ... x9]}

The decoder also reads the older unversioned form: a bare 9-element
array whose cells carry the photo under "uri" (or "photoRef").
"""

from __future__ import annotations
from typing import Any, Sequence
import json

from ..engine_core.state import BOARD_SIZE, Board, BoardCell, Player


CODEC_VERSION = 1


class BoardCodecError(ValueError):
    """Raised when a board cannot be encoded or decoded."""


def encode_board(board: Sequence[BoardCell | None]) -> str:
    if len(board) != BOARD_SIZE:
        raise BoardCodecError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")

    cells: list[dict[str, str] | None] = []
    for index, cell in enumerate(board):
        if cell is None:
            cells.append(None)
        elif isinstance(cell, BoardCell):
            cells.append({"photoRef": cell.photo_ref, "player": Player(cell.player).value})
        else:
            raise BoardCodecError(f"Cell {index} is not a BoardCell: {cell!r}")

    return json.dumps({"version": CODEC_VERSION, "cells": cells}, separators=(",", ":"))


def decode_board(text: str) -> Board:
    try:
        payload = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise BoardCodecError(f"Board is not valid JSON: {e}") from e

    if isinstance(payload, list):
        cells = payload  # legacy, unversioned
    elif isinstance(payload, dict):
        version = payload.get("version")
        if version != CODEC_VERSION:
            raise BoardCodecError(f"Unsupported board version: {version!r}")
        cells = payload.get("cells")
    else:
        raise BoardCodecError("Board must be a JSON object or array")

    if not isinstance(cells, list) or len(cells) != BOARD_SIZE:
        raise BoardCodecError(f"Board must have {BOARD_SIZE} cells")

    return tuple(_decode_cell(index, raw) for index, raw in enumerate(cells))


def _decode_cell(index: int, raw: Any) -> BoardCell | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise BoardCodecError(f"Cell {index} must be an object or null")

    photo_ref = raw.get("photoRef", raw.get("uri"))
    if not isinstance(photo_ref, str) or not photo_ref:
        raise BoardCodecError(f"Cell {index} has no photo reference")

    try:
        player = Player(raw.get("player"))
    except ValueError as e:
        raise BoardCodecError(f"Cell {index} has invalid player: {raw.get('player')!r}") from e

    return BoardCell(photo_ref=photo_ref, player=player)
