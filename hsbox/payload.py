"""Demo payload handling.

The `data` column holds the parser's JSON output. Its shape is tagged by the
row's `data_version`; `decode_payload` turns a stored column into the shape
of `LATEST_DATA_VERSION`, applying one upgrade function per version step
where one is registered.

JSON objects cannot be keyed by integers, so the `players` map is written
with string steam ids and converted back to `int` keys on every read.
"""
import json
import logging
from typing import Any, Callable, Dict, Optional

from hsbox.config import LATEST_DATA_VERSION

logger = logging.getLogger(__name__)

# Score a side must reach to win a map; 15-15 is a draw
END_OF_MAP_SCORE = 16
DRAW_SCORE = 15

# data_version -> function returning the payload in data_version + 1 shape.
# Versions without an entry are re-parsed by the scanner instead (see is_fresh).
PAYLOAD_UPGRADES: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {}


def normalize_player_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert the keys of `data['players']` to integer steam ids."""
    players = data.get('players')
    if isinstance(players, dict):
        data['players'] = {int(steamid): player for steamid, player in players.items()}
    return data


def upgrade_payload(data: Dict[str, Any], data_version: int) -> Dict[str, Any]:
    """Walk the registered upgrade chain as far as it goes."""
    version = data_version
    while version < LATEST_DATA_VERSION and version in PAYLOAD_UPGRADES:
        logger.debug(f"Upgrading demo payload from data version {version} to {version + 1}")
        data = PAYLOAD_UPGRADES[version](data)
        version += 1
    return data


def decode_payload(raw: str, data_version: Optional[int] = None) -> Dict[str, Any]:
    """Decode a stored `data` column.

    Raises json.JSONDecodeError on malformed content; stored payloads are
    never silently defaulted.
    """
    data = normalize_player_keys(json.loads(raw))
    if data_version is not None:
        data = upgrade_payload(data, data_version)
    return data


def encode_payload(data: Dict[str, Any]) -> str:
    return json.dumps(data)


def is_half_parsed(data: Dict[str, Any]) -> bool:
    """Heuristic for payloads that look incompletely extracted.

    A payload is half-parsed when it has no players, its scoreboard does not
    have exactly two entries, no side reached the end-of-map score (a 15-15
    draw and a surrender both count as finished), or a round lacks `tick_end`.
    """
    players = data.get('players') or {}
    score = data.get('score') or {}
    scores = score.get('score') or []
    rounds = data.get('rounds') or []

    if len(players) == 0:
        return True
    if len(scores) != 2:
        return True

    score1, score2 = scores
    finished = (
        score.get('surrendered')
        or score1 == score2 == DRAW_SCORE
        or score1 >= END_OF_MAP_SCORE
        or score2 >= END_OF_MAP_SCORE
    )
    if not finished:
        return True

    return any(r.get('tick_end') is None for r in rounds)
