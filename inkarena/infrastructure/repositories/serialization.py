"""JSON payload conversion for stored sessions

Timestamps are kept as ISO strings so timezone information survives
backends that drop it from DateTime columns.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from inkarena.domain.entities.game_session import GameSession, SessionStatus
from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.value_objects.game_score import GameScore
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position


def _dump_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _load_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "color": player.color.value,
        "position": player.position.to_dict(),
        "is_active": player.is_active,
        "score": player.score.painted_area,
        "stunned_until": _dump_time(player.stunned_until),
    }


def player_from_dict(data: Dict[str, Any]) -> Player:
    return Player(
        id=data["id"],
        name=data["name"],
        color=PlayerColor(data["color"]),
        position=Position.from_dict(data["position"]),
        is_active=data["is_active"],
        score=GameScore(data["score"]),
        stunned_until=_load_time(data.get("stunned_until")),
    )


def mark_to_dict(mark: InkMark) -> Dict[str, Any]:
    return {
        "id": mark.id,
        "position": mark.position.to_dict(),
        "color": mark.color.value,
        "radius": mark.radius,
        "owner_id": mark.owner_id,
        "created_at": _dump_time(mark.created_at),
    }


def mark_from_dict(data: Dict[str, Any]) -> InkMark:
    return InkMark(
        id=data["id"],
        position=Position.from_dict(data["position"]),
        color=PlayerColor(data["color"]),
        radius=data["radius"],
        owner_id=data["owner_id"],
        created_at=_load_time(data["created_at"]),
    )


def session_to_payload(session: GameSession) -> Dict[str, Any]:
    """Everything needed to rebuild the session value"""
    return {
        "players": [player_to_dict(player) for player in session.players],
        "marks": [mark_to_dict(mark) for mark in session.marks],
        "started_at": _dump_time(session.started_at),
        "ended_at": _dump_time(session.ended_at),
        "last_intent_at": _dump_time(session.last_intent_at),
        "created_at": _dump_time(session.created_at),
    }


def session_from_payload(
    session_id: str, status: str, duration: float, payload: Dict[str, Any]
) -> GameSession:
    return GameSession(
        id=session_id,
        players=tuple(player_from_dict(item) for item in payload["players"]),
        duration=duration,
        status=SessionStatus(status),
        marks=tuple(mark_from_dict(item) for item in payload["marks"]),
        started_at=_load_time(payload.get("started_at")),
        ended_at=_load_time(payload.get("ended_at")),
        last_intent_at=_load_time(payload.get("last_intent_at")),
        created_at=_load_time(payload["created_at"]),
    )
