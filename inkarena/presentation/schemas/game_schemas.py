"""Game session schemas for request/response validation"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from inkarena.domain.entities.game_session import GameSession
from inkarena.domain.entities.ink_mark import InkMark
from inkarena.domain.entities.player import Player
from inkarena.domain.services.collision_service import EffectKind
from inkarena.domain.services.game_engine import (
    CoverageSnapshot,
    GameOutcome,
    MoveOutcome,
    PlayerEffect,
    ShotOutcome,
)
from inkarena.domain.services.score_service import GameResult
from inkarena.domain.value_objects.player_color import PlayerColor
from inkarena.domain.value_objects.position import Position


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps from clients are read as UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PositionSchema(BaseModel):
    """Field coordinates"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_position(self) -> Position:
        return Position(self.x, self.y, self.z)

    @classmethod
    def from_position(cls, position: Position) -> "PositionSchema":
        return cls(x=position.x, y=position.y, z=position.z)


# Requests


class PlayerCreate(BaseModel):
    """Schema for a player joining a new game"""

    name: str
    color: PlayerColor
    position: Optional[PositionSchema] = None

    def to_entity(self) -> Player:
        return Player.create(
            self.name,
            self.color,
            position=self.position.to_position() if self.position else None,
        )


class StartGameRequest(BaseModel):
    """Schema for starting a game"""

    players: List[PlayerCreate]
    duration: Optional[float] = Field(default=None, description="Match length in seconds")

    class Config:
        json_schema_extra = {
            "example": {
                "players": [
                    {"name": "Alice", "color": "red"},
                    {"name": "Bob", "color": "blue"},
                ],
                "duration": 180,
            }
        }


class ShotRequest(BaseModel):
    """Schema for a shoot-ink intent"""

    player_id: str
    position: PositionSchema
    size: Optional[float] = Field(default=None, description="Mark radius; server default if omitted")
    timestamp: Optional[datetime] = Field(
        default=None, description="Client send time; only orders intents, the server clock runs the game"
    )

    normalize_timestamp = field_validator("timestamp")(_as_utc)

    class Config:
        json_schema_extra = {
            "example": {
                "player_id": "0b7f4c1e-8d1f-4a5e-9a47-3f1f6c2d9e10",
                "position": {"x": 1.0, "y": 0.0, "z": 2.0},
                "size": 0.5,
                "timestamp": "2024-01-01T12:00:05Z",
            }
        }


class PositionUpdateRequest(BaseModel):
    """Schema for a position update intent"""

    position: PositionSchema
    timestamp: Optional[datetime] = Field(
        default=None, description="Client send time; only orders intents, the server clock runs the game"
    )

    normalize_timestamp = field_validator("timestamp")(_as_utc)


class EndGameRequest(BaseModel):
    """Schema for an explicit end of game"""

    timestamp: Optional[datetime] = Field(
        default=None, description="Client send time; only orders intents, the server clock runs the game"
    )

    normalize_timestamp = field_validator("timestamp")(_as_utc)


# Responses


class PlayerResponse(BaseModel):
    """Schema for a player inside a session"""

    id: str
    name: str
    color: PlayerColor
    position: PositionSchema
    is_active: bool
    score: float
    stunned_until: Optional[datetime] = None

    @classmethod
    def from_entity(cls, player: Player) -> "PlayerResponse":
        return cls(
            id=player.id,
            name=player.name,
            color=player.color,
            position=PositionSchema.from_position(player.position),
            is_active=player.is_active,
            score=player.score.painted_area,
            stunned_until=player.stunned_until,
        )


class InkMarkResponse(BaseModel):
    """Schema for an ink mark"""

    id: str
    position: PositionSchema
    color: PlayerColor
    radius: float
    area: float
    owner_id: str
    created_at: datetime

    @classmethod
    def from_entity(cls, mark: InkMark) -> "InkMarkResponse":
        return cls(
            id=mark.id,
            position=PositionSchema.from_position(mark.position),
            color=mark.color,
            radius=mark.radius,
            area=mark.area,
            owner_id=mark.owner_id,
            created_at=mark.created_at,
        )


class EffectResponse(BaseModel):
    """Schema for a collision effect applied to a player"""

    player_id: str
    mark_id: str
    kind: EffectKind
    stun_duration: float
    speed_reduction: float

    @classmethod
    def from_effect(cls, applied: PlayerEffect) -> "EffectResponse":
        return cls(
            player_id=applied.player_id,
            mark_id=applied.mark_id,
            kind=applied.effect.kind,
            stun_duration=applied.effect.stun_duration,
            speed_reduction=applied.effect.speed_reduction,
        )


class GameSessionResponse(BaseModel):
    """Schema for game session response"""

    id: str
    status: str
    duration: float
    remaining_time: float
    players: List[PlayerResponse]
    marks: List[InkMarkResponse]
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(
        cls, session: GameSession, now: Optional[datetime] = None
    ) -> "GameSessionResponse":
        return cls(
            id=session.id,
            status=session.status.value,
            duration=session.duration,
            remaining_time=session.remaining_time(now),
            players=[PlayerResponse.from_entity(player) for player in session.players],
            marks=[InkMarkResponse.from_entity(mark) for mark in session.marks],
            started_at=session.started_at,
            ended_at=session.ended_at,
            created_at=session.created_at,
        )


class ShotResponse(BaseModel):
    """Schema for the result of a shot"""

    session_id: str
    placed_mark: InkMarkResponse
    merged: bool
    removed_mark_ids: List[str]
    reduced_marks: List[InkMarkResponse]
    effects: List[EffectResponse]

    @classmethod
    def from_outcome(cls, outcome: ShotOutcome) -> "ShotResponse":
        return cls(
            session_id=outcome.session.id,
            placed_mark=InkMarkResponse.from_entity(outcome.placed_mark),
            merged=outcome.merged,
            removed_mark_ids=list(outcome.removed_mark_ids),
            reduced_marks=[InkMarkResponse.from_entity(mark) for mark in outcome.reduced_marks],
            effects=[EffectResponse.from_effect(effect) for effect in outcome.effects],
        )


class MoveResponse(BaseModel):
    """Schema for the result of a position update"""

    session_id: str
    player: PlayerResponse
    effects: List[EffectResponse]

    @classmethod
    def from_outcome(cls, outcome: MoveOutcome) -> "MoveResponse":
        return cls(
            session_id=outcome.session.id,
            player=PlayerResponse.from_entity(outcome.player),
            effects=[EffectResponse.from_effect(effect) for effect in outcome.effects],
        )


class CoverageResponse(BaseModel):
    """Schema for live coverage"""

    session_id: str
    per_player: Dict[str, float]
    total: float
    remaining_time: float

    @classmethod
    def from_snapshot(cls, session_id: str, snapshot: CoverageSnapshot) -> "CoverageResponse":
        return cls(
            session_id=session_id,
            per_player=dict(snapshot.per_player),
            total=snapshot.total,
            remaining_time=snapshot.remaining_time,
        )


class GameResultResponse(BaseModel):
    """Schema for one player's final standing"""

    player_id: str
    player_name: str
    score: float
    rank: int
    mark_count: int
    area_efficiency: float
    bonus_score: Optional[float] = None
    is_winner: bool

    @classmethod
    def from_result(cls, result: GameResult, winner_id: Optional[str]) -> "GameResultResponse":
        return cls(
            player_id=result.player_id,
            player_name=result.player_name,
            score=result.score.painted_area,
            rank=result.rank,
            mark_count=result.mark_count,
            area_efficiency=result.area_efficiency,
            bonus_score=result.bonus_score.painted_area if result.bonus_score else None,
            is_winner=result.player_id == winner_id,
        )


class GameEndResponse(BaseModel):
    """Schema for the end of a game"""

    session_id: str
    results: List[GameResultResponse]
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None
    is_draw: bool
    total_coverage: float
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": "5b0c6f0e-3c8e-4f0b-a0b2-6ac2ad0f4c11",
                "results": [],
                "winner_id": None,
                "winner_name": None,
                "is_draw": True,
                "total_coverage": 0.0,
                "message": "Draw!",
            }
        }

    @classmethod
    def from_outcome(cls, outcome: GameOutcome) -> "GameEndResponse":
        winner = outcome.winner
        winner_id = winner.id if winner else None
        return cls(
            session_id=outcome.session.id,
            results=[GameResultResponse.from_result(result, winner_id) for result in outcome.results],
            winner_id=winner_id,
            winner_name=winner.name if winner else None,
            is_draw=outcome.is_draw,
            total_coverage=outcome.total_coverage,
            message=f"{winner.name} wins!" if winner else "Draw!",
        )
