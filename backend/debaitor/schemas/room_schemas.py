"""
房间相关的数据模式

对外字段统一使用 camelCase。
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List

from debaitor.models.response import Response, Scores
from debaitor.models.room import Room, RoomStatus
from debaitor.services.room_service import TurnStatus
from debaitor.services.scoring import ParticipantResult


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RoomCreate(BaseModel):
    """创建房间的请求"""
    topic: Optional[str] = Field(default=None, description="辩题")


class JoinRequest(BaseModel):
    """加入房间的请求"""
    name: Optional[str] = Field(default=None, description="参与者名字")


class RoomCreated(CamelModel):
    room_code: str
    topic: str
    host_id: str


class ParticipantSummary(CamelModel):
    id: str
    name: str
    responses: int
    is_current_turn: bool


class RoomView(CamelModel):
    """房间状态"""
    room_code: str
    topic: str
    status: RoomStatus
    current_round: int
    current_turn: Optional[str] = None
    current_turn_name: Optional[str] = None
    participants: List[ParticipantSummary]
    turn_order: List[str]


class QRCodeResponse(CamelModel):
    qr_code: str
    join_url: str


class JoinResponse(CamelModel):
    participant_id: str
    name: str
    topic: str
    room_code: str


class TurnChange(CamelModel):
    """切换发言者后的状态"""
    success: bool = True
    current_turn: Optional[str] = None
    current_turn_name: Optional[str] = None
    round: int


class DebateStarted(TurnChange):
    message: str = "Debate started"


class ScoresOut(CamelModel):
    logic: float
    clarity: float
    relevance: float
    emotional_bias: float
    insight: str
    final_score: float


class ResponseOut(CamelModel):
    round: int
    transcript: str
    scores: ScoresOut
    submitted_at: int
    fallback: bool


class AverageScoresOut(CamelModel):
    logic: float
    clarity: float
    relevance: float
    emotional_bias: float


class ParticipantResultOut(CamelModel):
    id: str
    name: str
    total_responses: int
    average_scores: AverageScoresOut
    average_score: float
    responses: List[ResponseOut]
    rank: int


class ResultsResponse(CamelModel):
    room_code: str
    topic: str
    results: List[ParticipantResultOut]


class SubmitResult(CamelModel):
    success: bool = True
    transcript: str
    scores: ScoresOut
    round: int
    fallback: bool


class TurnStatusOut(CamelModel):
    status: RoomStatus
    round: int
    is_my_turn: bool
    current_turn_name: Optional[str] = None
    current_turn: Optional[str] = None


def scores_out(scores: Scores) -> ScoresOut:
    return ScoresOut(
        logic=scores.logic,
        clarity=scores.clarity,
        relevance=scores.relevance,
        emotional_bias=scores.emotional_bias,
        insight=scores.insight,
        final_score=scores.final_score,
    )


def response_out(response: Response) -> ResponseOut:
    return ResponseOut(
        round=response.round,
        transcript=response.transcript,
        scores=scores_out(response.scores),
        submitted_at=response.submitted_at,
        fallback=response.fallback,
    )


def room_view(room: Room) -> RoomView:
    return RoomView(
        room_code=room.code,
        topic=room.topic,
        status=room.status,
        current_round=room.current_round,
        current_turn=room.current_turn,
        current_turn_name=room.current_turn_name,
        participants=[
            ParticipantSummary(
                id=p.id,
                name=p.name,
                responses=len(p.responses),
                is_current_turn=room.current_turn == p.id,
            )
            for p in room.participants.values()
        ],
        turn_order=list(room.turn_order),
    )


def results_response(room: Room, results: List[ParticipantResult]) -> ResultsResponse:
    return ResultsResponse(
        room_code=room.code,
        topic=room.topic,
        results=[
            ParticipantResultOut(
                id=r.id,
                name=r.name,
                total_responses=r.total_responses,
                average_scores=AverageScoresOut(
                    logic=r.average_scores.logic,
                    clarity=r.average_scores.clarity,
                    relevance=r.average_scores.relevance,
                    emotional_bias=r.average_scores.emotional_bias,
                ),
                average_score=r.average_score,
                responses=[response_out(resp) for resp in r.responses],
                rank=r.rank,
            )
            for r in results
        ],
    )


def turn_status_out(status: TurnStatus) -> TurnStatusOut:
    return TurnStatusOut(
        status=status.status,
        round=status.round,
        is_my_turn=status.is_my_turn,
        current_turn_name=status.current_turn_name,
        current_turn=status.current_turn,
    )
