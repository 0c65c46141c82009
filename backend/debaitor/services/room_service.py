"""
房间与发言轮转服务
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from debaitor.core.errors import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    TurnViolationError,
)
from debaitor.core.utils import epoch_millis
from debaitor.models.participant import Participant
from debaitor.models.response import Response, Scores
from debaitor.models.room import Room, RoomStatus
from debaitor.services.ai_service import AIService, AudioClip, MockAIService
from debaitor.services.room_store import RoomStore
from debaitor.services.scoring import ParticipantResult, rank_participants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnStatus:
    """参与者轮询用的发言状态"""
    status: RoomStatus
    round: int
    is_my_turn: bool
    current_turn: Optional[str]
    current_turn_name: Optional[str]


class RoomService:
    """房间状态机

    每个房间的读改写都在该房间自己的锁内完成；调用AI后端时不持有锁。
    """

    def __init__(
        self,
        store: RoomStore,
        ai_service: AIService,
        ai_timeout: float = 30.0,
        fallback: Optional[MockAIService] = None,
    ):
        self.store = store
        self.ai_service = ai_service
        self.ai_timeout = ai_timeout
        self.fallback = fallback or MockAIService()

    def _require_room(self, code: str) -> Room:
        room = self.store.get(code)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    async def create_room(self, topic: Optional[str]) -> Room:
        """创建新房间"""
        topic = (topic or "").strip()
        if not topic:
            raise InvalidInputError("Topic is required")

        purged = self.store.purge_expired()
        if purged:
            logger.info("清理了 %d 个过期房间", purged)

        room = Room(
            code=self.store.new_code(),
            topic=topic,
            host_id=str(uuid.uuid4()),
            created_at=self.store.now(),
        )
        self.store.add(room)
        logger.info('房间已创建: %s - "%s"', room.code, topic)
        return room

    async def get_room(self, code: str) -> Room:
        return self._require_room(code)

    async def join_room(self, code: str, name: Optional[str]) -> Tuple[Room, Participant]:
        """加入房间；辩论进行中加入的参与者排在轮转末尾"""
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Name is required")

        room = self._require_room(code)
        async with room.lock:
            if room.status == RoomStatus.ENDED:
                raise InvalidStateError("Debate has ended")

            participant = Participant(id=str(uuid.uuid4()), name=name)
            room.participants[participant.id] = participant
            room.turn_order.append(participant.id)

        logger.info("%s 加入了房间 %s", name, room.code)
        return room, participant

    async def start_debate(self, code: str) -> Room:
        """开始辩论，第一位加入者先发言"""
        room = self._require_room(code)
        async with room.lock:
            if room.status != RoomStatus.WAITING:
                raise InvalidStateError("Debate has already started")
            if not room.turn_order:
                raise InvalidInputError("No participants yet")

            room.status = RoomStatus.IN_PROGRESS
            room.current_round = 1
            room.current_turn = room.turn_order[0]

        logger.info("房间 %s 辩论开始，第1轮，%s 发言", room.code, room.current_turn_name)
        return room

    async def advance_turn(self, code: str) -> Room:
        """轮到下一位，越过末尾时回到第一位并进入下一轮"""
        room = self._require_room(code)
        async with room.lock:
            if room.status != RoomStatus.IN_PROGRESS:
                raise InvalidStateError("Debate not in progress")

            try:
                next_index = room.turn_order.index(room.current_turn) + 1
            except ValueError:
                # 当前发言者不在轮转中，从头开始
                next_index = 0

            if next_index >= len(room.turn_order):
                room.current_round += 1
                room.current_turn = room.turn_order[0]
                logger.info("房间 %s 进入第%d轮", room.code, room.current_round)
            else:
                room.current_turn = room.turn_order[next_index]

        logger.info("房间 %s 轮到: %s", room.code, room.current_turn_name)
        return room

    async def end_debate(self, code: str) -> Tuple[Room, List[ParticipantResult]]:
        """结束辩论并计算排名；对已结束的房间重复调用直接返回结果"""
        room = self._require_room(code)
        async with room.lock:
            if room.status != RoomStatus.ENDED:
                room.status = RoomStatus.ENDED
                room.current_turn = None
                logger.info("房间 %s 辩论结束，计算最终得分...", room.code)
            results = rank_participants(list(room.participants.values()))
        return room, results

    async def get_results(self, code: str) -> Tuple[Room, List[ParticipantResult]]:
        room = self._require_room(code)
        async with room.lock:
            if room.status != RoomStatus.ENDED:
                raise InvalidStateError("Debate has not ended yet")
            results = rank_participants(list(room.participants.values()))
        return room, results

    async def get_turn_status(self, code: str, participant_id: Optional[str]) -> TurnStatus:
        room = self._require_room(code)
        async with room.lock:
            return TurnStatus(
                status=room.status,
                round=room.current_round,
                is_my_turn=room.current_turn is not None and room.current_turn == participant_id,
                current_turn=room.current_turn,
                current_turn_name=room.current_turn_name,
            )

    async def submit_response(
        self,
        code: str,
        participant_id: Optional[str],
        clip: Optional[AudioClip],
    ) -> Response:
        """提交录音：校验发言权 -> 转写与评分（不持锁）-> 记录发言

        记录的轮次是受理时的轮次；AI处理期间主持人可能已经切换发言者，
        这种情况下发言仍按受理时的轮次记录。
        """
        room = self._require_room(code)
        async with room.lock:
            if room.status != RoomStatus.IN_PROGRESS:
                raise InvalidStateError("Debate not in progress")
            if not participant_id or room.current_turn != participant_id:
                raise TurnViolationError("Not your turn")
            participant = room.participants.get(participant_id)
            if participant is None:
                raise NotFoundError("Participant not found")
            if clip is None or not clip.data:
                raise InvalidInputError("Audio file is required")
            accepted_round = room.current_round
            topic = room.topic

        transcript, scores, fallback = await self._judge(topic, clip, participant.name)

        async with room.lock:
            if not self.store.contains(room):
                raise NotFoundError("Room not found")
            response = Response(
                round=accepted_round,
                transcript=transcript,
                scores=scores,
                submitted_at=epoch_millis(),
                fallback=fallback,
            )
            participant.responses.append(response)

        logger.info(
            "%s 提交了第%d轮发言: 得分 %s%s",
            participant.name, accepted_round, scores.final_score, " (模拟兜底)" if fallback else "",
        )
        return response

    async def _judge(self, topic: str, clip: AudioClip, speaker: str) -> Tuple[str, Scores, bool]:
        """转写并评分；任一步失败或超时都改用模拟AI，保证演示不中断"""
        try:
            transcript = await asyncio.wait_for(self.ai_service.transcribe(clip), self.ai_timeout)
        except Exception as e:
            logger.warning("%s 的录音转写失败，使用模拟结果: %r", speaker, e)
            return self.fallback.mock_transcript(), self.fallback.mock_scores(), True

        try:
            scores = await asyncio.wait_for(self.ai_service.evaluate(topic, transcript), self.ai_timeout)
        except Exception as e:
            logger.warning("%s 的发言评分失败，使用模拟评分: %r", speaker, e)
            return transcript, self.fallback.mock_scores(), True

        return transcript, scores, False
