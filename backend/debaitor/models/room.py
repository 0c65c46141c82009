"""
房间数据模型
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from debaitor.models.participant import Participant


class RoomStatus(str, Enum):
    """房间状态，只能前进不能回退"""
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


@dataclass
class Room:
    """辩论房间"""
    code: str
    topic: str
    host_id: str
    status: RoomStatus = RoomStatus.WAITING
    participants: Dict[str, Participant] = field(default_factory=dict)  # 插入顺序即加入顺序
    turn_order: List[str] = field(default_factory=list)
    current_turn: Optional[str] = None
    current_round: int = 0
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def current_turn_name(self) -> Optional[str]:
        if self.current_turn is None:
            return None
        participant = self.participants.get(self.current_turn)
        return participant.name if participant else None
