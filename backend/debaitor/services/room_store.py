"""
房间存储服务
"""

import logging
import time
from typing import Callable, Dict, Iterator, Optional

from debaitor.core.utils import generate_room_code, normalize_room_code
from debaitor.models.room import Room

logger = logging.getLogger(__name__)


class RoomStore:
    """进程内的房间表，按房间码寻址

    房间从创建起超过 ttl_seconds 即视为过期，在查找、创建和定期清理时移除。
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        code_factory: Callable[[], str] = generate_room_code,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._code_factory = code_factory
        self._rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def now(self) -> float:
        return self._clock()

    def new_code(self) -> str:
        """生成一个未被占用的房间码"""
        while True:
            code = self._code_factory()
            if code not in self._rooms:
                return code

    def add(self, room: Room) -> Room:
        if room.code in self._rooms:
            raise ValueError(f"房间码 {room.code} 已被占用")
        self._rooms[room.code] = room
        return room

    def get(self, code: str) -> Optional[Room]:
        """按房间码查找，过期的房间视为不存在"""
        code = normalize_room_code(code)
        room = self._rooms.get(code)
        if room is None:
            return None
        if self._is_expired(room):
            self._evict(room)
            return None
        return room

    def contains(self, room: Room) -> bool:
        """判断该房间对象是否仍在表中"""
        return self._rooms.get(room.code) is room and not self._is_expired(room)

    def purge_expired(self) -> int:
        """移除所有过期房间，返回移除数量"""
        expired = [room for room in self._rooms.values() if self._is_expired(room)]
        for room in expired:
            self._evict(room)
        return len(expired)

    def _is_expired(self, room: Room) -> bool:
        return self.now() - room.created_at >= self.ttl_seconds

    def _evict(self, room: Room) -> None:
        if self._rooms.get(room.code) is room:
            del self._rooms[room.code]
            logger.info("房间 %s 已过期并被移除", room.code)
