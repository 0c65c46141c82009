# 内存数据模型
from .room import Room, RoomStatus
from .participant import Participant
from .response import Response, Scores

__all__ = ["Room", "RoomStatus", "Participant", "Response", "Scores"]
