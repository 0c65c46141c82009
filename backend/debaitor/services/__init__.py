# 业务逻辑服务包
from .ai_service import AIService, AudioClip, MockAIService, build_ai_service
from .room_store import RoomStore
from .room_service import RoomService, TurnStatus

__all__ = [
    "AIService", "AudioClip", "MockAIService", "build_ai_service",
    "RoomStore", "RoomService", "TurnStatus",
]
