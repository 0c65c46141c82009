"""
错误类型定义
"""


class RoomError(Exception):
    """房间操作错误的基类，携带对应的HTTP状态码"""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(RoomError):
    """请求字段缺失或格式错误"""


class NotFoundError(RoomError):
    """房间或参与者不存在"""

    status_code = 404


class InvalidStateError(RoomError):
    """当前房间状态不允许该操作"""


class TurnViolationError(RoomError):
    """非当前发言者提交"""


class AIServiceError(Exception):
    """AI后端调用失败"""


class TranscriptionError(AIServiceError):
    """语音转写失败"""


class EvaluationError(AIServiceError):
    """发言评分失败"""
