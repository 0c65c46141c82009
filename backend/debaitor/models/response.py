"""
发言记录数据模型
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Scores:
    """单次发言的评分"""
    logic: float
    clarity: float
    relevance: float
    emotional_bias: float        # 越高越情绪化
    insight: str
    final_score: float


@dataclass(frozen=True)
class Response:
    """参与者的一次发言，追加后不可修改"""
    round: int                   # 提交被受理时的轮次
    transcript: str
    scores: Scores
    submitted_at: int            # 毫秒时间戳
    fallback: bool = False       # 是否使用了模拟AI兜底
