"""
AI评审能力接口与模拟实现
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from debaitor.models.response import Scores
from debaitor.services.scoring import build_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioClip:
    """一段上传的录音"""
    filename: str
    content_type: str
    data: bytes


class AIService(ABC):
    """语音转写与发言评分能力"""

    is_mock = False

    @abstractmethod
    async def transcribe(self, clip: AudioClip) -> str:
        """把录音转写为文本

        Raises:
            TranscriptionError: 后端调用失败或返回无效内容
        """
        ...

    @abstractmethod
    async def evaluate(self, topic: str, transcript: str) -> Scores:
        """按辩题给转写文本打分

        Raises:
            EvaluationError: 后端调用失败或返回无法解析的评分
        """
        ...


MOCK_TRANSCRIPTS = [
    "I believe we need to consider both perspectives carefully before making a judgment.",
    "The evidence clearly shows that this approach has significant benefits.",
    "While there are valid concerns, the overall impact remains positive.",
    "We must prioritize long-term sustainability over short-term gains.",
]

MOCK_INSIGHTS = [
    "Lacks specific supporting evidence.",
    "Argument is too general without concrete examples.",
    "Does not address counterarguments.",
    "Relies on assumptions without verification.",
]


class MockAIService(AIService):
    """模拟AI，未配置密钥或真实后端失败时使用"""

    is_mock = True

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    async def transcribe(self, clip: AudioClip) -> str:
        logger.debug("[MOCK] 转写 %s (%d 字节)", clip.filename, len(clip.data))
        return self.mock_transcript()

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        return self.mock_scores()

    def mock_transcript(self) -> str:
        return self.rng.choice(MOCK_TRANSCRIPTS)

    def mock_scores(self) -> Scores:
        return build_scores({
            "logic": self.rng.randint(5, 8),
            "clarity": self.rng.randint(5, 8),
            "relevance": self.rng.randint(5, 8),
            "emotionalBias": self.rng.randint(2, 6),
            "insight": self.rng.choice(MOCK_INSIGHTS),
        })


def build_ai_service(settings) -> AIService:
    """根据配置选择真实后端或模拟后端"""
    if settings.use_mock_ai:
        logger.warning("⚠️ 未检测到有效的 GROQ_API_KEY，使用模拟AI评审")
        return MockAIService()

    from debaitor.services.groq_service import GroqAIService

    logger.info("✅ 检测到 Groq API 密钥，启用真实AI评审")
    return GroqAIService(
        api_key=settings.GROQ_API_KEY,
        base_url=settings.GROQ_BASE_URL,
        transcription_model=settings.TRANSCRIPTION_MODEL,
        evaluation_model=settings.EVALUATION_MODEL,
        language=settings.TRANSCRIPTION_LANGUAGE,
        temperature=settings.EVALUATION_TEMPERATURE,
        timeout=settings.AI_TIMEOUT,
    )
