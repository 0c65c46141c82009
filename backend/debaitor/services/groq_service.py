"""
Groq AI后端（OpenAI兼容接口）
"""

import json
import logging
import re
from typing import Optional

import httpx

from debaitor.core.errors import EvaluationError, TranscriptionError
from debaitor.models.response import Scores
from debaitor.services.ai_service import AIService, AudioClip
from debaitor.services.scoring import build_scores

logger = logging.getLogger(__name__)

JUDGE_SYSTEM_PROMPT = """You are a strict, impartial debate judge evaluating spoken arguments.

SCORING CRITERIA (0-10 scale):

LOGIC (0-10): Is the argument well-structured and logical?
- 0-3: No logical structure, contradictions, fallacies
- 4-6: Some logical flow but weak reasoning
- 7-10: Strong logical structure with valid reasoning

CLARITY (0-10): Is the expression clear and understandable?
- 0-3: Confusing, incoherent, hard to follow
- 4-6: Somewhat clear but could be better expressed
- 7-10: Crystal clear expression

RELEVANCE (0-10): How relevant is the response to the debate topic?
- 0-3: Off-topic or barely addresses the topic
- 4-6: Partially relevant
- 7-10: Directly addresses the topic

EMOTIONAL BIAS (0-10): How emotional vs objective? (Higher = MORE emotional = BAD)
- 0-3: Very objective and fact-based
- 4-6: Some emotional language
- 7-10: Highly emotional, biased language

Return ONLY a valid JSON object (no markdown, no explanation):
{"logic": X, "clarity": X, "relevance": X, "emotionalBias": X, "insight": "one sentence about main weakness"}"""

JSON_OBJECT_PATTERN = re.compile(r"\{.*?\}", re.DOTALL)


def build_judge_prompt(topic: str, transcript: str) -> str:
    return (
        f'DEBATE TOPIC: "{topic}"\n\n'
        f"PARTICIPANT'S SPOKEN RESPONSE (transcribed):\n"
        f'"{transcript}"\n\n'
        "Rate this response. Return JSON only."
    )


def parse_evaluation(content: str) -> Scores:
    """从模型回复中提取第一个JSON对象并整理为评分"""
    match = JSON_OBJECT_PATTERN.search(content or "")
    if not match:
        raise EvaluationError("No JSON in response")
    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise EvaluationError(f"Invalid JSON in response: {e}") from e
    if not isinstance(raw, dict):
        raise EvaluationError("Evaluation is not a JSON object")
    return build_scores(raw)


class GroqAIService(AIService):
    """调用 Groq 的 Whisper 转写与 LLaMA 评分"""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        transcription_model: str = "whisper-large-v3-turbo",
        evaluation_model: str = "llama-3.3-70b-versatile",
        language: str = "en",
        temperature: float = 0.5,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.transcription_model = transcription_model
        self.evaluation_model = evaluation_model
        self.language = language
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def transcribe(self, clip: AudioClip) -> str:
        """Whisper 语音转写"""
        logger.info("转写录音 %s (%d 字节)...", clip.filename, len(clip.data))
        try:
            async with self._client() as client:
                response = await client.post(
                    "/audio/transcriptions",
                    data={"model": self.transcription_model, "language": self.language},
                    files={"file": (clip.filename, clip.data, clip.content_type)},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TranscriptionError(f"Transcription request failed: {e}") from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise TranscriptionError("Transcription response has no text")
        logger.info('转写结果: "%s..."', text[:50])
        return text

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        """LLaMA 按辩题评分"""
        body = {
            "model": self.evaluation_model,
            "messages": [
                {"role": "system", "content": JUDGE_SYSTEM_PROMPT},
                {"role": "user", "content": build_judge_prompt(topic, transcript)},
            ],
            "temperature": self.temperature,
        }
        try:
            async with self._client() as client:
                response = await client.post("/chat/completions", json=body)
                response.raise_for_status()
                data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            raise EvaluationError(f"Evaluation request failed: {e}") from e

        if not isinstance(content, str):
            raise EvaluationError("Evaluation reply content is not text")
        logger.debug("AI原始回复: %s", content[:200])
        scores = parse_evaluation(content)
        logger.info(
            "AI评分 - 逻辑: %s, 清晰: %s, 相关: %s, 情绪: %s, 最终: %s",
            scores.logic, scores.clarity, scores.relevance, scores.emotional_bias, scores.final_score,
        )
        return scores
