"""Shared pytest fixtures."""

import asyncio
import random
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from debaitor.application import create_app
from debaitor.core.config import Settings
from debaitor.core.errors import EvaluationError, TranscriptionError
from debaitor.models.response import Response, Scores
from debaitor.services.ai_service import AIService, AudioClip, MockAIService
from debaitor.services.room_service import RoomService
from debaitor.services.room_store import RoomStore
from debaitor.services.scoring import build_scores


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedAIService(AIService):
    """Returns fixed transcripts and scores keyed by transcript order."""

    def __init__(self, evaluations: Optional[List[Dict]] = None, transcript: str = "My argument.") -> None:
        self.evaluations = list(evaluations or [])
        self.transcript = transcript
        self.transcribed: List[AudioClip] = []
        self.evaluated: List[tuple] = []

    async def transcribe(self, clip: AudioClip) -> str:
        self.transcribed.append(clip)
        return f"{self.transcript} #{len(self.transcribed)}"

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        self.evaluated.append((topic, transcript))
        raw = self.evaluations.pop(0) if self.evaluations else {
            "logic": 5, "clarity": 5, "relevance": 5, "emotionalBias": 5, "insight": "Fine."
        }
        return build_scores(raw)


class FailingAIService(AIService):
    """Fails transcription and/or evaluation on demand."""

    def __init__(self, fail_transcribe: bool = False, fail_evaluate: bool = False) -> None:
        self.fail_transcribe = fail_transcribe
        self.fail_evaluate = fail_evaluate

    async def transcribe(self, clip: AudioClip) -> str:
        if self.fail_transcribe:
            raise TranscriptionError("whisper unavailable")
        return "Real transcript."

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        if self.fail_evaluate:
            raise EvaluationError("No JSON in response")
        return build_scores({"logic": 9, "clarity": 9, "relevance": 9, "emotionalBias": 1, "insight": "Sharp."})


class CrashingAIService(AIService):
    """Raises errors outside the AI error hierarchy, like a broken client library."""

    def __init__(self, crash_transcribe: bool = True) -> None:
        self.crash_transcribe = crash_transcribe

    async def transcribe(self, clip: AudioClip) -> str:
        if self.crash_transcribe:
            raise RuntimeError("sdk blew up")
        return "Real transcript."

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        raise RuntimeError("sdk blew up")


class BlockingAIService(AIService):
    """Blocks inside transcribe until released, to observe the unlocked phase."""

    def __init__(self) -> None:
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def transcribe(self, clip: AudioClip) -> str:
        self.entered.set()
        await self.release.wait()
        return "Slow transcript."

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        return build_scores({"logic": 6, "clarity": 6, "relevance": 6, "emotionalBias": 4, "insight": "Ok."})


class SlowAIService(AIService):
    """Never answers within any reasonable timeout."""

    async def transcribe(self, clip: AudioClip) -> str:
        await asyncio.sleep(10)
        return "too late"

    async def evaluate(self, topic: str, transcript: str) -> Scores:
        await asyncio.sleep(10)
        raise AssertionError("unreachable")


def make_response(logic, clarity, relevance, emotional_bias, round_number: int = 1) -> Response:
    scores = build_scores({
        "logic": logic,
        "clarity": clarity,
        "relevance": relevance,
        "emotionalBias": emotional_bias,
        "insight": "n/a",
    })
    return Response(round=round_number, transcript="t", scores=scores, submitted_at=0)


@pytest.fixture
def clip() -> AudioClip:
    return AudioClip(filename="turn.webm", content_type="audio/webm", data=b"\x1aE\xdf\xa3fake-audio")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> RoomStore:
    return RoomStore(ttl_seconds=3600, clock=clock)


@pytest.fixture
def scripted_ai() -> ScriptedAIService:
    return ScriptedAIService()


@pytest.fixture
def service(store: RoomStore, scripted_ai: ScriptedAIService) -> RoomService:
    return RoomService(store, scripted_ai, ai_timeout=1.0, fallback=MockAIService(rng=random.Random(3)))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        GROQ_API_KEY=None,
        ROOM_TTL_SECONDS=3600,
        MAX_UPLOAD_BYTES=1024,
        PUBLIC_BASE_URL="http://debate.test",
    )


@pytest.fixture
def client(settings: Settings, scripted_ai: ScriptedAIService):
    app = create_app(settings, ai_service=scripted_ai)
    with TestClient(app) as test_client:
        yield test_client
