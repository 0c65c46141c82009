"""
评分计算

所有函数都是纯函数：不持有状态、不做IO，结果只由输入的发言记录决定。
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Sequence

from debaitor.models.participant import Participant
from debaitor.models.response import Response, Scores

# 各项评分权重
WEIGHTS = {
    "logic": Decimal("0.35"),
    "clarity": Decimal("0.25"),
    "relevance": Decimal("0.30"),
    "emotional_bias": Decimal("0.10"),  # 按 (10 - emotional_bias) 计分
}

NEUTRAL_SCORE = 5.0
MIN_SCORE = 0.0
MAX_SCORE = 10.0
DEFAULT_INSIGHT = "Response needs improvement"

# AI返回的字段名 -> 内部字段名
RAW_KEYS = {
    "logic": "logic",
    "clarity": "clarity",
    "relevance": "relevance",
    "emotionalBias": "emotional_bias",
}


@dataclass
class AverageScores:
    logic: float = 0.0
    clarity: float = 0.0
    relevance: float = 0.0
    emotional_bias: float = 0.0


@dataclass
class ParticipantResult:
    """参与者的最终成绩"""
    id: str
    name: str
    total_responses: int
    average_scores: AverageScores
    average_score: float
    responses: List[Response] = field(default_factory=list)
    rank: int = 0


def round1(value: float) -> float:
    """四舍五入到一位小数（半数进位）"""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def coerce_score(value: Any) -> float:
    """缺失、非数值或超出[0,10]的评分一律按中性值5处理"""
    if isinstance(value, bool) or value is None:
        return NEUTRAL_SCORE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NEUTRAL_SCORE
    if math.isnan(number) or number < MIN_SCORE or number > MAX_SCORE:
        return NEUTRAL_SCORE
    return number


def compute_final_score(logic: Any, clarity: Any, relevance: Any, emotional_bias: Any) -> float:
    """加权计算最终得分，保留一位小数"""
    values = {
        "logic": coerce_score(logic),
        "clarity": coerce_score(clarity),
        "relevance": coerce_score(relevance),
        "emotional_bias": coerce_score(emotional_bias),
    }
    total = (
        Decimal(str(values["logic"])) * WEIGHTS["logic"]
        + Decimal(str(values["clarity"])) * WEIGHTS["clarity"]
        + Decimal(str(values["relevance"])) * WEIGHTS["relevance"]
        + (Decimal("10") - Decimal(str(values["emotional_bias"]))) * WEIGHTS["emotional_bias"]
    )
    return float(total.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def build_scores(raw: Mapping[str, Any]) -> Scores:
    """把AI返回的原始评分整理成Scores，最终得分由本地计算"""
    values: Dict[str, float] = {
        name: coerce_score(raw.get(key)) for key, name in RAW_KEYS.items()
    }
    insight = raw.get("insight")
    if not isinstance(insight, str) or not insight.strip():
        insight = DEFAULT_INSIGHT
    return Scores(
        logic=values["logic"],
        clarity=values["clarity"],
        relevance=values["relevance"],
        emotional_bias=values["emotional_bias"],
        insight=insight.strip(),
        final_score=compute_final_score(**values),
    )


def aggregate_participant(participant: Participant) -> ParticipantResult:
    """汇总单个参与者的所有发言

    先对各项原始评分取平均，再用平均后的评分重新计算最终得分，
    而不是对每轮的最终得分取平均。
    """
    responses = list(participant.responses)
    if not responses:
        return ParticipantResult(
            id=participant.id,
            name=participant.name,
            total_responses=0,
            average_scores=AverageScores(),
            average_score=0.0,
            responses=[],
        )

    count = len(responses)
    avg_logic = sum(r.scores.logic for r in responses) / count
    avg_clarity = sum(r.scores.clarity for r in responses) / count
    avg_relevance = sum(r.scores.relevance for r in responses) / count
    avg_bias = sum(r.scores.emotional_bias for r in responses) / count

    return ParticipantResult(
        id=participant.id,
        name=participant.name,
        total_responses=count,
        average_scores=AverageScores(
            logic=round1(avg_logic),
            clarity=round1(avg_clarity),
            relevance=round1(avg_relevance),
            emotional_bias=round1(avg_bias),
        ),
        average_score=compute_final_score(avg_logic, avg_clarity, avg_relevance, avg_bias),
        responses=responses,
    )


def rank_participants(participants: Sequence[Participant]) -> List[ParticipantResult]:
    """按平均得分降序排名，同分保持加入顺序"""
    results = [aggregate_participant(p) for p in participants]
    # sorted 是稳定排序
    ranked = sorted(results, key=lambda r: r.average_score, reverse=True)
    for index, result in enumerate(ranked):
        result.rank = index + 1
    return ranked
