"""
参与者数据模型
"""

from dataclasses import dataclass, field
from typing import List

from debaitor.core.utils import epoch_millis
from debaitor.models.response import Response


@dataclass
class Participant:
    """辩论参与者，归属于单个房间"""
    id: str
    name: str
    responses: List[Response] = field(default_factory=list)
    joined_at: int = field(default_factory=epoch_millis)
