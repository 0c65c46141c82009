"""
工具函数模块
"""

import random
import time
from typing import Optional

# 去掉了容易混淆的 0/O、1/I
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6


def generate_room_code(rng: Optional[random.Random] = None) -> str:
    """生成6位房间码"""
    rng = rng or random
    return "".join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def normalize_room_code(code: str) -> str:
    """房间码大小写不敏感，统一转为大写"""
    return (code or "").strip().upper()


def epoch_millis() -> int:
    """当前时间的毫秒时间戳"""
    return int(time.time() * 1000)
