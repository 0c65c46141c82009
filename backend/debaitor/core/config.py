"""
应用配置模块
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings

# .env.example 中的占位密钥
PLACEHOLDER_KEY_PREFIX = "gsk_your"


class Settings(BaseSettings):
    """应用设置"""

    # 基础设置
    APP_NAME: str = "DebAItor"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 服务器设置
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]
    PUBLIC_BASE_URL: Optional[str] = None  # 二维码中的加入地址，为空时使用请求地址

    # AI后端设置（Groq，OpenAI兼容接口）
    GROQ_API_KEY: Optional[str] = None
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    TRANSCRIPTION_MODEL: str = "whisper-large-v3-turbo"
    TRANSCRIPTION_LANGUAGE: str = "en"
    EVALUATION_MODEL: str = "llama-3.3-70b-versatile"
    EVALUATION_TEMPERATURE: float = 0.5
    AI_TIMEOUT: float = 30.0  # 单次转写/评分调用的超时（秒）

    # 上传设置
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # 房间设置
    ROOM_TTL_SECONDS: int = 6 * 60 * 60
    ROOM_SWEEP_INTERVAL: int = 300

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def use_mock_ai(self) -> bool:
        """没有配置有效密钥时使用模拟AI"""
        key = (self.GROQ_API_KEY or "").strip()
        return not key or key.startswith(PLACEHOLDER_KEY_PREFIX)


@lru_cache
def get_settings() -> Settings:
    """进程级设置实例，启动时解析一次"""
    return Settings()
