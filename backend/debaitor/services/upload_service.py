"""
录音上传处理
"""

import logging
from typing import Optional

from fastapi import UploadFile

from debaitor.core.errors import InvalidInputError
from debaitor.services.ai_service import AudioClip

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_FILENAME = "audio.webm"
DEFAULT_AUDIO_CONTENT_TYPE = "application/octet-stream"


async def read_audio_clip(upload: Optional[UploadFile], max_bytes: int) -> Optional[AudioClip]:
    """读取上传的录音，超出大小限制时拒绝"""
    if upload is None:
        return None
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise InvalidInputError("Audio file is too large")
    if not data:
        return None
    return AudioClip(
        filename=upload.filename or DEFAULT_AUDIO_FILENAME,
        content_type=upload.content_type or DEFAULT_AUDIO_CONTENT_TYPE,
        data=data,
    )


async def release_upload(upload: Optional[UploadFile]) -> None:
    """关闭上传的临时文件，失败只记录不抛出"""
    if upload is None:
        return
    try:
        await upload.close()
    except Exception as e:
        logger.warning("清理上传文件失败: %s", e)
