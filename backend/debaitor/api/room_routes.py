"""
房间管理API路由
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from typing import Optional

from debaitor.core.config import Settings
from debaitor.services.qr_service import build_join_url, build_qr_data_url
from debaitor.services.room_service import RoomService
from debaitor.services.upload_service import read_audio_clip, release_upload
from debaitor.schemas.room_schemas import (
    DebateStarted,
    JoinRequest,
    JoinResponse,
    QRCodeResponse,
    ResultsResponse,
    RoomCreate,
    RoomCreated,
    RoomView,
    SubmitResult,
    TurnChange,
    TurnStatusOut,
    results_response,
    room_view,
    scores_out,
    turn_status_out,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_room_service(request: Request) -> RoomService:
    return request.app.state.room_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("", response_model=RoomCreated)
async def create_room(
    data: RoomCreate,
    service: RoomService = Depends(get_room_service)
):
    """创建新房间"""
    room = await service.create_room(data.topic)
    return RoomCreated(room_code=room.code, topic=room.topic, host_id=room.host_id)


@router.get("/{code}", response_model=RoomView)
async def get_room(
    code: str,
    service: RoomService = Depends(get_room_service)
):
    """获取房间信息"""
    room = await service.get_room(code)
    return room_view(room)


@router.get("/{code}/qr", response_model=QRCodeResponse)
async def get_room_qr(
    code: str,
    request: Request,
    service: RoomService = Depends(get_room_service),
    settings: Settings = Depends(get_app_settings)
):
    """生成加入房间的二维码"""
    room = await service.get_room(code)
    base_url = settings.PUBLIC_BASE_URL or str(request.base_url)
    join_url = build_join_url(base_url, room.code)
    try:
        qr_code = build_qr_data_url(join_url)
    except Exception as e:
        logger.warning("房间 %s 二维码生成失败: %s", room.code, e)
        raise HTTPException(status_code=500, detail="Failed to generate QR code")
    return QRCodeResponse(qr_code=qr_code, join_url=join_url)


@router.post("/{code}/join", response_model=JoinResponse)
async def join_room(
    code: str,
    data: JoinRequest,
    service: RoomService = Depends(get_room_service)
):
    """加入房间"""
    room, participant = await service.join_room(code, data.name)
    return JoinResponse(
        participant_id=participant.id,
        name=participant.name,
        topic=room.topic,
        room_code=room.code,
    )


@router.post("/{code}/start", response_model=DebateStarted)
async def start_debate(
    code: str,
    service: RoomService = Depends(get_room_service)
):
    """主持人：开始辩论"""
    room = await service.start_debate(code)
    return DebateStarted(
        current_turn=room.current_turn,
        current_turn_name=room.current_turn_name,
        round=room.current_round,
    )


@router.post("/{code}/next-turn", response_model=TurnChange)
async def next_turn(
    code: str,
    service: RoomService = Depends(get_room_service)
):
    """主持人：切换到下一位发言者"""
    room = await service.advance_turn(code)
    return TurnChange(
        current_turn=room.current_turn,
        current_turn_name=room.current_turn_name,
        round=room.current_round,
    )


@router.post("/{code}/end", response_model=ResultsResponse)
async def end_debate(
    code: str,
    service: RoomService = Depends(get_room_service)
):
    """主持人：结束辩论并返回排名"""
    room, results = await service.end_debate(code)
    return results_response(room, results)


@router.post("/{code}/submit", response_model=SubmitResult)
async def submit_response(
    code: str,
    participant_id: Optional[str] = Form(default=None, alias="participantId"),
    audio: Optional[UploadFile] = File(default=None),
    service: RoomService = Depends(get_room_service),
    settings: Settings = Depends(get_app_settings)
):
    """参与者：提交本轮录音"""
    try:
        await service.get_room(code)
        clip = await read_audio_clip(audio, settings.MAX_UPLOAD_BYTES)
        response = await service.submit_response(code, participant_id, clip)
    finally:
        await release_upload(audio)
    return SubmitResult(
        transcript=response.transcript,
        scores=scores_out(response.scores),
        round=response.round,
        fallback=response.fallback,
    )


@router.get("/{code}/turn-status", response_model=TurnStatusOut)
async def get_turn_status(
    code: str,
    participant_id: Optional[str] = Query(default=None, alias="participantId"),
    service: RoomService = Depends(get_room_service)
):
    """参与者轮询：是否轮到自己"""
    status = await service.get_turn_status(code, participant_id)
    return turn_status_out(status)


@router.get("/{code}/results", response_model=ResultsResponse)
async def get_results(
    code: str,
    service: RoomService = Depends(get_room_service)
):
    """获取最终排名（仅辩论结束后）"""
    room, results = await service.get_results(code)
    return results_response(room, results)
