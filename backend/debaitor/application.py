"""
FastAPI 应用工厂
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from debaitor.api import api_router
from debaitor.api.errors import register_exception_handlers
from debaitor.core.config import Settings, get_settings
from debaitor.services.ai_service import AIService, build_ai_service
from debaitor.services.room_service import RoomService
from debaitor.services.room_store import RoomStore

logger = logging.getLogger(__name__)


async def sweep_expired_rooms(store: RoomStore, interval: float) -> None:
    """定期清理过期房间"""
    while True:
        await asyncio.sleep(interval)
        purged = store.purge_expired()
        if purged:
            logger.info("定期清理: 移除 %d 个过期房间，剩余 %d 个", purged, len(store))


def create_app(settings: Optional[Settings] = None, ai_service: Optional[AIService] = None) -> FastAPI:
    """创建应用；AI后端在此解析一次，之后不再切换"""
    settings = settings or get_settings()
    store = RoomStore(ttl_seconds=settings.ROOM_TTL_SECONDS)
    ai_service = ai_service or build_ai_service(settings)
    room_service = RoomService(store, ai_service, ai_timeout=settings.AI_TIMEOUT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 启动 %s 后端服务 (模拟AI: %s)", settings.APP_NAME, ai_service.is_mock)
        sweeper = asyncio.create_task(sweep_expired_rooms(store, settings.ROOM_SWEEP_INTERVAL))
        try:
            yield
        finally:
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass
            logger.info("服务已停止")

    app = FastAPI(
        title=settings.APP_NAME,
        description="轮流发言、AI评分的辩论房间后端API",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.room_store = store
    app.state.room_service = room_service

    # CORS设置
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # 注册API路由
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        """根路径健康检查"""
        return {"message": f"{settings.APP_NAME} 后端运行中", "status": "healthy"}

    @app.get("/health")
    async def health_check():
        """健康检查端点"""
        return {
            "status": "healthy",
            "service": "debaitor",
            "mockAI": ai_service.is_mock,
            "rooms": len(store),
        }

    return app
