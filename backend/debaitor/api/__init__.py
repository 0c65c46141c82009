"""
API路由模块
"""

from fastapi import APIRouter
from .room_routes import router as room_router

# 创建主路由器
api_router = APIRouter()

# 注册各个功能模块的路由
api_router.include_router(room_router, prefix="/rooms", tags=["房间管理"])
