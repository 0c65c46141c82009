#!/usr/bin/env python3
"""
DebAItor - 后端主入口
"""

import uvicorn
from debaitor.application import create_app
from debaitor.core.config import get_settings
from debaitor.core.log import setup_logging

settings = get_settings()
setup_logging(settings.LOG_LEVEL)

app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
