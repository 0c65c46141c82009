"""
日志配置
"""

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    """配置根日志器，进程启动时调用一次"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
