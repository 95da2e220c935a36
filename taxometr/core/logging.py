import logging
from typing import Optional

from fastapi.logger import logger as fastapi_logger


def setup_logging(level: Optional[str] = None):
    # Configure logging format
    logging_format = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    log_level = logging.getLevelName((level or "INFO").upper())

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format=logging_format,
        datefmt=date_format
    )

    # Configure FastAPI logger
    fastapi_logger.handlers = logging.getLogger("uvicorn").handlers
    fastapi_logger.setLevel(log_level)
