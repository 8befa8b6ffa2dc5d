import os
from pathlib import Path

from loguru import logger

log_dir = Path(os.getenv("SANITIZER_LOG_DIR", "logs"))
log_file = log_dir / "sanitizer_{time}.log"

logger.remove()
logger.add(
    log_file,
    rotation="64 MB",
    retention="10 days",
    compression="zip",
    encoding="utf-8",
    level=os.getenv("SANITIZER_LOG_LEVEL", "INFO").upper(),
    enqueue=True,
)
