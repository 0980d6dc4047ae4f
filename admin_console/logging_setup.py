"""Process-wide logging: console output plus a file under LOGS_DIR/console/."""
import logging
from pathlib import Path

from admin_console.config import Settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(settings: Settings) -> Path:
    """Install stream + file handlers once at startup. Returns the log file path."""
    log_dir = Path(settings.LOGS_DIR) / "console"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "console.log"

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler(log_file, encoding='utf-8')  # File output
        ]
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return log_file
