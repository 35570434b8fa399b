import logging
from typing import Optional

from pharmacare.config.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging once per process.

    When ``LOG_FILE`` is set, errors are additionally written to that file.
    """
    level = getattr(logging, (settings.log_level if settings else "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    if settings and settings.log_file:
        root = logging.getLogger()
        if not any(isinstance(h, logging.FileHandler) and h.baseFilename.endswith(settings.log_file) for h in root.handlers):
            file_handler = logging.FileHandler(settings.log_file)
            file_handler.setLevel(logging.ERROR)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(file_handler)

    # keep SQL echo and HTTP client chatter out of application logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
