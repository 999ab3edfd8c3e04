import logging
import logging.handlers
import os
import sys
from datetime import datetime

from config import LOGS_DIR


def setup_logging(level: int = logging.INFO):
    """
    Sets up daily rotating file logging plus console output.
    """
    # Ensure logs directory exists
    if not os.path.exists(LOGS_DIR):
        os.makedirs(LOGS_DIR)

    log_filename = LOGS_DIR / f"{datetime.now().strftime('%Y-%m-%d')}.log"

    logger = logging.getLogger()
    logger.setLevel(level)

    # Prevent duplicate handlers if setup_logging is called multiple times
    if logger.handlers:
        return

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_filename,
        when="D",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )

    # Format: [2026-01-07 20:35:46] [INFO] Message
    formatter = logging.Formatter('[%(asctime)s] [%(levelname)s] %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.__stdout__)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # py-cord logs every gateway event at INFO
    logging.getLogger("discord").setLevel(logging.WARNING)

    logging.info("Logging initialized.")
