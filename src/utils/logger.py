"""
Logging configuration for the ATA secure erase application
"""

import logging
from pathlib import Path
from datetime import datetime


def setup_logger(log_level=logging.INFO, log_file=None, log_dir="logs", console=False):
    """
    Setup logging configuration for the application

    Args:
        log_level: Logging level (default: INFO)
        log_file: Optional log file path (default: auto-generated under log_dir)
        log_dir: Directory for auto-generated log files
        console: Also log to the console; off by default so log records
            do not interleave with the operator-facing messages
    """

    if log_file is None:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = logs_dir / f"ata_secure_erase_{timestamp}.log"

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    handlers = [logging.FileHandler(log_file)]
    if console:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True
    )

    logger = logging.getLogger(__name__)
    logger.info(f"ATA secure erase logging initialized - Log file: {log_file}")

    return logger
