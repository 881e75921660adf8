"""
Logging Configuration
Sets up the package logger and the in-memory debug log.
"""
import logging
import sys
from collections import deque
from typing import Deque, List, Optional

from qrshield.config import LOG_RING_CAPACITY


class RingBufferHandler(logging.Handler):
    """
    Keeps the most recent log records in a bounded buffer.

    Used as the on-device debug overlay: a display component reads
    ``lines()`` and draws them, oldest first. Memory use is fixed by
    ``capacity``.
    """

    def __init__(self, capacity: int = LOG_RING_CAPACITY, level: int = logging.NOTSET):
        super().__init__(level)
        self.records: Deque[logging.LogRecord] = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def lines(self) -> List[str]:
        """Formatted messages, oldest first."""
        return [self.format(record) for record in self.records]

    def clear(self) -> None:
        self.records.clear()


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  ring_capacity: int = LOG_RING_CAPACITY) -> RingBufferHandler:
    """
    Configures the logger for the 'qrshield' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        ring_capacity: Number of records kept for the debug overlay.

    Returns:
        The ring buffer handler attached to the logger.
    """
    logger = logging.getLogger("qrshield")
    logger.setLevel(level)

    # Avoid duplicate output when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    ring_handler = RingBufferHandler(ring_capacity, level)
    ring_handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
    logger.addHandler(ring_handler)

    logger.info("Logging initialized.")
    return ring_handler
