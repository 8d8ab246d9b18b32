"""
Logging Configuration
Sets up the package logger. The terminal belongs to the TUI, so records go
to the Textual devtools console (``textual console``) and optionally to a file.
"""
import logging
from typing import Optional

from textual.logging import TextualHandler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'nearby_tui' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to append logs to.
    """
    logger = logging.getLogger("nearby_tui")
    logger.setLevel(level)

    # Avoid duplicate records when the app is restarted in-process
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    textual_handler = TextualHandler()
    textual_handler.setLevel(level)
    textual_handler.setFormatter(formatter)
    logger.addHandler(textual_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("Logging initialized.")
