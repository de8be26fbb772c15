import logging
import sys


def setup_logger(name: str = "rtrwh_calculator", level=logging.INFO):
    """
    Sets up a logger that outputs to Console (stdout).
    Child loggers created with logging.getLogger(__name__) inside the package
    propagate here, so one call at startup covers the engine, store and API.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate logs if setup is called multiple times
    if logger.hasHandlers():
        return logger

    # Format: Timestamp - Component - Level - Message
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return logger
