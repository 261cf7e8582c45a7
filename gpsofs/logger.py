"""
Logger setup shared by the search engine, the runner and the experiments.
"""
import logging

LOGGER_NAME = "gpsofs"


def setup_logger(level="INFO"):
    """Configure the package logger once; later calls only change the level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    return logger
