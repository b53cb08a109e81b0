"""Root logger configuration for the API process."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "info") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.getLogger().setLevel(numeric_level)

    # Per-request access lines are noise at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
