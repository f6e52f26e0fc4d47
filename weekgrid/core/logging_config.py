import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout in a single line format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
