import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stdout with an ISO timestamp."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # kazoo logs every connection state change at INFO
    logging.getLogger("kazoo.client").setLevel(logging.WARNING)
