import logging

from ec2_query.config.config import LOG_FILE, LOG_LEVEL


def configure_logging():
    """Configure root logging once for the service: a log file plus the console."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(filename)s:%(funcName)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler()
        ]
    )
