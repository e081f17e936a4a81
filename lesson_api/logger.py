# logger.py

import logging

# Structured JSON log line, one record per line
LOG_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"message": "%(message)s", "request_id": "%(request_id)s"}'
)


class RequestIdFilter(logging.Filter):
    """ Default request_id for records logged outside of a request. """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "N/A"
        return True


# Named logger instance
logger = logging.getLogger("lesson_api")

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
_handler.addFilter(RequestIdFilter())
logger.addHandler(_handler)
logger.setLevel(logging.INFO)


def set_log_level(level: str):
    logger.setLevel(level.upper())

def log_info(message: str, request_id: str = "N/A"):
    logger.info(message, extra={"request_id": request_id})

def log_error(message: str, request_id: str = "N/A"):
    logger.error(message, extra={"request_id": request_id})

def log_debug(message: str, request_id: str = "N/A"):
    logger.debug(message, extra={"request_id": request_id})

def log_warning(message: str, request_id: str = "N/A"):
    logger.warning(message, extra={"request_id": request_id})
