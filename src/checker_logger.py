import logging

import os
import sys
from checker_constants import LOG_TO_FILE, LOGS_PATH, USING_AWS_LAMBDA

def getCheckerLogger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    # Already configured by an earlier import
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logfmt = "%(asctime)s %(threadName)s %(filename)s:%(funcName)s:%(lineno)d [%(levelname)s]: %(message)s"
    log_formatter = logging.Formatter(logfmt)

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(log_formatter)
    ch.setLevel(logging.DEBUG if USING_AWS_LAMBDA else logging.INFO)
    logger.addHandler(ch)

    if LOG_TO_FILE and not USING_AWS_LAMBDA:
        os.makedirs(os.path.dirname(LOGS_PATH), exist_ok=True)
        fh = logging.FileHandler(LOGS_PATH, "a")
        fh.setFormatter(log_formatter)
        fh.setLevel(logging.DEBUG)
        logger.addHandler(fh)

    if USING_AWS_LAMBDA:
        logger.propagate = False # Prevent log duplication in AWS lambda

    return logger
