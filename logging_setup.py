import logging
import sys

from config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Configure the root logger with a single console handler.

    Call once at startup, before the first request is handled.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate handlers when uvicorn reloads the module
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    # passlib complains about newer bcrypt builds on every import
    logging.getLogger("passlib").setLevel(logging.ERROR)
