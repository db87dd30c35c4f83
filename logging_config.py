import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
HANDLER_PREFIX = "style-decor"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root logger for the API.

    Adds a console handler, plus a file handler when ``log_file`` (the
    ``LOG_FILE`` setting) is given. Handlers added here are tagged by name so
    a second ``create_app`` call does not stack duplicates.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any((h.get_name() or "").startswith(HANDLER_PREFIX) for h in root.handlers):
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.set_name(f"{HANDLER_PREFIX}-{type(handler).__name__}")
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # driver heartbeat chatter
    logging.getLogger("pymongo").setLevel(max(root.level, logging.WARNING))
