"""
Logging helpers shared by every module.
"""
import logging

from app.core import config


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the ``app`` logger."""
    global _configured
    root = logging.getLogger("app")
    root.setLevel(level or config.LOG_LEVEL)
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Names outside the ``app`` namespace (e.g. ``__main__`` from server.py)
    are nested under it so they share the configured handler.
    """
    configure_logging()
    if name != "app" and not name.startswith("app."):
        name = f"app.{name}"
    return logging.getLogger(name)
