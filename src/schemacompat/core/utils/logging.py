"""Logging helpers (no env reads)."""
import logging

LOGGER_NAMESPACE = "schemacompat"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Return a logger under the ``schemacompat`` namespace.

    Only the namespace root gets a handler, so child loggers propagate to a
    single stream instead of printing each record twice.
    """
    if name != LOGGER_NAMESPACE and not name.startswith(LOGGER_NAMESPACE + "."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    root = logging.getLogger(LOGGER_NAMESPACE)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
