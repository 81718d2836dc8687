"""Library logging helpers."""

import logging

PACKAGE_LOGGER = "metricbind"

# Applications decide where library logs go.
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the metricbind namespace.

    Args:
        name: Usually ``__name__`` of the calling module. Names outside the
            package are nested under it.

    Returns:
        A standard library logger.
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
