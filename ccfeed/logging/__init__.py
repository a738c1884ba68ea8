"""Structured logging helpers shared by every ccfeed component."""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with a component name.

    ``extra`` passed on the individual call wins over the adapter's defaults.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Return the logger for ``name``, tagged with ``component`` when given.

    Example:
        >>> logger = get_logger(__name__, component="aggregator")
        >>> logger.info("Fetching jobs", extra={"event": "aggregator.fetch.started"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger
