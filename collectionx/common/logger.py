import logging
import os
import sys
from typing import Any, MutableMapping, Optional

_DEFAULT_LOGGER_NAME = "collectionx"
_LOG_LEVEL_ENV_VAR = "COLLECTIONX_LOG_LEVEL"
_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Logger(logging.LoggerAdapter):
    """
    collectionx's logger, used as a module level ``logger = Logger()``.

    Args:
        logger (Optional[logging.Logger]): An already configured logger to wrap. If not provided,
            one is created (and configured once) under ``name``.
        name (Optional[str]): The name of the logger to create. Defaults to "collectionx".
        extra (Optional[dict[str, Any]]): Key/value context appended to every message,
            i.e. ``Logger(extra={"op": "sort"}).info("done")`` logs ``done [op=sort]``.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        extra: Optional[dict[str, Any]] = None,
    ):
        if logger is None:
            logger = logging.getLogger(name or _DEFAULT_LOGGER_NAME)
            self._setup_logger(logger)
        super().__init__(logger, extra or {})

    @staticmethod
    def _setup_logger(logger: logging.Logger) -> None:
        # Handlers are attached once per underlying logger; every module creates its own adapter.
        if logger.handlers:
            return
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)
        level = os.getenv(_LOG_LEVEL_ENV_VAR, "INFO").upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
        logger.propagate = False

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        if self.extra:
            context = " ".join(f"{key}={value}" for key, value in self.extra.items())
            msg = f"{msg} [{context}]"
        return msg, kwargs
