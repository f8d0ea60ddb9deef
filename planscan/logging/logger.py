import logging
import sys
from typing import TextIO


class Log:
    """Process-wide logger for the client, wizard and page renderers.

    Everything goes to the ``planscan`` logger, which an embedding
    application can route through its own logging config.
    """

    _logger: logging.Logger = logging.getLogger("planscan")
    _FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level and attach a single stream handler (stdout by default).

        Calling it again only changes the level.
        """
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.setFormatter(logging.Formatter(cls._FORMAT))
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Step transitions, uploads and finished renders."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Failures that end up in the session error."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Dropped stream frames and other recoverable protocol noise."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Per-event progress while a page is processed."""
        cls._logger.debug(message, extra=kwargs)
