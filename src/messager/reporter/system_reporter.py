"""
Messager logging front-end.

Every component logs through one SystemReporter. Lines carry a
`[context]` tag naming the component, and each call states how chatty
it is (verbose_level) so deployments can turn detail up or down without
touching the logging level.
"""

import logging
import os
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_VERBOSE = 3


class SystemReporter:
    """
    Context-tagged logger with a verbosity filter.

    A call is emitted only when its verbose_level is at most the
    reporter's verbose setting:
        0 = failures and lifecycle milestones
        1 = request-level events (default)
        2 = per-connection and per-message detail
        3 = debug tracing
    """

    def __init__(
        self,
        name: str = "messager",
        log_dir: Optional[str] = None,
        level: Union[int, str] = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Args:
            name: Logger name, also the log file stem
            log_dir: Write `<name>.log` here in addition to stdout
            level: Logging level as int or name ("info", "warning", ...)
            verbose: Verbosity filter, clamped to 0..3
        """
        self.name = name
        self.verbose = max(0, min(MAX_VERBOSE, verbose))
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)

        self.log_file = self._log_path(name, log_dir)
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        for handler in self._handlers():
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    @staticmethod
    def _log_path(name: str, log_dir: Optional[str]) -> Optional[str]:
        if not log_dir:
            return None
        os.makedirs(log_dir, exist_ok=True)
        return os.path.join(log_dir, f"{name}.log")

    def _handlers(self):
        yield logging.StreamHandler(sys.stdout)
        if self.log_file:
            yield logging.FileHandler(self.log_file, encoding="utf-8")

    def _emit(self, level: int, msg: str, context: str, verbose_level: int) -> None:
        if verbose_level <= self.verbose:
            self.logger.log(level, f"[{context}] {msg}")

    def debug(self, msg: str, context: str = "system", verbose_level: int = 3) -> None:
        self._emit(logging.DEBUG, msg, context, verbose_level)

    def info(self, msg: str, context: str = "system", verbose_level: int = 1) -> None:
        self._emit(logging.INFO, msg, context, verbose_level)

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        self._emit(logging.WARNING, msg, context, verbose_level)

    def error(self, msg: str, context: str = "system", verbose_level: int = 0) -> None:
        self._emit(logging.ERROR, msg, context, verbose_level)

    def critical(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        self._emit(logging.CRITICAL, msg, context, verbose_level)
