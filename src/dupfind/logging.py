"""Logging configuration for dupfind."""

from __future__ import annotations

from tqdm import tqdm

import logging


class TqdmHandler(logging.StreamHandler):
    """Stream handler that writes around active progress bars."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the dupfind logger.

    Messages go to stderr so that machine output on stdout stays clean.
    """
    if verbose:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif quiet:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.INFO
        fmt = "%(message)s"

    package_logger = logging.getLogger("dupfind")
    package_logger.handlers.clear()
    handler = TqdmHandler()
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
