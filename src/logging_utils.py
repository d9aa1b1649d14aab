"""
Logging for the convergence advisor.

Every module logs under the "convergence_advisor" hierarchy:

    from logging_utils import get_logger

    logger = get_logger(__name__)   # -> convergence_advisor.<module>
"""

import logging
import sys

ROOT_LOGGER_NAME = "convergence_advisor"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _root_logger() -> logging.Logger:
    """The advisor's root logger, given a stderr handler on first use."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__); a leading "src." is dropped."""
    _root_logger()
    if name.startswith("src."):
        name = name[len("src."):]
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_verbose(verbose: bool) -> None:
    """DEBUG for every advisor logger when verbose, INFO otherwise."""
    _root_logger().setLevel(logging.DEBUG if verbose else logging.INFO)


class LoggerAdapter:
    """
    Print-like progress channel for the CLI.

    Messages go to the wrapped logger at INFO, and only when verbose:

        log = LoggerAdapter(logger, verbose=args.verbose)
        log(f"Reynolds number: {reynolds_text}")
    """

    def __init__(self, logger: logging.Logger, verbose: bool = True):
        self.logger = logger
        self.verbose = verbose

    def __call__(self, message: str) -> None:
        if self.verbose:
            self.logger.info(message)
