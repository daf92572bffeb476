from __future__ import annotations

import logging


def configure_covevo_logging(*, level: int = logging.INFO) -> None:
    """
    Configure a minimal console logger for covevo.

    Notes:
        - Opt-in only: library code never calls logging.basicConfig().
        - The handler is only attached if neither the root logger nor the "covevo" logger has handlers.
    """
    root = logging.getLogger()
    covevo_logger = logging.getLogger("covevo")

    # Leave user-configured logging alone.
    if root.handlers or covevo_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    covevo_logger.addHandler(handler)
    covevo_logger.setLevel(level)
    covevo_logger.propagate = False


__all__ = ["configure_covevo_logging"]
