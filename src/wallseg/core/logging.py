"""Logging setup for the wall segmentation pipeline."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure pipeline logging with a consistent format.

    Host applications that already configure the root logger can skip this;
    every module logs through ``logging.getLogger(__name__)``.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
