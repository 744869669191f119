# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Logging helpers for the casemap CLI."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.WARNING, force: bool = False) -> None:
	"""
	Initialise the root logger with a terse stderr format.

	Library modules only create loggers; the CLI decides the level (`-v` means
	DEBUG). Pass `force=True` to reconfigure from tests.
	"""
	logging.basicConfig(
		level=level,
		format="%(levelname)s [%(name)s] %(message)s",
		force=force,
	)


__all__ = ["configure_logging"]
