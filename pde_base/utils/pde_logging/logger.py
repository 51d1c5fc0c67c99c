#!/usr/bin/env python3
"""
Logging infrastructure for pde_base.

Every module obtains its logger with ``get_logger(__name__)``. Loggers are
created once, write to a single console stream and do not propagate to the
root logger. ``configure_logging`` changes level, colors and location info
for every logger already handed out. The ``log_*`` helpers at the bottom
summarize the metadata produced while parsing a PDE system.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import TYPE_CHECKING, Any, ClassVar, TextIO

import colorlog

if TYPE_CHECKING:
    from pde_base.boundary.boundary_map import BoundaryMap
    from pde_base.core.variable_map import VariableMap

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


class PDEFormatter(logging.Formatter):
    """Console formatter; colors come from colorlog, location is ``[file:line]``."""

    def __init__(self, use_colors: bool = False, include_location: bool = False):
        self.use_colors = use_colors
        self.include_location = include_location

        fmt = LOG_FORMAT + (" [%(filename)s:%(lineno)d]" if include_location else "")
        self.colored_formatter = (
            colorlog.ColoredFormatter("%(log_color)s" + fmt, datefmt=DATE_FORMAT, log_colors=LOG_COLORS)
            if use_colors
            else None
        )
        super().__init__(fmt, datefmt=DATE_FORMAT)

    def format(self, record):
        if self.colored_formatter is not None:
            return self.colored_formatter.format(record)
        return super().format(record)


class PDELogger:
    """
    Process-wide registry of pde_base loggers.

    A single instance holds the active settings; ``get_logger`` attaches one
    console handler per logger under a lock, so concurrent first calls never
    duplicate handlers.
    """

    _instance = None
    _lock: ClassVar[threading.Lock] = threading.Lock()
    _loggers: ClassVar[dict[str, logging.Logger]] = {}
    _log_level = logging.WARNING
    _use_colors = True
    _include_location = False
    _stream: TextIO | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def configure(
        cls,
        level: str | int = "INFO",
        use_colors: bool = True,
        include_location: bool = False,
        quiet_sympy: bool = True,
        stream: TextIO | None = None,
    ):
        """
        Apply new settings to every pde_base logger.

        Args:
            level: Level name or number
            use_colors: Colored console output
            include_location: Append ``[file:line]`` to every record
            quiet_sympy: Keep SymPy's own loggers at WARNING
            stream: Console stream (default: stdout at handler creation time)
        """
        with cls._lock:
            cls._log_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
            cls._use_colors = use_colors
            cls._include_location = include_location
            cls._stream = stream
            if quiet_sympy:
                logging.getLogger("sympy").setLevel(logging.WARNING)
            for logger in cls._loggers.values():
                cls._attach_handler(logger)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        logger = cls._loggers.get(name)
        if logger is not None:
            return logger
        with cls._lock:
            if name not in cls._loggers:
                logger = logging.getLogger(name)
                cls._attach_handler(logger)
                cls._loggers[name] = logger
            return cls._loggers[name]

    @classmethod
    def _attach_handler(cls, logger: logging.Logger):
        handler = logging.StreamHandler(cls._stream or sys.stdout)
        handler.setFormatter(PDEFormatter(use_colors=cls._use_colors, include_location=cls._include_location))
        handler.setLevel(cls._log_level)

        logger.handlers.clear()
        logger.addHandler(handler)
        logger.setLevel(cls._log_level)
        logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Logger for ``name``; without a name, for the calling module.
    """
    if name is None:
        import inspect

        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        name = caller.f_globals.get("__name__", "pde_base") if caller is not None else "pde_base"
    return PDELogger.get_logger(name)


def configure_logging(**kwargs):
    """Keyword front end for ``PDELogger.configure``."""
    PDELogger.configure(**kwargs)


# =============================================================================
# Parse summaries
# =============================================================================

def log_variable_map_summary(logger: logging.Logger, variable_map: VariableMap):
    """Log the unknowns, coordinates and domains of a variable map."""
    unknowns = ", ".join(str(u) for u in variable_map.depvars())
    spatial = ", ".join(str(x) for x in variable_map.indvars())
    logger.info(f"Variable map: {len(variable_map.depvars())} unknown(s) [{unknowns}]")
    logger.info(f"  spatial coordinates: [{spatial}], time: {variable_map.time}")
    for x, (lower, upper) in variable_map.intervals.items():
        logger.debug(f"  domain {x}: ({lower}, {upper})")


def log_boundary_summary(logger: logging.Logger, boundary_map: BoundaryMap):
    """Log the number of boundaries filed per (function, coordinate) pair."""
    total = 0
    for u, per_coordinate in boundary_map.items():
        for x, boundaries in per_coordinate.items():
            if boundaries:
                kinds = ", ".join(b.kind.value for b in boundaries)
                logger.debug(f"  {u} / {x}: {len(boundaries)} condition(s) [{kinds}]")
                total += len(boundaries)
    logger.info(f"Boundary map: {total} condition(s) filed")


def log_classification_error(logger: logging.Logger, equation: Any, reason: str, suggestion: str | None = None):
    """Log a boundary condition that could not be classified."""
    logger.error(f"Unclassifiable boundary condition {equation}: {reason}")
    if suggestion:
        logger.info(f"Suggestion: {suggestion}")


def log_validation_error(logger: logging.Logger, component: str, error_msg: str, suggestion: str | None = None):
    """Log validation errors with suggestions."""
    logger.error(f"Validation error in {component}: {error_msg}")
    if suggestion:
        logger.info(f"Suggestion: {suggestion}")
