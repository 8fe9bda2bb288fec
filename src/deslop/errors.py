"""Exceptions raised by deslop."""


class DeslopError(Exception):
    """Base class for deslop errors."""


class HistoryUnavailableError(DeslopError, RuntimeError):
    """Version-control history could not be read."""
