"""Exceptions raised while loading content tables."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a content file is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when a persona, enemy or room entry is malformed."""


class DataReferenceError(DataError):
    """Raised when a room roster names an enemy that does not exist."""
