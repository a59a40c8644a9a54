"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime unit cannot be created."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class GambitEditError(Exception):
    """Raised when a gambit edit is not allowed in the current battle state."""
