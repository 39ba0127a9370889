"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created."""


class PersistenceError(Exception):
    """Raised by a persistence gateway when a write or load fails."""
