"""
Domain exceptions for catalog services.

Exception Hierarchy:
    CatalogServiceError (base)
    ├── ServiceValidationError
    │   ├── EmptyNameError
    │   ├── InvalidPriceError
    │   ├── PriceTooLargeError
    │   └── PhotoTooLargeError
    ├── PersistenceError
    │   └── SaveFailedError
    ├── ServiceNotFoundError
    ├── CategoryNotFoundError
    └── InvalidReorderError
"""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class ServiceValidationError(CatalogServiceError):
    """Input rejected before anything was written."""
    pass


class EmptyNameError(ServiceValidationError):
    """Raised when a name is empty after trimming."""

    def __init__(self, message='Name cannot be empty'):
        super().__init__(message)


class InvalidPriceError(ServiceValidationError):
    """Raised when price is negative."""

    def __init__(self, message='Price must be a positive number'):
        super().__init__(message)


class PriceTooLargeError(ServiceValidationError):
    """Raised when price exceeds the accepted maximum."""

    def __init__(self, message='Price is too large'):
        super().__init__(message)


class PhotoTooLargeError(ServiceValidationError):
    """Raised when attached photo data exceeds the size cap."""

    def __init__(self, message='Photo is too large'):
        super().__init__(message)


class PersistenceError(CatalogServiceError):
    """Base exception for storage failures."""
    pass


class SaveFailedError(PersistenceError):
    """Raised when committing changes to the database fails."""

    def __init__(self, message):
        self.message = message
        super().__init__(f"Failed to save data: {message}")


class ServiceNotFoundError(CatalogServiceError):
    """Raised when service does not exist."""
    pass


class CategoryNotFoundError(CatalogServiceError):
    """Raised when category does not exist."""
    pass


class InvalidReorderError(CatalogServiceError):
    """Raised when reorder positions do not match the category list."""
    pass
