"""Errors raised by the service layer."""


class RetailError(Exception):
    """Base class for service-layer errors."""
    pass


class ValidationError(RetailError):
    """Exception raised when input is rejected before any mutation."""
    pass


class NotFoundError(RetailError):
    """Exception raised when a referenced record doesn't exist."""
    pass


class ProductNotFoundError(NotFoundError):
    """Exception raised when the requested product doesn't exist."""
    pass


class CategoryNotFoundError(NotFoundError):
    pass


class CustomerNotFoundError(NotFoundError):
    pass


class SaleNotFoundError(NotFoundError):
    pass


class ConsistencyError(RetailError):
    """Exception raised when a write would break a data invariant."""
    pass


class InsufficientStockError(ConsistencyError):
    """Exception raised when there's not enough stock to fulfill a checkout."""
    pass


class ProductInUseError(ConsistencyError):
    """Exception raised when deleting a product or category that is still referenced."""
    pass


class PersistenceError(RetailError):
    """Exception raised when the storage engine fails."""
    pass
