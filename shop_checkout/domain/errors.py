# shop_checkout/domain/errors.py


class OrderError(Exception):
    """Base for every failure the checkout core reports to its callers."""


class NotFound(OrderError):
    """The order, cart or product does not exist."""


class Unauthorized(OrderError):
    """The requester does not own the order it tries to act on."""


class InvalidState(OrderError):
    """Empty or missing cart at checkout, unknown status value or a forbidden transition."""


class StorageFailure(OrderError):
    """Redis, the database or the catalog could not be reached or rejected the write."""
