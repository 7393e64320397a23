# shop_checkout/domain/order_status.py
from enum import Enum

from shop_checkout.domain.errors import InvalidState


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    COD_PENDING = "COD_PENDING"


#statusy które admin może ustawić ręcznie
ADMIN_SETTABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    }
)

TERMINAL_STATUSES = frozenset({OrderStatus.CANCELLED})


def parse_admin_status(value: str | OrderStatus) -> OrderStatus:
    """
    Normalizuje status podany przez admina (bez rozróżniania wielkości liter).
    Wszystko spoza ADMIN_SETTABLE_STATUSES kończy się InvalidState.
    """
    raw = value.value if isinstance(value, OrderStatus) else str(value)
    try:
        status = OrderStatus(raw.strip().upper())
    except ValueError:
        raise InvalidState(f"Invalid order status: {value!r}") from None

    if status not in ADMIN_SETTABLE_STATUSES:
        raise InvalidState(f"Order status {status.value} cannot be set manually")
    return status
