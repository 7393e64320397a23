# shop_checkout/services/order_service.py
import uuid
from typing import List

from shop_checkout.domain.errors import NotFound, Unauthorized
from shop_checkout.domain.order_status import OrderStatus, parse_admin_status
from shop_checkout.domain.schemas import Order
from shop_checkout.repos.order_repo import OrderRepo
from shop_checkout.services.observer import OrderObserver
from shop_checkout.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_order_id(order_id: uuid.UUID | str) -> uuid.UUID:
    if isinstance(order_id, uuid.UUID):
        return order_id
    try:
        return uuid.UUID(str(order_id))
    except ValueError:
        #źle sformatowane id nie może istnieć w bazie
        raise NotFound(f"Order {order_id} not found") from None


class OrderService:
    """
    Serwis odpowiedzialny za cykl życia zamówienia.
    Tylko on zmienia status po utworzeniu zamówienia.
    """

    def __init__(self, order_repo: OrderRepo, observer: OrderObserver | None = None):
        self.repo = order_repo
        self.observer = observer or OrderObserver()

    #query
    def get_by_id(
        self,
        order_id: uuid.UUID | str,
        requester_is_admin: bool = False,
        requester_owner_key: str | None = None,
    ) -> Order:
        """
        Pobranie zamówienia. Nie filtruje po właścicielu,
        o tym co pokazać decyduje wywołujący.
        """
        order = self.repo.get_order(_parse_order_id(order_id))
        if order is None:
            raise NotFound(f"Order {order_id} not found")
        return order

    def list_for_owner(self, owner_key: str) -> List[Order]:
        return self.repo.list_orders_by_owner(owner_key)

    #commands
    def cancel(self, requester_owner_key: str, order_id: uuid.UUID | str) -> Order:
        order = self.get_by_id(order_id)

        if order.owner_key != requester_owner_key:
            logger.info(f"{requester_owner_key} tried to cancel order {order.id} of {order.owner_key}")
            raise Unauthorized("Unauthorized access to cancel order")

        # tylko PENDING -> CANCELLED, warunek sprawdzany w samym UPDATE
        updated = self.repo.update_status(
            order.id,
            OrderStatus.CANCELLED,
            expected=OrderStatus.PENDING,
        )
        self.observer.status_changed(updated)
        return updated

    def set_status(self, order_id: uuid.UUID | str, status: str | OrderStatus) -> Order:
        """Ścieżka admina, bez sprawdzania właściciela."""
        new_status = parse_admin_status(status)
        updated = self.repo.update_status(_parse_order_id(order_id), new_status)
        self.observer.status_changed(updated)
        return updated

    def remove(self, order_id: uuid.UUID | str) -> None:
        """Twarde usunięcie zamówienia (admin), nieodwracalne."""
        self.repo.delete_order(_parse_order_id(order_id))
