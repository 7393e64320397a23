# shop_checkout/services/notification_service.py
from kombu.exceptions import OperationalError

from shop_checkout.celery_worker import celery_app
from shop_checkout.domain.schemas import Order
from shop_checkout.services.observer import OrderObserver
from shop_checkout.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService(OrderObserver):
    """
    Serwis do wysyłania powiadomień o zamówieniach.
    Używa Celery do asynchronicznego przetwarzania.
    """

    def checkout_completed(self, order: Order) -> None:
        self._send(order)

    def status_changed(self, order: Order) -> None:
        self._send(order)

    @staticmethod
    def _send(order: Order) -> None:
        try:
            send_order_notification_task.delay(order.owner_key, str(order.id), order.status.value)
        except OperationalError as e:
            #zamówienie już zapisane, brak powiadomienia nie może go cofnąć
            logger.warning(f"Notification for order {order.id} not queued: {e}")


@celery_app.task(name="shop_checkout.services.notification_service.send_order_notification_task")
def send_order_notification_task(owner_key: str, order_id: str, status: str):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] {owner_key}: order {order_id} is {status}")

    return {"owner_key": owner_key, "order_id": order_id, "status": status}
