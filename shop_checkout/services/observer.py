# shop_checkout/services/observer.py
from shop_checkout.domain.errors import StorageFailure
from shop_checkout.domain.schemas import Order


class OrderObserver:
    """
    Hooki wywoływane przez CheckoutService i OrderService.
    Metryki / powiadomienia wstrzykujemy przez konstruktor zamiast globalnych liczników.
    Domyślna implementacja nic nie robi.
    """

    def checkout_completed(self, order: Order) -> None:
        pass

    def checkout_rejected(self, owner_key: str, reason: str) -> None:
        pass

    def cart_clear_failed(self, owner_key: str, error: StorageFailure) -> None:
        pass

    def status_changed(self, order: Order) -> None:
        pass
