# shop_checkout/services/checkout_service.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from shop_checkout.domain.errors import InvalidState, StorageFailure
from shop_checkout.domain.order_status import OrderStatus
from shop_checkout.domain.schemas import Order, OrderItem
from shop_checkout.repos.cart_repo import CartRepo
from shop_checkout.repos.order_repo import OrderRepo
from shop_checkout.services.observer import OrderObserver
from shop_checkout.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamiana koszyka (Redis) na zamówienie (baza relacyjna).

    Nie da się tego zrobić atomowo w dwóch magazynach, więc:
    -zapis zamówienia jest krokiem rozstrzygającym (jedna transakcja)
    -usunięcie koszyka to sprzątanie best-effort, resztę załatwia tasks.cart_sweep
    """

    def __init__(
        self,
        cart_repo: CartRepo,
        order_repo: OrderRepo,
        observer: OrderObserver | None = None,
    ):
        self.cart_repo = cart_repo
        self.order_repo = order_repo
        self.observer = observer or OrderObserver()

    def checkout(self, owner_key: str) -> Order:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Pobiera koszyk, pusty lub brak -> InvalidState
        2. Liczy subtotal każdej pozycji i total
        3. Zapisuje nagłówek + pozycje w jednej transakcji
        4. Usuwa koszyk (błąd tylko logujemy)

        Pozycje koszyka bierzemy 1:1, duplikaty nie są tu scalane.
        Dwa równoległe checkouty tego samego koszyka utworzą dwa zamówienia.
        """
        cart = self.cart_repo.get(owner_key)

        if cart is None or not cart.items:
            logger.info(f"Checkout rejected for {owner_key}: no valid cart")
            self.observer.checkout_rejected(owner_key, "no valid cart")
            raise InvalidState("No valid cart to check out")

        order_id = uuid.uuid4()
        now = datetime.now(timezone.utc)

        items = []
        total = Decimal("0.00")
        for line_no, ci in enumerate(cart.items):
            subtotal = ci.price * ci.quantity
            items.append(
                OrderItem(
                    id=uuid.uuid4(),
                    order_id=order_id,
                    line_no=line_no,
                    product_id=ci.product_id,
                    name=ci.name,
                    price=ci.price,
                    quantity=ci.quantity,
                    size=ci.size,
                    image=ci.image,
                    subtotal=subtotal,
                )
            )
            total += subtotal

        order = Order(
            id=order_id,
            owner_key=owner_key,
            total=total,
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
            items=items,
        )

        # StorageFailure leci dalej, koszyk zostaje nietknięty
        created = self.order_repo.create_order(order, items)
        logger.info(f"Order {created.id} created for {owner_key}, total {created.total}")

        try:
            self.cart_repo.delete(owner_key)
        except StorageFailure as e:
            logger.warning(
                f"Order {created.id} created but cart of {owner_key} was not cleared: {e}"
            )
            self.observer.cart_clear_failed(owner_key, e)

        self.observer.checkout_completed(created)
        return created
