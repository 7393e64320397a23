# shop_checkout/tasks/cart_sweep.py
from datetime import datetime, timedelta, timezone

from shop_checkout.celery_worker import celery_app
from shop_checkout.data.database import SessionLocal
from shop_checkout.domain.errors import StorageFailure
from shop_checkout.repos.cart_repo import CartRepo
from shop_checkout.repos.order_repo import OrderRepo
from shop_checkout.utils.logging import get_logger
from shop_checkout.utils.settings import CART_SWEEP_LOOKBACK_SECONDS

logger = get_logger(__name__)


def sweep_checked_out_carts(order_repo: OrderRepo, cart_repo: CartRepo, since: datetime) -> int:
    """
    Usuwa koszyki, których nie udało się wyczyścić po checkout.

    Koszyk jest stary, jeśli nie był zmieniany od ostatniego zamówienia właściciela.
    Koszyk zmieniony później to już nowe zakupy, zostaje.
    """
    owners = order_repo.owners_with_orders_since(since)
    logger.info(f"Cart sweep: {len(owners)} owners checked out since {since.isoformat()}")

    removed = 0
    for owner_key, ordered_at in owners.items():
        if ordered_at.tzinfo is None:
            ordered_at = ordered_at.replace(tzinfo=timezone.utc)

        try:
            cart = cart_repo.get(owner_key)
            if cart is None or cart.updated_at > ordered_at:
                continue

            cart_repo.delete(owner_key)
            removed += 1
        except StorageFailure as e:
            logger.warning(f"Cart sweep skipped {owner_key}: {e}")

    logger.info(f"Cart sweep removed {removed} stale carts")
    return removed


@celery_app.task(name="shop_checkout.tasks.cart_sweep.sweep_carts_task")
def sweep_carts_task():
    logger.info("Cart sweep task started")

    since = datetime.now(timezone.utc) - timedelta(seconds=CART_SWEEP_LOOKBACK_SECONDS)
    db = SessionLocal()
    try:
        return sweep_checked_out_carts(OrderRepo(db), CartRepo(), since)
    finally:
        db.close()
