# shop_checkout/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from shop_checkout.data.database import get_db
from shop_checkout.repos.cart_repo import CartRepo
from shop_checkout.repos.order_repo import OrderRepo
from shop_checkout.services.cart_service import CartService
from shop_checkout.services.checkout_service import CheckoutService
from shop_checkout.services.notification_service import NotificationService
from shop_checkout.services.observer import OrderObserver
from shop_checkout.services.order_service import OrderService
from shop_checkout.services.product_client import ProductClient


# Tożsamość ustawia gateway przed nami (JWT / sesja gościa), tu tylko ją czytamy
def get_optional_owner_key(
    x_user_id: str | None = Header(None),
    x_session_id: str | None = Header(None),
) -> str | None:
    if x_user_id:
        return f"user:{x_user_id}"
    if x_session_id:
        return f"guest:{x_session_id}"
    return None


def get_owner_key(owner_key: str | None = Depends(get_optional_owner_key)) -> str:
    if owner_key:
        return owner_key
    raise HTTPException(status_code=401, detail="Unable to identify session")


def is_admin(x_is_admin: str | None = Header(None)) -> bool:
    return (x_is_admin or "").strip().lower() in ("1", "true", "yes")


def require_admin(admin: bool = Depends(is_admin)) -> None:
    if not admin:
        raise HTTPException(status_code=403, detail="Admin access required")


#jedna pula połączeń redis na proces
@lru_cache
def get_cart_repo() -> CartRepo:
    return CartRepo()


def get_product_client() -> ProductClient:
    return ProductClient()


def get_observer() -> OrderObserver:
    return NotificationService()


def get_cart_service(
    cart_repo: CartRepo = Depends(get_cart_repo),
    product_client: ProductClient = Depends(get_product_client),
) -> CartService:
    return CartService(cart_repo, product_client)


def get_checkout_service(
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
    observer: OrderObserver = Depends(get_observer),
) -> CheckoutService:
    return CheckoutService(cart_repo, OrderRepo(db), observer)


def get_order_service(
    db: Session = Depends(get_db),
    observer: OrderObserver = Depends(get_observer),
) -> OrderService:
    return OrderService(OrderRepo(db), observer)
