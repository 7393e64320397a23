# shop_checkout/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from shop_checkout.api.deps import (
    get_checkout_service,
    get_optional_owner_key,
    get_order_service,
    get_owner_key,
    is_admin,
    require_admin,
)
from shop_checkout.domain.schemas import Order, OrderStatusUpdate
from shop_checkout.services.checkout_service import CheckoutService
from shop_checkout.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout", response_model=Order, status_code=201)
def checkout(
    owner_key: str = Depends(get_owner_key),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Tworzy zamówienie z aktualnego koszyka.
    """
    return svc.checkout(owner_key)


@router.get("/me", response_model=List[Order])
def list_my_orders(
    owner_key: str = Depends(get_owner_key),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_for_owner(owner_key)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    admin: bool = Depends(is_admin),
    owner_key: str | None = Depends(get_optional_owner_key),
    svc: OrderService = Depends(get_order_service),
):
    """
    Pobiera szczegóły zamówienia. Nie-admin widzi tylko swoje,
    admin nie musi podawać tożsamości.
    """
    if not admin and owner_key is None:
        raise HTTPException(status_code=401, detail="Unable to identify session")

    order = svc.get_by_id(order_id, admin, owner_key)
    if not admin and order.owner_key != owner_key:
        raise HTTPException(status_code=403, detail="Unauthorized attempt to access this order")
    return order


@router.post("/{order_id}/cancel", response_model=Order)
def cancel_order(
    order_id: str,
    owner_key: str = Depends(get_owner_key),
    svc: OrderService = Depends(get_order_service),
):
    return svc.cancel(owner_key, order_id)


@router.patch("/{order_id}/status", response_model=Order, dependencies=[Depends(require_admin)])
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    return svc.set_status(order_id, payload.status)


@router.delete("/{order_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_order(
    order_id: str,
    svc: OrderService = Depends(get_order_service),
):
    svc.remove(order_id)
