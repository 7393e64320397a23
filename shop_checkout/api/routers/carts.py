# shop_checkout/api/routers/carts.py
from fastapi import APIRouter, Depends, Query

from shop_checkout.api.deps import get_cart_service, get_owner_key
from shop_checkout.domain.schemas import Cart, ItemIn
from shop_checkout.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=Cart)
def get_cart(
    owner_key: str = Depends(get_owner_key),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(owner_key)


@router.post("/items", response_model=Cart)
def add_item(
    payload: ItemIn,
    owner_key: str = Depends(get_owner_key),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_item(
        owner_key,
        product_id=payload.product_id,
        quantity=payload.quantity,
        size=payload.size,
    )


@router.delete("/items/{product_id}", response_model=Cart)
def remove_item(
    product_id: str,
    size: str | None = Query(None),
    owner_key: str = Depends(get_owner_key),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(owner_key, product_id, size)


@router.delete("", status_code=204)
def clear_cart(
    owner_key: str = Depends(get_owner_key),
    svc: CartService = Depends(get_cart_service),
):
    svc.clear(owner_key)
