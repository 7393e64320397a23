# shop_checkout/services/cart_service.py
from decimal import ROUND_HALF_UP, Decimal

from shop_checkout.domain.errors import InvalidState, NotFound
from shop_checkout.domain.schemas import CENT, Cart, CartItem
from shop_checkout.repos.cart_repo import CartRepo
from shop_checkout.services.product_client import ProductClient
from shop_checkout.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y koszyka: get (query), add / remove / clear (commands).

    Każda komenda to read-modify-write całego dokumentu, bez blokad.
    Dwa równoległe add_item tego samego właściciela mogą zgubić jedną zmianę
    (ostatni zapis wygrywa).
    """

    def __init__(self, cart_repo: CartRepo, product_client: ProductClient):
        self.repo = cart_repo
        self.product_client = product_client

    #query - odczyt
    def get_cart(self, owner_key: str) -> Cart:
        cart = self.repo.get(owner_key)
        if cart is None:
            #pusty koszyk, nie zapisujemy go
            return Cart(owner_key=owner_key)
        return cart

    #commands
    def add_item(
        self,
        owner_key: str,
        product_id: str,
        quantity: int,
        size: str | None = None,
    ) -> Cart:
        if quantity < 1:
            raise InvalidState("Quantity must be at least 1")

        # snapshot ceny / nazwy z katalogu w momencie dodania
        pdata = self.product_client.fetch_product(product_id)
        # ceny w koszyku zawsze z dokładnością do grosza, tak jak kolumny zamówienia
        price = Decimal(str(pdata["price"])).quantize(CENT, rounding=ROUND_HALF_UP)
        name = pdata.get("title") or pdata.get("name") or ""
        images = pdata.get("images") or []
        image = images[0] if images else pdata.get("image")

        cart = self.repo.get(owner_key) or Cart(owner_key=owner_key)

        # deduplikacja po (produkt, rozmiar) odbywa się tutaj, nie przy checkout
        existing = next(
            (i for i in cart.items if i.product_id == product_id and i.size == size),
            None,
        )
        if existing:
            logger.info(
                f"Product {product_id} ({size}) already in cart {owner_key}, "
                f"quantity {existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            cart.items.append(
                CartItem(
                    product_id=product_id,
                    name=name,
                    price=price,
                    quantity=quantity,
                    size=size,
                    image=image,
                )
            )

        self.repo.set(owner_key, cart)
        return cart

    def remove_item(self, owner_key: str, product_id: str, size: str | None = None) -> Cart:
        cart = self.repo.get(owner_key)
        if cart is None:
            raise NotFound(f"Cart for {owner_key} not found")

        #bez rozmiaru usuwamy wszystkie warianty produktu
        cart.items = [
            i
            for i in cart.items
            if i.product_id != product_id or (size is not None and i.size != size)
        ]

        self.repo.set(owner_key, cart)
        logger.info(f"Product {product_id} removed from cart {owner_key}")
        return cart

    def clear(self, owner_key: str) -> None:
        self.repo.delete(owner_key)
        logger.info(f"Cart {owner_key} cleared")
