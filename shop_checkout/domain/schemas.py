# shop_checkout/domain/schemas.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, computed_field

from shop_checkout.domain.order_status import OrderStatus


def _utc(value: datetime) -> datetime:
    #sqlite zwraca naive datetime, traktujemy je jako UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_utc)]

CENT = Decimal("0.01")


class CartItem(BaseModel):
    """Pozycja koszyka. Cena to snapshot z momentu dodania."""

    product_id: str = Field(..., min_length=1)
    name: str = ""
    price: Decimal = Field(..., ge=0, decimal_places=2)
    quantity: int = Field(..., ge=1)
    size: str | None = None
    image: str | None = None

    # liczone zawsze od nowa, wartość z wejścia jest ignorowana
    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Cart(BaseModel):
    """Dokument koszyka trzymany w Redis pod kluczem właściciela."""

    owner_key: str
    items: List[CartItem] = Field(default_factory=list)
    updated_at: UtcDatetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field
    @property
    def total(self) -> Decimal:
        return sum((i.subtotal for i in self.items), Decimal("0.00"))


class OrderItem(BaseModel):
    id: uuid.UUID
    order_id: uuid.UUID
    line_no: int
    product_id: str
    name: str
    price: Decimal
    quantity: int
    size: str | None = None
    image: str | None = None
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    """
    Zamówienie. Po utworzeniu zmienia się tylko status i updated_at,
    total nigdy nie jest przeliczany.
    """

    id: uuid.UUID
    owner_key: str
    total: Decimal
    status: OrderStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime
    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu w katalogu")
    quantity: int = Field(..., gt=0, description="Ilosc produktu (musi byc > 0)")
    size: str | None = Field(None, max_length=32, description="Rozmiar / wariant")


class OrderStatusUpdate(BaseModel):
    """
    Jedyne pole zamówienia które można zmienić z zewnątrz.
    Inne pola w payloadzie są odrzucane.
    """

    status: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")
