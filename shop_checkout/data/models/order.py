# shop_checkout/data/models/order.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from shop_checkout.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    #id generowane przy checkout (uuid4), nie przez bazę
    id = Column(Uuid, primary_key=True)
    owner_key = Column(String(255), nullable=False, index=True)

    status = Column(String(32), nullable=False, default="PENDING")
    total = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        order_by="OrderItemModel.line_no",
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True)
    order_id = Column(Uuid, ForeignKey("orders.id"), nullable=False, index=True)
    line_no = Column(Integer, nullable=False)

    product_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    size = Column(String(32), nullable=True)
    image = Column(String(1024), nullable=True)
    subtotal = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
