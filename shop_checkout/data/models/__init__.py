#import wszystkich modeli żeby SQLAlchemy je zarejestrował w base metadata

from shop_checkout.data.models.order import OrderItemModel, OrderModel

__all__ = ["OrderModel", "OrderItemModel"]
