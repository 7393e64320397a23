# shop_checkout/repos/order_repo.py
import uuid
from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from shop_checkout.data.models.order import OrderItemModel, OrderModel
from shop_checkout.domain.errors import InvalidState, NotFound, StorageFailure
from shop_checkout.domain.order_status import TERMINAL_STATUSES, OrderStatus
from shop_checkout.domain.schemas import Order, OrderItem
from shop_checkout.utils.logging import get_logger

logger = get_logger(__name__)


class OrderRepo:
    """
    Zamówienia w bazie relacyjnej (orders + order_items).

    Każda operacja zapisu to jedna transakcja: commit na końcu,
    rollback przy błędzie, żeby czytelnik nigdy nie zobaczył połowy zamówienia.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: Order, items: List[OrderItem]) -> Order:
        header = OrderModel(
            id=order.id,
            owner_key=order.owner_key,
            status=order.status.value,
            total=order.total,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        rows = [
            OrderItemModel(
                id=item.id,
                order_id=order.id,
                line_no=item.line_no,
                product_id=item.product_id,
                name=item.name,
                price=item.price,
                quantity=item.quantity,
                size=item.size,
                image=item.image,
                subtotal=item.subtotal,
            )
            for item in items
        ]

        try:
            #nagłówek najpierw, potem pozycje, wszystko w jednej transakcji
            self.db.add(header)
            self.db.flush()
            self.db.add_all(rows)
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order {order.id} rolled back: {e}")
            raise StorageFailure(f"Could not persist order {order.id}") from e

        logger.info(f"Order {order.id} stored with {len(rows)} items")
        return self.get_order(order.id)

    def get_order(self, order_id: uuid.UUID) -> Order | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        try:
            row = self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not load order {order_id}") from e

        return Order.model_validate(row) if row else None

    def list_orders_by_owner(self, owner_key: str) -> List[Order]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.owner_key == owner_key)
            .order_by(OrderModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not list orders for {owner_key}") from e

        return [Order.model_validate(r) for r in rows]

    def update_status(
        self,
        order_id: uuid.UUID,
        status: OrderStatus,
        expected: OrderStatus | None = None,
    ) -> Order:
        """
        Warunkowy update jednego wiersza.
        UPDATE orders SET status = :status WHERE id = :id AND status NOT IN (terminal) [AND status = :expected]
        0 rows affected -> NotFound albo InvalidState, nigdy ciche "ok".
        """
        stmt = update(OrderModel).where(
            OrderModel.id == order_id,
            OrderModel.status.not_in([s.value for s in TERMINAL_STATUSES]),
        )
        if expected is not None:
            stmt = stmt.where(OrderModel.status == expected.value)

        stmt = stmt.values(
            status=status.value,
            updated_at=datetime.now(timezone.utc),
        ).execution_options(synchronize_session=False)

        try:
            rowcount = self.db.execute(stmt).rowcount

            if rowcount == 0:
                self.db.rollback()
                current = self.db.execute(
                    select(OrderModel.status).where(OrderModel.id == order_id)
                ).scalar_one_or_none()
                if current is None:
                    raise NotFound(f"Order {order_id} not found")
                raise InvalidState(
                    f"Order {order_id} cannot move from {current} to {status.value}"
                )

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(f"Could not update status of order {order_id}") from e

        logger.info(f"Order {order_id} status -> {status.value}")
        return self.get_order(order_id)

    def delete_order(self, order_id: uuid.UUID) -> None:
        try:
            #najpierw pozycje, potem nagłówek
            self.db.execute(
                delete(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .execution_options(synchronize_session=False)
            )
            rowcount = self.db.execute(
                delete(OrderModel)
                .where(OrderModel.id == order_id)
                .execution_options(synchronize_session=False)
            ).rowcount

            if rowcount == 0:
                self.db.rollback()
                raise NotFound(f"Order {order_id} not found")

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(f"Could not delete order {order_id}") from e

        logger.info(f"Order {order_id} deleted")

    def owners_with_orders_since(self, since: datetime) -> Dict[str, datetime]:
        """Właściciel -> created_at jego najnowszego zamówienia (od `since`)."""
        stmt = (
            select(OrderModel.owner_key, func.max(OrderModel.created_at))
            .where(OrderModel.created_at >= since)
            .group_by(OrderModel.owner_key)
        )
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            raise StorageFailure("Could not list recent checkouts") from e

        return {owner: created_at for owner, created_at in rows}
