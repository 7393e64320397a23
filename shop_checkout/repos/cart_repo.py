# shop_checkout/repos/cart_repo.py
from datetime import datetime, timezone

import redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from shop_checkout.domain.errors import StorageFailure
from shop_checkout.domain.schemas import Cart
from shop_checkout.utils.logging import get_logger
from shop_checkout.utils.retry import redis_retry
from shop_checkout.utils.settings import CART_TTL_SECONDS, REDIS_URL, STORE_TIMEOUT_SECONDS

logger = get_logger(__name__)


def cart_key(owner_key: str) -> str:
    #user:42 -> user:42:cart, guest:abc -> guest:abc:cart
    return f"{owner_key}:cart"


class CartRepo:
    """
    Koszyk jako jeden dokument JSON w Redis.
    -brak transakcji i CAS, tylko get / set / delete całego dokumentu
    -przy równoległych zapisach wygrywa ostatni
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        url: str | None = None,
        ttl: int = CART_TTL_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
            socket_timeout=STORE_TIMEOUT_SECONDS,
            socket_connect_timeout=STORE_TIMEOUT_SECONDS,
        )
        self.ttl = ttl

    def get(self, owner_key: str) -> Cart | None:
        key = cart_key(owner_key)
        try:
            raw = self._get(key)
        except RedisError as e:
            logger.error(f"Failed to read cart {key}: {e}")
            raise StorageFailure(f"Cart store unavailable while reading {key}") from e

        if raw is None:
            return None

        try:
            return Cart.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Cart {key} holds an unreadable document: {e}")
            raise StorageFailure(f"Cart {key} is corrupted") from e

    def set(self, owner_key: str, cart: Cart) -> None:
        key = cart_key(owner_key)
        cart.updated_at = datetime.now(timezone.utc)
        try:
            self._set(key, cart.model_dump_json())
        except RedisError as e:
            logger.error(f"Failed to write cart {key}: {e}")
            raise StorageFailure(f"Cart store unavailable while writing {key}") from e

    def delete(self, owner_key: str) -> None:
        key = cart_key(owner_key)
        try:
            self._delete(key)
        except RedisError as e:
            raise StorageFailure(f"Cart store unavailable while deleting {key}") from e

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def _set(self, key: str, payload: str) -> None:
        #SET key payload [EX ttl], ttl=0 -> bez wygasania
        self.redis.set(name=key, value=payload, ex=self.ttl or None)

    @redis_retry()
    def _delete(self, key: str) -> None:
        self.redis.delete(key)
