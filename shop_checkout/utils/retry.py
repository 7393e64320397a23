# shop_checkout/utils/retry.py
import redis
import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, stop_after_delay, wait_exponential

from shop_checkout.utils.settings import STORE_RETRY_ATTEMPTS, STORE_TIMEOUT_SECONDS


def _store_retry(errors, first_wait: float):
    """
    Ponawianie wywołań do magazynów zewnętrznych.

    Łączny czas ponawiania nie przekracza STORE_TIMEOUT_SECONDS,
    żeby wywołujący dostał StorageFailure w przewidywalnym czasie.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(STORE_RETRY_ATTEMPTS) | stop_after_delay(STORE_TIMEOUT_SECONDS),
        wait=wait_exponential(multiplier=first_wait, min=first_wait, max=STORE_TIMEOUT_SECONDS),
        retry=retry_if_exception_type(errors),
    )


def http_retry():
    return _store_retry(requests.RequestException, first_wait=0.3)


def redis_retry():
    return _store_retry(redis.RedisError, first_wait=0.2)
