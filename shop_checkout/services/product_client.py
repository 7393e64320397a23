# shop_checkout/services/product_client.py
import requests
from requests import RequestException

from shop_checkout.domain.errors import NotFound, StorageFailure
from shop_checkout.utils.logging import get_logger
from shop_checkout.utils.retry import http_retry
from shop_checkout.utils.settings import PRODUCT_SERVICE_URL, STORE_TIMEOUT_SECONDS

logger = get_logger(__name__)


class ProductClient:
    def __init__(self, base_url: str | None = None, timeout: float = STORE_TIMEOUT_SECONDS):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    def fetch_product(self, product_id: str) -> dict:
        try:
            pdata = self._get(product_id)
        except RequestException as e:
            logger.error(f"Catalog lookup for product {product_id} failed: {e}")
            raise StorageFailure("Product catalog unavailable") from e

        if pdata is None:
            raise NotFound(f"Product {product_id} not found")
        return pdata

    @http_retry()
    def _get(self, product_id: str) -> dict | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        #404 to odpowiedź, nie błąd sieci, nie ponawiamy
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()
