"""
HTTP client for the provision store API.

Initial loads (products, bills, dashboard stats) are retried a few times
with a fixed delay before giving up. Mutations are sent once; a failure is
logged and re-raised to the caller.
"""
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests

from storeclient.exceptions import APIError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:8000/api'
MAX_RETRIES = 3
RETRY_DELAY = 1.5


@dataclass
class StoreSnapshot:
    """Everything the UI shows after a load; failed fetches leave a notification"""
    products: List[Dict] = field(default_factory=list)
    bills: List[Dict] = field(default_factory=list)
    stats: Optional[Dict] = None
    notifications: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.notifications


class StoreClient:
    """One method per API endpoint"""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 max_retries: int = MAX_RETRIES, retry_delay: float = RETRY_DELAY, timeout: float = 10):
        self.base_url = (base_url or os.getenv('STORE_API_URL', DEFAULT_BASE_URL)).rstrip('/')
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, **kwargs):
        url = f"{self.base_url}{endpoint}"
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not response.ok:
            raise APIError.from_response(response)
        return response.json()

    def _fetch_with_retry(self, endpoint: str, params: Optional[Dict] = None):
        """GET with up to max_retries retries after the first attempt"""
        attempt = 0
        while True:
            try:
                return self._request('GET', endpoint, params=params)
            except (APIError, requests.RequestException) as exc:
                if attempt >= self.max_retries:
                    logger.error("GET %s failed after %s retries: %s", endpoint, attempt, exc)
                    raise
                attempt += 1
                logger.warning("GET %s failed (%s), retry %s/%s in %ss",
                               endpoint, exc, attempt, self.max_retries, self.retry_delay)
                time.sleep(self.retry_delay)

    def _mutate(self, method: str, endpoint: str, payload: Optional[Dict] = None):
        try:
            return self._request(method, endpoint, json=payload)
        except (APIError, requests.RequestException) as exc:
            logger.error("%s %s failed: %s", method, endpoint, exc)
            raise

    # Products

    def list_products(self, **filters) -> List[Dict]:
        """Filters: search, category, lowStock"""
        return self._fetch_with_retry('/products', params=filters or None)

    def get_product(self, product_id) -> Dict:
        return self._request('GET', f'/products/{product_id}')

    def create_product(self, data: Dict) -> Dict:
        product = self._mutate('POST', '/products', data)
        logger.info("Product %s created", product.get('id'))
        return product

    def update_product(self, product_id, data: Dict) -> Dict:
        return self._mutate('PUT', f'/products/{product_id}', data)

    def delete_product(self, product_id) -> Dict:
        return self._mutate('DELETE', f'/products/{product_id}')

    # Bills

    def list_bills(self, **filters) -> List[Dict]:
        """Filters: search, paymentStatus, paymentMethod, customerPhone"""
        return self._fetch_with_retry('/bills', params=filters or None)

    def get_bill(self, bill_id) -> Dict:
        return self._request('GET', f'/bills/{bill_id}')

    def create_bill(self, data: Dict) -> Dict:
        bill = self._mutate('POST', '/bills', data)
        logger.info("Bill %s created, total %s", bill.get('billNumber'), bill.get('totalAmount'))
        return bill

    def update_bill(self, bill_id, data: Dict) -> Dict:
        return self._mutate('PUT', f'/bills/{bill_id}', data)

    def delete_bill(self, bill_id) -> Dict:
        return self._mutate('DELETE', f'/bills/{bill_id}')

    # Dashboard

    def dashboard_stats(self) -> Dict:
        return self._fetch_with_retry('/dashboard/stats')

    def load(self) -> StoreSnapshot:
        """Fetch products, bills and stats; failures become notifications"""
        snapshot = StoreSnapshot()
        loaders = [
            ('products', self.list_products),
            ('bills', self.list_bills),
            ('stats', self.dashboard_stats),
        ]
        for name, loader in loaders:
            try:
                setattr(snapshot, name, loader())
            except (APIError, requests.RequestException) as exc:
                snapshot.notifications.append(f"Error fetching {name}: {exc}")
        return snapshot
