"""
Best-effort notification to the downstream service when a document is ready.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import httpx
from django.conf import settings

from .errors import NotificationFailure

logger = logging.getLogger(__name__)

_executor = None


def get_executor():
    """Return the shared background executor, creating it on first use."""
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=getattr(settings, "NOTIFICATIONS_MAX_WORKERS", 4),
            thread_name_prefix="sales-notify",
        )
    return _executor


def download_link(order_id):
    return f"{settings.SALES_API_BASE_URL}/orders/{order_id}"


class NotificationDispatcher:
    """
    Tells the notification service that an order document can be downloaded.

    One attempt per call, no retries. Failures are logged and discarded so
    they never reach the caller.
    """

    def __init__(self, executor=None, transport=None, service_url=None, timeout=None):
        self.executor = executor
        self.transport = transport
        self.service_url = service_url or (
            f"{settings.NOTIFICATIONS_SERVICE_URL}{settings.NOTIFICATIONS_PATH}"
        )
        self.timeout = timeout if timeout is not None else settings.NOTIFICATIONS_TIMEOUT

    def notify(self, order_id, client_id):
        """
        Schedule the notification on the background executor.

        Returns:
            Future resolving to True when delivered, False otherwise
        """
        executor = self.executor or get_executor()
        return executor.submit(self.send, order_id, client_id)

    def send(self, order_id, client_id):
        """Deliver the notification synchronously; never raises."""
        try:
            self._post(order_id, client_id)
        except NotificationFailure as e:
            logger.error(f"Notification for order {order_id} not delivered: {e} {e.details}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error notifying order {order_id}: {e}", exc_info=True)
            return False

        logger.info(f"Notification sent for order {order_id}")
        return True

    def _post(self, order_id, client_id):
        payload = {
            "order_id": str(order_id),
            "client_id": client_id,
            "download_link": download_link(order_id),
            "sent_at": datetime.now(timezone.utc).isoformat(),
        }

        logger.info(f"Sending notification to {self.service_url} for order: {order_id}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.service_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationFailure(
                f"Notification service answered {e.response.status_code}", cause=e
            ) from e
        except httpx.HTTPError as e:
            raise NotificationFailure("Notification service unreachable", cause=e) from e
