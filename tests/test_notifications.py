"""Tests for the downstream notification dispatcher."""

import json
import logging

from sales.errors import DependencyError, NotificationFailure
from sales.notifications import download_link


def test_notification_payload(notification_target):
    dispatcher = notification_target.dispatcher()

    assert dispatcher.send("order-1", "C1") is True

    request = notification_target.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://notifications.test/notify-sale"
    body = json.loads(request.content)
    assert body["order_id"] == "order-1"
    assert body["client_id"] == "C1"
    assert body["download_link"] == "http://sales.test/orders/order-1"
    assert "sent_at" in body


def test_error_status_is_logged_and_swallowed(notification_target, caplog):
    notification_target.status_code = 500
    dispatcher = notification_target.dispatcher()

    with caplog.at_level(logging.ERROR, logger="sales.notifications"):
        assert dispatcher.send("order-1", "C1") is False

    assert "order-1" in caplog.text
    assert len(notification_target.requests) == 1


def test_transport_failure_is_swallowed(notification_target):
    notification_target.fail_transport = True
    dispatcher = notification_target.dispatcher()

    assert dispatcher.send("order-1", "C1") is False


def test_notify_runs_on_executor(notification_target):
    future = notification_target.dispatcher().notify("order-2", "C9")

    assert future.result() is True
    assert json.loads(notification_target.requests[0].content)["client_id"] == "C9"


def test_single_attempt_per_call(notification_target):
    notification_target.status_code = 503
    notification_target.dispatcher().notify("order-3", "C1").result()
    assert len(notification_target.requests) == 1


def test_download_link_uses_base_url():
    assert download_link("abc") == "http://sales.test/orders/abc"


def test_notification_failure_is_dependency_error():
    assert issubclass(NotificationFailure, DependencyError)
