"""Parcelbridge Load Testing — Locust entry point.

Usage:
    # Web UI:
    locust -f loadtests/locustfile.py

    # Headless (CI mode):
    locust -f loadtests/locustfile.py ShippingUser --headless \
           -u 20 -r 2 -t 120s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.shipping import ShippingUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log the courier configuration of the target before load begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    try:
        health = requests.get(f"{environment.host}/health", timeout=5).json()
        print(f"[LOADTEST] Courier: {health.get('courier')}")
    except (requests.RequestException, ValueError) as e:
        print(f"[LOADTEST] Could not read /health: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(**_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
