"""LCS courier integration — pluggable HTTP adapter behind one service object."""

import os

_courier_instance = None


def get_courier():
    """Return the configured LCS courier service (singleton).

    Talks to LCS over ``requests`` by default. Set ``COURIER_ADAPTER=fake``
    to use the scripted in-process adapter instead.
    """
    global _courier_instance
    if _courier_instance is None:
        from shipping.courier.service import LcsCourier
        from shipping.courier.settings import get_settings

        settings = get_settings()
        adapter = os.environ.get("COURIER_ADAPTER", "lcs")
        if adapter == "lcs":
            from shipping.courier.http import LcsHttp

            http = LcsHttp(timeout=settings.request_timeout)
        elif adapter == "fake":
            from shipping.courier.fake_adapter import FakeLcsHttp

            http = FakeLcsHttp()
        else:
            raise ValueError(f"Unknown courier adapter: {adapter}")
        _courier_instance = LcsCourier(settings, http)
    return _courier_instance


def set_courier(courier) -> None:
    """Install a specific courier service (e.g. one built around a fake adapter)."""
    global _courier_instance
    _courier_instance = courier


def reset_courier():
    """Reset the courier singleton (useful for testing)."""
    global _courier_instance
    _courier_instance = None
