"""Shared BDD fixtures and step definitions for courier booking."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from shipping.order.order import Order

PRODUCTION_URL = "https://merchantapi.leopardscourier.com/api/"


@pytest.fixture()
def courier_settings():
    """Overrides applied when the courier is built on first push."""
    return {}


@pytest.fixture()
def outcome():
    """Container for push results and batch errors."""
    return {"results": [], "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("LCS staging credentials are configured")
def staging_credentials(courier_settings):
    courier_settings.clear()


@given("city auto-mapping is disabled")
def automap_disabled(courier_settings):
    courier_settings["city_automap"] = False


@given("the courier points at production")
def production_host(courier_settings):
    courier_settings["base_url"] = PRODUCTION_URL


@given(parsers.cfparse('an order shipping to "{city}"'), target_fixture="order_id")
def order_shipping_to(order_factory, city):
    return order_factory(city=city)


@given(parsers.cfparse('LCS accepts bookings with consignment "{cn}"'))
def lcs_accepts(fake_http, cn):
    fake_http.script("bookPacket", {"status": 1, "track_number": cn})


@given("LCS rejects the first booking request")
def lcs_rejects_first(fake_http):
    fake_http.script(
        "bookPacket",
        {"status": 0, "error": "Consignee name is required"},
        {"status": 1, "track_number": "LE7001"},
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the booking succeeds with consignment "{cn}"'))
def booking_succeeds(outcome, cn):
    [result] = outcome["results"]
    assert result.ok is True
    assert result.consignment_no == cn


@then(parsers.cfparse('the booking fails with code "{code}"'))
def booking_fails(outcome, code):
    result = outcome["results"][-1]
    assert result.ok is False
    assert result.code == code


@then(parsers.cfparse("LCS received {count:d} booking request"))
@then(parsers.cfparse("LCS received {count:d} booking requests"))
def booking_requests(fake_http, count):
    assert len(fake_http.calls_to("bookPacket")) == count


@then("the order is marked as booked")
def order_booked(order_id):
    assert current_domain.repository_for(Order).get(order_id).is_booked is True
