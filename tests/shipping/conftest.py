import json

import pytest

CITIES = [
    {"CityID": 789, "CityName": "Lahore"},
    {"CityID": 475, "CityName": "Karachi"},
    {"CityID": 56, "CityName": "Islamabad"},
    {"CityID": 57, "CityName": "Rawalpindi"},
    {"CityID": 98, "CityName": "Faisalabad"},
    {"CityID": 701, "CityName": "Zahir Pir"},
    {"CityName": "Nowhere Without Id"},
]

STAGING_URL = "https://merchantapistaging.leopardscourier.com/api/"
API_KEY = "test-api-key"
API_PASSWORD = "test-api-password"


@pytest.fixture(scope="session")
def _shipping_domain(request):
    """Initialize the shipping domain once per session."""
    from shipping.domain import shipping

    shipping.init()
    return shipping


@pytest.fixture(autouse=True)
def run_around_tests(_shipping_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _shipping_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain
    from shipping.courier import reset_courier

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    reset_courier()
    ctx.pop()


@pytest.fixture()
def make_settings(tmp_path):
    """Build LcsSettings pointed at staging, isolated from the developer's environment."""
    from shipping.courier.settings import LcsSettings

    def _make(**overrides):
        values = {
            "base_url": STAGING_URL,
            "api_key": API_KEY,
            "api_password": API_PASSWORD,
            "cities_file": tmp_path / "missing_cities.json",
        }
        values.update(overrides)
        return LcsSettings(_env_file=None, **values)

    return _make


@pytest.fixture()
def settings(make_settings):
    return make_settings()


@pytest.fixture()
def fake_http():
    from shipping.courier.fake_adapter import FakeLcsHttp

    http = FakeLcsHttp()
    http.script("getAllCities", {"cities": CITIES})
    return http


@pytest.fixture()
def make_courier(fake_http, make_settings):
    """Build an LcsCourier around the fake adapter and install it as the singleton."""
    from shipping.courier import set_courier
    from shipping.courier.service import LcsCourier

    def _make(**overrides):
        courier = LcsCourier(make_settings(**overrides), fake_http)
        set_courier(courier)
        return courier

    return _make


@pytest.fixture()
def courier(make_courier):
    return make_courier()


@pytest.fixture()
def order_factory():
    """Register orders through the domain and return their ids."""
    from protean import current_domain
    from shipping.order.order import Order

    def _create(
        city="Lahore",
        mobile="0300-1234567",
        street_address="12 Main Boulevard, Gulberg",
        items=None,
        total_price=3000.0,
        **address_overrides,
    ):
        address = {
            "full_name": "Ayesha Khan",
            "city": city,
            "street_address": street_address,
            "mobile": mobile,
        }
        address.update(address_overrides)
        order = Order.create(
            order_ref="web-1001",
            total_price=total_price,
            shipping_address=address,
            items_data=items
            if items is not None
            else [{"product_id": "p-mouse", "title": "Wireless Mouse [Sale!]", "count": 2, "price": 1500.0}],
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    return _create


@pytest.fixture()
def lcs_cities():
    return json.loads(json.dumps(CITIES))
