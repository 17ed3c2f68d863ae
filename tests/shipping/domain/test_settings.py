"""Tests for LCS settings parsing and derived values."""

import json

import pytest
from shipping.courier.settings import BUNDLED_CITIES_FILE, LcsSettings


@pytest.fixture()
def lcs_env(monkeypatch):
    for name in ("LCS_BASE_URL", "LCS_API_KEY", "LCS_API_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEnvironment:
    def test_reads_prefixed_variables(self, lcs_env):
        lcs_env.setenv("LCS_BASE_URL", "https://merchantapistaging.leopardscourier.com/api")
        lcs_env.setenv("LCS_API_KEY", "key")
        lcs_env.setenv("LCS_API_PASSWORD", "secret")
        lcs_env.setenv("LCS_FORCE_MULTIPART", "true")
        lcs_env.setenv("LCS_CITY_AUTOMAP_CONF", "0.7")

        settings = LcsSettings(_env_file=None)
        assert settings.has_credentials is True
        assert settings.force_multipart is True
        assert settings.min_confidence == 0.7

    def test_defaults(self, lcs_env):
        settings = LcsSettings(_env_file=None)
        assert settings.has_credentials is False
        assert settings.allow_prod_push is False
        assert settings.use_city_id is True
        assert settings.field_style == "snake"
        assert settings.cities_file == BUNDLED_CITIES_FILE

    def test_field_style_is_case_insensitive(self, lcs_env):
        lcs_env.setenv("LCS_FIELD_STYLE", " Camel ")
        assert LcsSettings(_env_file=None).field_style == "camel"


class TestDerivedValues:
    def test_api_root_has_trailing_slash(self, make_settings):
        assert make_settings(base_url="https://x.test/api").api_root == "https://x.test/api/"
        assert make_settings(base_url="https://x.test/api/").api_root == "https://x.test/api/"

    def test_production_detection(self, settings, make_settings):
        assert settings.is_production is False
        assert make_settings(base_url="https://merchantapi.leopardscourier.com/api/").is_production is True

    def test_tracking_key_prefers_secure_key(self, settings, make_settings):
        assert settings.tracking_key == "test-api-key"
        assert make_settings(api_key_secure="secure").tracking_key == "secure"

    @pytest.mark.parametrize("configured, expected", [(5, 20), (100, 100), (500, 240)])
    def test_description_length_is_clamped(self, make_settings, configured, expected):
        assert make_settings(product_max_len=configured).description_max_len == expected

    def test_zero_default_weight_falls_back(self, make_settings):
        assert make_settings(default_weight_g=0).default_weight_grams == 1000

    def test_default_remarks_lose_wrapping_quotes(self, make_settings):
        assert make_settings(default_remarks='"Fragile"').default_remarks == "Fragile"


class TestJsonSettings:
    def test_city_aliases(self, make_settings):
        settings = make_settings(city_aliases_json=json.dumps({"Pindi": 57}))
        assert settings.city_aliases == {"Pindi": 57}

    def test_malformed_aliases_are_ignored(self, make_settings):
        assert make_settings(city_aliases_json="{not json").city_aliases == {}
        assert make_settings(city_aliases_json="[1, 2]").city_aliases == {}

    def test_static_cities_accept_both_shapes(self, make_settings):
        cities = [{"CityID": 1, "CityName": "Quetta"}]
        assert make_settings(cities_json=json.dumps(cities)).static_cities == cities
        assert make_settings(cities_json=json.dumps({"cities": cities})).static_cities == cities
        assert make_settings(cities_json=json.dumps({"data": cities})).static_cities == []
