"""Tests for the booking field dialects."""

import pytest
from shipping.courier.dialects import (
    PRODUCT_KEYS,
    REMARK_KEYS,
    CamelDialect,
    FormFields,
    MultipartDialect,
    SnakeDialect,
    primary_dialect,
    to_text,
)

CREDENTIALS = {"api_key": "test-api-key", "api_password": "test-api-password"}


@pytest.fixture()
def strict():
    return {
        "origin_city": "self",
        "destination_city": 789,
        "destination_city_id": 789,
        "destination_city_name": "Lahore",
        "booking_type_id": 2,
        "service_code": "GO",
        "shipment_type_id": 10,
        "booked_packet_option": 1,
        "payment_type": 0,
        "allow_to_open": 0,
        "booked_packet_comments": "call first",
        "items": 2,
        "ConsigneeName": "Ayesha Khan",
        "ConsigneePhone": "0300-1234567",
        "ConsigneeAddress": "12 Main Boulevard",
        "special_instructions": "Call first",
        "booked_packet_weight": 400,
        "booked_packet_no_piece": 2,
        "booked_packet_collect_amount": 3000.0,
        "booked_packet_order_id": "1001",
        "product_description": "Wireless Mouse",
    }


def _keys(fields):
    return [key for key, _ in fields]


class TestFormFields:
    def test_first_value_wins(self):
        form = FormFields()
        form.add("remarks", "first")
        form.add("remarks", "second")
        assert form.items == [("remarks", "first")]

    @pytest.mark.parametrize("value, expected", [(3000.0, "3000"), (2.5, "2.5"), (None, ""), (" x ", "x"), (7, "7")])
    def test_to_text(self, value, expected):
        assert to_text(value) == expected


class TestSnakeDialect:
    def test_credentials_come_first(self, settings, strict):
        fields = SnakeDialect(settings).fields(strict, CREDENTIALS)
        assert fields[:2] == [("api_key", "test-api-key"), ("api_password", "test-api-password")]

    def test_keys_are_unique(self, settings, strict):
        keys = _keys(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert len(keys) == len(set(keys))

    def test_snake_consignee_with_camel_duplicates(self, settings, strict):
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["consignee_name"] == "Ayesha Khan"
        assert fields["consignment_name_eng"] == "Ayesha Khan"
        assert fields["ConsigneeName"] == "Ayesha Khan"
        assert fields["ConsigneeAddress"] == "12 Main Boulevard"

    def test_phone_forms(self, settings, strict):
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["consignee_phone"] == "03001234567"
        assert fields["ConsigneePhone"] == "03001234567"
        assert fields["consignee_mobile"] == "923001234567"
        assert fields["consignment_phone_two"] == "923001234567"

    def test_cities_stay_snake_case(self, settings, strict):
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["destination_city"] == "789"
        assert fields["origin_city"] == "self"
        assert "DestinationCity" not in fields

    def test_parcel_values(self, settings, strict):
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["booked_packet_weight"] == "400"
        assert fields["booked_packet_collect_amount"] == "3000"
        assert fields["payment_type"] == "0"
        assert fields["items"] == fields["no_of_items"] == "2"
        assert fields["booked_packet_order_id"] == "1001"

    def test_remarks_copied_to_every_remark_key(self, settings, strict):
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert all(fields[key] == "Call first" for key in REMARK_KEYS)

    def test_placeholder_instructions_without_remarks(self, settings, strict):
        del strict["special_instructions"]
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["special_instructions"] == "-"
        assert not any(key in fields for key in REMARK_KEYS)

    def test_description_under_every_product_key(self, settings, strict):
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert all(fields[key] == "Wireless Mouse" for key in PRODUCT_KEYS)

    def test_explicit_shipper(self, settings, strict):
        strict.update(ShipperName="Acme Store", shipper_id=7)
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["shipment_name"] == fields["shipment_name_eng"] == "Acme Store"
        assert fields["ShipperName"] == "Acme Store"
        assert fields["shipper_sys_id"] == "7"

    def test_shipment_id_doubles_as_product_id(self, settings, strict):
        strict["shipment_id"] = 5
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert fields["shipment_id"] == fields["product_id"] == "5"


class TestCamelDialect:
    def test_camel_party_fields(self, settings, strict):
        fields = dict(CamelDialect(settings).fields(strict, CREDENTIALS))
        assert fields["ConsigneeName"] == "Ayesha Khan"
        assert fields["OriginCity"] == "self"
        assert fields["DestinationCity"] == "789"
        assert fields["DestinationCityId"] == "789"
        assert fields["DestinationCityName"] == "Lahore"
        assert fields["ConsigneePhone"] == "03001234567"

    def test_no_snake_party_fields(self, settings, strict):
        keys = _keys(CamelDialect(settings).fields(strict, CREDENTIALS))
        assert "consignee_name" not in keys
        assert "destination_city" not in keys

    def test_shipper_id(self, settings, strict):
        strict["shipper_id"] = 7
        assert dict(CamelDialect(settings).fields(strict, CREDENTIALS))["ShipperId"] == "7"


class TestMultipartDialect:
    def test_snake_case_only(self, settings, strict):
        keys = _keys(MultipartDialect(settings).fields(strict, CREDENTIALS))
        assert not [key for key in keys if key.startswith("Consignee") or key.startswith("Destination")]
        assert "consignee_name" in keys
        assert "destination_city" in keys

    def test_shipper_id_in_both_cases(self, settings, strict):
        strict["shipper_id"] = 7
        fields = dict(MultipartDialect(settings).fields(strict, CREDENTIALS))
        assert fields["ShipperId"] == "7"
        assert fields["shipper_id"] == "7"


class TestProductKeys:
    def test_all_keys_by_default(self, settings):
        assert SnakeDialect(settings).product_keys() == list(PRODUCT_KEYS)

    def test_configured_key_first(self, make_settings):
        keys = SnakeDialect(make_settings(product_key="ProductDetail")).product_keys()
        assert keys[0] == "ProductDetail"
        assert sorted(keys) == sorted(PRODUCT_KEYS)

    def test_strict_key_only(self, make_settings, strict):
        settings = make_settings(product_key="product_description", product_strict=True)
        fields = dict(SnakeDialect(settings).fields(strict, CREDENTIALS))
        assert [key for key in PRODUCT_KEYS if key in fields] == ["product_description"]

    def test_strict_multipart_adds_product_detail(self, make_settings):
        settings = make_settings(product_key="product_description", product_strict=True)
        assert MultipartDialect(settings).product_keys() == ["product_description", "booked_packet_product_detail"]


class TestPrimaryDialect:
    def test_snake_by_default(self, settings):
        assert isinstance(primary_dialect(settings), SnakeDialect)

    def test_camel_when_configured(self, make_settings):
        assert isinstance(primary_dialect(make_settings(field_style="CAMEL")), CamelDialect)
