"""Field dialects — how strict booking fields are named on the wire.

LCS tenants disagree on field names: some validate snake_case keys, some
CamelCase, and validator messages quote CamelCase names even when snake
keys are accepted. Each dialect emits an ordered list of ``(name, value)``
pairs; the parcel section is shared by all of them.
"""

from abc import ABC, abstractmethod

from shipping.courier.payload import phone_variants
from shipping.courier.settings import LcsSettings

REMARK_KEYS = ("remarks", "Remarks", "instruction", "Instruction", "SpecialInstructions")
PRODUCT_KEYS = (
    "product_description",
    "booked_packet_product_detail",
    "product_detail",
    "product_details",
    "ProductDetail",
    "packet_description",
    "product",
    "Product",
    "booked_packet_product",
    "booked_packet_product_description",
    "description",
    "item_description",
)


def to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


class FormFields:
    """Ordered form fields. A key is only written once."""

    def __init__(self) -> None:
        self.items: list[tuple[str, str]] = []
        self._keys: set[str] = set()

    def add(self, key: str, value) -> None:
        if key in self._keys:
            return
        self._keys.add(key)
        self.items.append((key, to_text(value)))

    def add_many(self, keys, value) -> None:
        for key in keys:
            self.add(key, value)

    def keys(self) -> list[str]:
        return [key for key, _ in self.items]


class FieldDialect(ABC):
    name: str = ""
    multipart: bool = False

    def __init__(self, settings: LcsSettings):
        self.settings = settings

    def fields(self, strict: dict, credentials: dict) -> list[tuple[str, str]]:
        form = FormFields()
        for key, value in credentials.items():
            form.add(key, value)
        self.party_fields(form, strict)
        self.parcel_fields(form, strict)
        return form.items

    @abstractmethod
    def party_fields(self, form: FormFields, strict: dict) -> None:
        """Shipper, consignee, phone and city fields."""

    def product_keys(self) -> list[str]:
        key = self.settings.product_key.strip()
        if not key:
            return list(PRODUCT_KEYS)
        if self.settings.product_strict:
            keys = [key]
            if self.multipart and key == "product_description":
                keys.append("booked_packet_product_detail")
            return keys
        return [key, *(k for k in PRODUCT_KEYS if k != key)]

    def parcel_fields(self, form: FormFields, strict: dict) -> None:
        local, international = phone_variants(strict.get("ConsigneePhone"))
        form.add_many(("consignment_name", "consignment_name_eng"), strict.get("ConsigneeName"))
        form.add("consignment_phone", local)
        form.add("consignment_phone_two", international)
        form.add("consignment_address", strict.get("ConsigneeAddress"))

        if "shipment_id" in strict:
            # tenants disagree on which key selects the product preset
            form.add_many(("shipment_id", "product_id"), strict["shipment_id"])

        form.add("booked_packet_weight", strict.get("booked_packet_weight"))
        form.add("booked_packet_no_piece", strict.get("booked_packet_no_piece"))
        form.add("booked_packet_collect_amount", strict.get("booked_packet_collect_amount"))

        for key in ("booking_type_id", "service_code", "shipment_type_id"):
            if strict.get(key):
                form.add(key, strict[key])
        for key in ("booked_packet_option", "payment_type", "allow_to_open"):
            if key in strict:
                form.add(key, strict[key])
        if strict.get("booked_packet_comments"):
            form.add("booked_packet_comments", strict["booked_packet_comments"])

        if strict.get("items"):
            form.add_many(("items", "no_of_items"), strict["items"])

        form.add("booked_packet_order_id", strict.get("booked_packet_order_id"))
        form.add("special_instructions", strict.get("special_instructions") or "-")
        if strict.get("special_instructions"):
            form.add_many(REMARK_KEYS, strict["special_instructions"])

        if strict.get("product_description"):
            form.add_many(self.product_keys(), strict["product_description"])

        if strict.get("custom_data"):
            form.add("custom_data", strict["custom_data"])


class SnakeDialect(FieldDialect):
    """snake_case fields with CamelCase duplicates of the fields validators name."""

    name = "snake"

    def shipper_fields(self, form: FormFields, strict: dict) -> None:
        if strict.get("ShipperName"):
            form.add_many(("shipment_name", "shipment_name_eng"), strict["ShipperName"])
        if strict.get("ShipperPhone"):
            form.add("shipment_phone", strict["ShipperPhone"])
        if strict.get("ShipperAddress"):
            form.add("shipment_address", strict["ShipperAddress"])
        if strict.get("shipper_id"):
            form.add_many(("shipper_id", "shipper_sys_id", "shipper_sysid"), strict["shipper_id"])

    def consignee_fields(self, form: FormFields, strict: dict) -> None:
        form.add_many(("consignee_name", "consignment_name", "consignment_name_eng"), strict.get("ConsigneeName"))
        form.add_many(("consignee_address", "consignment_address"), strict.get("ConsigneeAddress"))

    def party_fields(self, form: FormFields, strict: dict) -> None:
        local, international = phone_variants(strict.get("ConsigneePhone"))
        self.shipper_fields(form, strict)
        self.consignee_fields(form, strict)
        for key in ("ShipperName", "ShipperPhone", "ShipperAddress", "ConsigneeName"):
            if strict.get(key):
                form.add(key, strict[key])

        form.add_many(("consignee_phone", "consignment_phone"), local)
        form.add_many(("consignment_phone_two", "consignee_mobile"), international)
        # cities stay snake_case only
        form.add("origin_city", strict.get("origin_city"))
        form.add("destination_city", strict.get("destination_city"))
        form.add("ConsigneePhone", local)
        form.add("ConsigneeAddress", strict.get("ConsigneeAddress"))


class CamelDialect(FieldDialect):
    """CamelCase shipper, consignee and city fields."""

    name = "camel"

    def party_fields(self, form: FormFields, strict: dict) -> None:
        for key in ("ShipperName", "ShipperPhone", "ShipperAddress"):
            if strict.get(key):
                form.add(key, strict[key])
        if strict.get("shipper_id"):
            form.add("ShipperId", strict["shipper_id"])

        form.add("ConsigneeName", strict.get("ConsigneeName"))
        form.add("ConsigneeAddress", strict.get("ConsigneeAddress"))
        form.add("OriginCity", strict.get("origin_city"))
        form.add("DestinationCity", strict.get("destination_city"))
        if "destination_city_id" in strict:
            form.add("DestinationCityId", strict["destination_city_id"])
        if strict.get("destination_city_name"):
            form.add("DestinationCityName", strict["destination_city_name"])

        local, _ = phone_variants(strict.get("ConsigneePhone"))
        form.add("ConsigneePhone", local)


class MultipartDialect(SnakeDialect):
    """snake_case only, as the multipart endpoint documents it."""

    name = "multipart-snake"
    multipart = True

    def party_fields(self, form: FormFields, strict: dict) -> None:
        local, international = phone_variants(strict.get("ConsigneePhone"))
        self.shipper_fields(form, strict)
        if strict.get("shipper_id"):
            form.add("ShipperId", strict["shipper_id"])
        self.consignee_fields(form, strict)

        form.add("consignee_phone", local)
        form.add("consignee_mobile", international)
        form.add("consignment_phone", local)
        form.add("consignment_phone_two", international)
        form.add("origin_city", strict.get("origin_city"))
        form.add("destination_city", strict.get("destination_city"))


def primary_dialect(settings: LcsSettings) -> FieldDialect:
    return CamelDialect(settings) if settings.field_style == "camel" else SnakeDialect(settings)
