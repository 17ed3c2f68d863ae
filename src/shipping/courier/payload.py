"""Order → LCS booking payload.

``map_order_to_payload`` is a pure function of the order and settings; it
produces the broad snake_case field set. ``build_strict_fields`` narrows it
to the values a booking actually sends, and the dialects in
``shipping.courier.dialects`` lay those values out on the wire.
"""

import json
import re

from shipping.courier.description import build_product_description
from shipping.courier.settings import LcsSettings

SELF = "self"
MAX_CUSTOM_DATA_ITEMS = 20

_NON_DIGIT = re.compile(r"\D+")
_DIGITS = re.compile(r"^\d+$")


def pieces_for(items) -> int:
    """Sum of line counts; never less than one piece."""
    return sum(int(item.count or 0) for item in items) or 1


def item_count(items) -> int:
    # a line without a count still counts as one item
    return sum(int(item.count or 1) for item in items)


def cod_amount(order, settings: LcsSettings) -> float:
    return 0 if settings.force_prepaid else float(order.total_price or 0)


def phone_variants(raw) -> tuple[str, str]:
    """(local, international) forms: ``03001234567`` → ``923001234567``."""
    local = _NON_DIGIT.sub("", str(raw or ""))
    if local.startswith("92"):
        international = local
    elif local.startswith("0"):
        international = f"92{local[1:]}"
    else:
        international = local
    return local, international


def coerce_numeric(value):
    """Digit-only strings become integers; everything else passes through."""
    if value is not None and _DIGITS.match(str(value)):
        return int(value)
    return value


def _custom_data(items) -> str:
    return json.dumps(
        [
            {"title": item.title or "", "qty": int(item.count or 0), "price": float(item.price or 0)}
            for item in items[:MAX_CUSTOM_DATA_ITEMS]
        ]
    )


def map_order_to_payload(order, settings: LcsSettings, weight_override_g: float | None = None) -> dict:
    address = order.shipping_address
    items = list(order.items or [])
    resolution = order.city_resolution if order.city_resolution and order.city_resolution.city_id else None

    special_instructions = (
        (address.additional_instructions or "").strip() if address else ""
    ) or settings.default_remarks or "-"
    shipper_name = settings.shipper_name or SELF
    weight = weight_override_g if weight_override_g and weight_override_g > 0 else settings.default_weight_grams

    return {
        "origin_city": settings.origin_city or SELF,
        "destination_city": resolution.city_id if resolution else (address.city if address else "") or "",
        "destination_city_id": coerce_numeric(resolution.city_id) if resolution else None,
        "destination_city_name": (resolution.city_name or None) if resolution else None,
        "shipment_id": settings.shipment_id,
        "shipment_name": shipper_name,
        "shipment_name_eng": shipper_name,
        "shipment_email": settings.shipper_email or SELF,
        "shipment_phone": settings.shipper_phone or SELF,
        "shipment_address": settings.shipper_address or SELF,
        "shipper_id": settings.shipper_id or None,
        "consignee_name": (address.full_name if address else "") or "",
        "consignee_phone": (address.mobile if address else "") or "",
        "consignee_address": ((address.street_address if address else "") or "").strip(),
        "return_address": settings.return_address,
        "return_city": settings.return_city,
        "booked_packet_weight": weight,
        "booked_packet_no_piece": pieces_for(items),
        "booked_packet_collect_amount": cod_amount(order, settings),
        "booked_packet_order_id": order.reference,
        "product_description": build_product_description(items, settings),
        "special_instructions": special_instructions,
        "booked_packet_option": settings.booked_packet_option,
        "payment_type": settings.payment_type,
        "allow_to_open": settings.allow_to_open,
        "booked_packet_comments": (settings.default_remarks or special_instructions).lower(),
        "booking_type_id": settings.booking_type_id,
        "service_code": settings.service_code,
        "shipment_type_id": settings.shipment_type_id,
        "items": item_count(items),
        "custom_data": _custom_data(items) if settings.send_custom_data else None,
    }


def missing_consignee_fields(payload: dict) -> list[str]:
    """Messages for consignee data LCS refuses to book without."""
    missing = []
    if not payload.get("consignee_phone"):
        missing.append("Consignee Phone is required")
    if not payload.get("consignee_address"):
        missing.append("Consignee Address is required")
    return missing


def has_explicit_shipper(payload: dict) -> bool:
    names = (payload.get("shipment_name"), payload.get("shipment_name_eng"))
    return any(name and str(name).lower() != SELF for name in names)


def build_strict_fields(payload: dict, settings: LcsSettings) -> dict:
    """The values a booking sends, without credentials, with empty values dropped."""
    shipment_id = int(payload.get("shipment_id") or 0)
    strict = {
        "origin_city": coerce_numeric(payload.get("origin_city")),
        "destination_city": coerce_numeric(payload.get("destination_city")),
        "destination_city_id": payload.get("destination_city_id"),
        "destination_city_name": payload.get("destination_city_name"),
        "shipper_id": payload.get("shipper_id"),
        "shipment_id": shipment_id if shipment_id > 0 and not settings.omit_shipment_id else None,
        "booking_type_id": payload.get("booking_type_id"),
        "service_code": payload.get("service_code"),
        "shipment_type_id": payload.get("shipment_type_id"),
        "booked_packet_option": payload.get("booked_packet_option"),
        "payment_type": payload.get("payment_type"),
        "allow_to_open": payload.get("allow_to_open"),
        "booked_packet_comments": payload.get("booked_packet_comments"),
        "items": payload.get("items"),
        "ConsigneeName": payload.get("consignee_name"),
        "ConsigneePhone": payload.get("consignee_phone"),
        "ConsigneeAddress": payload.get("consignee_address"),
        "special_instructions": payload.get("special_instructions"),
        "booked_packet_weight": payload.get("booked_packet_weight"),
        "booked_packet_no_piece": payload.get("booked_packet_no_piece"),
        "booked_packet_collect_amount": payload.get("booked_packet_collect_amount"),
        "booked_packet_order_id": payload.get("booked_packet_order_id"),
        "product_description": payload.get("product_description"),
        "custom_data": payload.get("custom_data"),
    }

    if has_explicit_shipper(payload):
        strict["ShipperName"] = payload.get("shipment_name") or payload.get("shipment_name_eng")
        strict["ShipperPhone"] = payload.get("shipment_phone")
        strict["ShipperAddress"] = payload.get("shipment_address")

    return {key: value for key, value in strict.items() if value is not None and value != ""}
