"""Pydantic request/response schemas for the shipping API.

Courier endpoints keep the camelCase field names the admin panel already
sends and reads.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Request Schemas ---


class PushOrdersRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"orderIds": ["3f7c0b6e-..."], "forceRebook": False}]},
    )

    order_ids: Any = Field(None, alias="orderIds")
    force_rebook: bool = Field(False, alias="forceRebook")


class ResolveCityRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"orderId": "3f7c0b6e-...", "lcsCityId": "789", "lcsCityName": "Lahore"}]},
    )

    order_id: str | None = Field(None, alias="orderId")
    lcs_city_id: str | int | None = Field(None, alias="lcsCityId")
    lcs_city_name: str | None = Field(None, alias="lcsCityName", max_length=200)


class VariantSchema(BaseModel):
    name: str | None = None
    value: str | None = None


class OrderLineSchema(BaseModel):
    product_id: str | None = None
    title: str | None = Field(None, max_length=500)
    count: int = Field(1, ge=0)
    price: float = 0.0
    weight: float | None = Field(None, ge=0)
    selected_variants: list[VariantSchema] = []


class ShippingAddressSchema(BaseModel):
    full_name: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=200)
    street_address: str | None = Field(None, max_length=500)
    apartment: str | None = Field(None, max_length=200)
    mobile: str | None = Field(None, max_length=30)
    email: str | None = Field(None, max_length=254)
    additional_instructions: str | None = Field(None, max_length=1000)


class RegisterOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_ref": "web-10231",
                    "total_price": 2500.0,
                    "shipping_address": {
                        "full_name": "Ayesha Khan",
                        "city": "Lahore",
                        "street_address": "12 Main Boulevard, Gulberg",
                        "mobile": "0300-1234567",
                    },
                    "items": [{"product_id": "p-1", "title": "Wireless Mouse", "count": 2, "price": 1250.0}],
                }
            ]
        }
    }

    order_ref: str | None = Field(None, max_length=100)
    total_price: float = Field(..., ge=0)
    delivery_charges: float = Field(0.0, ge=0)
    shipping_address: ShippingAddressSchema
    items: list[OrderLineSchema] = Field(..., min_length=1)
    ordered_at: str | None = None


class ProductWeightRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"weight": 200, "title": "Wireless Mouse"}]}}

    weight: float = Field(..., ge=0)
    title: str | None = Field(None, max_length=500)


# --- Response Schemas ---


class OrderIdResponse(BaseModel):
    order_id: str


class ProductIdResponse(BaseModel):
    product_id: str


class CitySuggestionSchema(BaseModel):
    id: str
    name: str
    score: float


class BookingResultSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., serialization_alias="orderId")
    ok: bool
    code: str | None = None
    error: Any = None
    consignment_no: str | None = Field(None, serialization_alias="consignmentNo")
    tracking_number: str | None = Field(None, serialization_alias="trackingNumber")
    slip: str | None = None
    suggestions: list[CitySuggestionSchema] = []
    attempts: int = 0
    status: int | None = None


class PushOrdersResponse(BaseModel):
    ok: bool = True
    count: int
    results: list[BookingResultSchema]


class ResolveCityResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    order_id: str = Field(..., serialization_alias="orderId")
    lcs_city_id: str = Field(..., serialization_alias="lcsCityId")
    lcs_city_name: str | None = Field(None, serialization_alias="lcsCityName")


class SuggestionsResponse(BaseModel):
    ok: bool = True
    data: list[CitySuggestionSchema]


class CitiesResponse(BaseModel):
    ok: bool = True
    data: list[dict]


class TrackingResponse(BaseModel):
    ok: bool = True
    data: dict
    raw: dict
