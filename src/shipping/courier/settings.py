"""LCS courier settings, read from ``LCS_*`` environment variables (or ``.env``)."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Literal

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PRODUCTION_HOST = "merchantapi.leopardscourier.com"
BUNDLED_CITIES_FILE = Path(__file__).parent / "data" / "lcs_cities.json"


class LcsSettings(BaseSettings):
    """Everything the booking engine needs to talk to LCS."""

    model_config = SettingsConfigDict(env_prefix="LCS_", env_file=".env", extra="ignore")

    # Endpoint and credentials
    base_url: str = ""
    api_key: str = ""
    api_password: str = ""
    api_key_secure: str = ""
    request_timeout: float = 20.0

    # Safety guards
    allow_prod_push: bool = False
    allow_rebook: bool = False

    # Protocol negotiation
    force_prepaid: bool = False
    force_multipart: bool = False
    field_style: Literal["snake", "camel"] = "snake"
    debug_payload: bool = False

    # City resolution
    use_city_id: bool = True
    city_automap: bool = True
    city_automap_conf: float = 0.85
    city_aliases_json: str = ""
    cities_json: str = ""
    cities_file: Path = BUNDLED_CITIES_FILE
    cities_ttl_ms: int = 24 * 60 * 60 * 1000

    # Payload shaping
    default_weight_g: float = 1000
    product_weight_unit: Literal["g", "kg"] = "g"
    product_max_len: int = 100
    product_include_variants: bool = True
    default_product: str = ""
    product_key: str = ""
    product_strict: bool = False
    send_custom_data: bool = False

    # Shipper profile ("self" lets LCS use the account defaults)
    shipper_name: str = "self"
    shipper_email: str = "self"
    shipper_phone: str = "self"
    shipper_address: str = "self"
    shipper_id: int = 0
    origin_city: str = "self"
    return_address: str = ""
    return_city: str = ""
    default_remarks: str = ""

    # Booking metadata observed in manual portal bookings
    booking_type_id: int = 2
    service_code: str = "GO"
    shipment_type_id: int = 10
    booked_packet_option: int = 1
    payment_type: int = 0
    allow_to_open: int = 0
    shipment_id: int = 0
    omit_shipment_id: bool = False

    @field_validator("field_style", "product_weight_unit", mode="before")
    @classmethod
    def _lowercase(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("default_remarks", mode="before")
    @classmethod
    def _strip_wrapping_quotes(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value[:1] in ("'", '"'):
                value = value[1:]
            if value[-1:] in ("'", '"'):
                value = value[:-1]
        return value

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def api_root(self) -> str:
        """Base URL with a guaranteed trailing slash."""
        return self.base_url if self.base_url.endswith("/") else f"{self.base_url}/"

    @property
    def has_credentials(self) -> bool:
        return bool(self.base_url and self.api_key and self.api_password)

    @property
    def is_production(self) -> bool:
        return PRODUCTION_HOST in self.base_url

    @property
    def tracking_key(self) -> str:
        return self.api_key_secure or self.api_key

    @property
    def min_confidence(self) -> float:
        return max(0.0, min(1.0, self.city_automap_conf))

    @property
    def description_max_len(self) -> int:
        return max(20, min(240, self.product_max_len))

    @property
    def default_weight_grams(self) -> float:
        return max(1, self.default_weight_g or 1000)

    @property
    def cities_ttl_seconds(self) -> float:
        return self.cities_ttl_ms / 1000

    @property
    def city_aliases(self) -> dict:
        """Alias map keyed by the raw names as configured (normalized by the resolver)."""
        parsed = _parse_json("LCS_CITY_ALIASES_JSON", self.city_aliases_json)
        return parsed if isinstance(parsed, dict) else {}

    @property
    def static_cities(self) -> list:
        return cities_from_payload(_parse_json("LCS_CITIES_JSON", self.cities_json))


def cities_from_payload(payload) -> list:
    """Accept either a bare list or ``{"cities": [...]}``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("cities"), list):
        return payload["cities"]
    return []


def _parse_json(name: str, raw: str):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed JSON setting", setting=name)
        return None


@lru_cache
def get_settings() -> LcsSettings:
    """Process-wide settings instance."""
    return LcsSettings()
