"""Booking dispatcher — pushes a batch of orders to LCS.

Orders are processed one at a time. Batch-level problems (no credentials,
production host without the allow flag, malformed id list) reject the
whole request before any order is loaded. Everything that goes wrong for a
single order becomes that order's result entry and the batch moves on.

Per order:
    load → idempotency guard → short id → weight → payload + consignee
    checks → destination city → protocol negotiation → persist outcome
"""

import json
from dataclasses import dataclass, field

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shipping.courier.errors import (
    AmbiguousCityError,
    BookingValidationError,
    CourierConfigurationError,
    CourierError,
    CourierTransportError,
    DuplicateBookingError,
    ProviderRejection,
)
from shipping.courier.payload import build_strict_fields, map_order_to_payload, missing_consignee_fields
from shipping.courier.port import CourierHttp
from shipping.courier.resolver import CityResolver, Suggestion, accepts
from shipping.courier.settings import LcsSettings
from shipping.courier.transport import booking_strategies, run_strategies
from shipping.order.order import Order
from shipping.product.weight import weights_for
from shipping.sequence.sequence import next_short_order_id
from shipping.utils.logging import order_log_context

logger = structlog.get_logger(__name__)

MAX_SUGGESTIONS = 5
ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


@dataclass
class BookingResult:
    order_id: str
    ok: bool
    code: str | None = None
    error: str | dict | None = None
    consignment_no: str | None = None
    tracking_number: str | None = None
    slip: str | None = None
    suggestions: list[Suggestion] = field(default_factory=list)
    attempts: int = 0
    http_status: int | None = None

    @classmethod
    def failed(cls, order_id: str, exc: CourierError, attempts: int = 0) -> "BookingResult":
        result = cls(order_id=order_id, ok=False, code=exc.code, error=exc.message, attempts=attempts)
        if isinstance(exc, DuplicateBookingError):
            result.consignment_no = exc.consignment_no
            result.tracking_number = exc.tracking_number
            result.slip = exc.label_url
        elif isinstance(exc, AmbiguousCityError):
            result.suggestions = list(exc.suggestions)
        elif isinstance(exc, (ProviderRejection, CourierTransportError)):
            result.http_status = exc.http_status
        return result


class BookingDispatcher:
    def __init__(
        self,
        settings: LcsSettings,
        http: CourierHttp,
        resolver: CityResolver,
        short_ids=next_short_order_id,
    ):
        self.settings = settings
        self.http = http
        self.resolver = resolver
        self.short_ids = short_ids

    # -------------------------------------------------------------------
    # Batch
    # -------------------------------------------------------------------
    def check_batch(self, order_ids) -> None:
        if not isinstance(order_ids, (list, tuple)) or not order_ids:
            raise CourierConfigurationError("orderIds must be a non-empty array")
        if not self.settings.has_credentials:
            raise CourierConfigurationError(
                "LCS credentials not configured. Please set LCS_BASE_URL, LCS_API_KEY, LCS_API_PASSWORD in environment."
            )
        if self.settings.is_production and not self.settings.allow_prod_push:
            raise CourierConfigurationError(
                "Blocked: LCS_BASE_URL points to PRODUCTION but LCS_ALLOW_PROD_PUSH is not set. "
                "Use the staging URL or set LCS_ALLOW_PROD_PUSH=true.",
                status_code=403,
            )

    def push_batch(self, order_ids, force_rebook: bool = False) -> list[BookingResult]:
        self.check_batch(order_ids)
        logger.info("Pushing orders to LCS", count=len(order_ids), force_rebook=force_rebook)

        results = []
        for order_id in order_ids:
            order_id = str(order_id)
            with order_log_context(order_id):
                results.append(self._push_isolated(order_id, force_rebook))
        return results

    def _push_isolated(self, order_id: str, force_rebook: bool) -> BookingResult:
        try:
            return self.push_one(order_id, force_rebook)
        except CourierError as exc:
            logger.warning("Order not booked", code=exc.code, error=exc.message)
            return BookingResult.failed(order_id, exc, attempts=getattr(exc, "attempts", 0))
        except Exception as exc:
            logger.exception("Unexpected error while booking order")
            return BookingResult(order_id=order_id, ok=False, code=UNEXPECTED_ERROR, error=str(exc))

    # -------------------------------------------------------------------
    # Single order
    # -------------------------------------------------------------------
    def push_one(self, order_id: str, force_rebook: bool = False) -> BookingResult:
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
        except ObjectNotFoundError:
            return BookingResult(order_id=order_id, ok=False, code=ORDER_NOT_FOUND, error="Order not found")

        self.guard_duplicate(order, force_rebook)

        if not order.short_id:
            order.assign_short_id(self.short_ids())
            order = self._save(order)

        weight = self.weight_grams(order)
        payload = map_order_to_payload(order, self.settings, weight)
        missing = missing_consignee_fields(payload)
        if missing:
            raise BookingValidationError(missing[0])

        if self.settings.use_city_id:
            order = self.ensure_destination(order)
            payload = map_order_to_payload(order, self.settings, weight)

        strict = build_strict_fields(payload, self.settings)
        credentials = {"api_key": self.settings.api_key, "api_password": self.settings.api_password}
        negotiation = run_strategies(booking_strategies(self.http, self.settings, strict, credentials))

        winner = negotiation.winner
        if winner is None:
            raise self._rejection(negotiation)

        data = winner.response
        order.record_booking(
            tracking_number=str(data.get("track_number") or data.get("trackingNumber") or ""),
            consignment_no=str(data.get("track_number") or ""),
            label_url=data.get("slip_link") or None,
            response=data,
            allow_rebook=True,
        )
        order = self._save(order)
        record = order.shipping_provider
        logger.info(
            "Order booked with LCS",
            consignment_no=record.consignment_no,
            strategy=winner.strategy,
            attempts=len(negotiation.attempts),
        )
        return BookingResult(
            order_id=order_id,
            ok=True,
            consignment_no=record.consignment_no,
            tracking_number=record.tracking_number,
            slip=record.label_url,
            attempts=len(negotiation.attempts),
            http_status=winner.http_status,
        )

    def guard_duplicate(self, order: Order, force_rebook: bool) -> None:
        if not order.is_booked or force_rebook or self.settings.allow_rebook:
            return
        record = order.shipping_provider
        existing = record.consignment_no or record.tracking_number
        raise DuplicateBookingError(
            f"Already booked to LCS (CN: {existing or 'unknown'})",
            consignment_no=record.consignment_no or None,
            tracking_number=record.tracking_number or None,
            label_url=record.label_url,
        )

    def weight_grams(self, order: Order) -> float | None:
        """Total parcel weight in grams, or None to fall back to the default."""
        known = weights_for(line.product_id for line in order.items)
        factor = 1000 if self.settings.product_weight_unit == "kg" else 1

        total = 0.0
        for line in order.items:
            weight = known.get(str(line.product_id)) if line.product_id else None
            weight = (weight if weight is not None else line.weight) or 0
            quantity = line.count or 0
            if weight > 0 and quantity > 0:
                total += weight * factor * quantity
        return total if total >= 1 else None

    def ensure_destination(self, order: Order) -> Order:
        """Make sure the order carries a usable courier city, resolving it if needed."""
        existing = order.city_resolution
        if existing and existing.city_id:
            logger.debug("Reusing stored city resolution", method=existing.method, city_id=existing.city_id)
            return order

        city = ((order.shipping_address.city if order.shipping_address else "") or "").strip()
        if not city:
            raise AmbiguousCityError("Missing city in shipping address")

        resolution = self.resolver.resolve(city)
        if not accepts(resolution, self.settings):
            suggestions = self.resolver.suggest(city, MAX_SUGGESTIONS)
            raise AmbiguousCityError(f'Unserviceable or ambiguous city: "{city}"', suggestions)

        order.record_city_resolution(
            city_input=city,
            city_id=resolution.city_id,
            city_name=resolution.city_name,
            method=resolution.method,
            confidence=resolution.confidence,
        )
        return self._save(order)

    def _rejection(self, negotiation) -> CourierError:
        last = negotiation.last
        attempts = len(negotiation.attempts)
        if last is None or (last.response is None and last.error):
            error = CourierTransportError(last.error if last else "No booking attempt was made")
            error.http_status = last.http_status if last else None
        else:
            data = last.response if isinstance(last.response, dict) else {}
            message = data.get("error") or "LCS booking failed"
            if not isinstance(message, str):
                message = json.dumps(message)
            error = ProviderRejection(message, response=data, http_status=last.http_status)
        error.attempts = attempts
        logger.warning("LCS rejected booking", error=error.message, attempts=attempts)
        return error

    @staticmethod
    def _save(order: Order) -> Order:
        repo = current_domain.repository_for(Order)
        repo.add(order)
        return repo.get(order.id)
