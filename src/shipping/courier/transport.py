"""Transport strategies — ordered ways of sending one logical request.

A strategy pairs an encoding with a dialect (for bookings) or an
endpoint/credential/method combination (for tracking). ``run_strategies``
tries them in order and stops at the first success; a transport error is
just a failed attempt.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial

import structlog

from shipping.courier.dialects import FieldDialect, MultipartDialect, primary_dialect
from shipping.courier.errors import CourierTransportError
from shipping.courier.port import CourierHttp, HttpResponse
from shipping.courier.settings import LcsSettings

logger = structlog.get_logger(__name__)

MASK = "********"
SECRET_FIELDS = ("api_password",)

URLENCODED = "urlencoded"
MULTIPART = "multipart"

TRACKING_ENDPOINTS = ("trackBookedPacket/format/json/", "trackPacket/format/json/")
TRACKING_NUMBER_PARAMS = ("track_number", "tracknumber", "cn", "track_numbers")


def is_success(data) -> bool:
    """LCS reports acceptance as ``status == 1`` (number or numeric string)."""
    if not isinstance(data, dict):
        return False
    try:
        return float(data.get("status")) == 1
    except (TypeError, ValueError):
        return False


def masked(fields: list[tuple[str, str]]) -> dict:
    """Fields as a loggable dict with secrets masked; repeated keys become lists."""
    dump: dict = {}
    for key, value in fields:
        value = MASK if key in SECRET_FIELDS else value
        if key in dump:
            previous = dump[key]
            dump[key] = [*previous, value] if isinstance(previous, list) else [previous, value]
        else:
            dump[key] = value
    return dump


@dataclass
class Strategy:
    name: str
    send: Callable[[], HttpResponse]
    details: dict = field(default_factory=dict)


@dataclass
class Attempt:
    strategy: str
    ok: bool
    http_status: int | None = None
    response: dict | list | None = None
    error: str | None = None
    details: dict = field(default_factory=dict)

    def to_log(self) -> dict:
        entry = {**self.details, "ok": self.ok}
        if self.error:
            entry["error"] = self.error
        elif not self.ok and isinstance(self.response, dict) and self.response.get("error"):
            entry["note"] = self.response["error"]
        return entry


@dataclass
class Negotiation:
    attempts: list[Attempt]

    @property
    def winner(self) -> Attempt | None:
        return next((attempt for attempt in self.attempts if attempt.ok), None)

    @property
    def last(self) -> Attempt | None:
        return self.attempts[-1] if self.attempts else None


def run_strategies(strategies: list[Strategy], succeeded: Callable = is_success) -> Negotiation:
    attempts = []
    for strategy in strategies:
        try:
            response = strategy.send()
        except CourierTransportError as exc:
            logger.warning("Courier attempt failed", strategy=strategy.name, error=exc.message)
            attempts.append(
                Attempt(
                    strategy=strategy.name,
                    ok=False,
                    http_status=exc.http_status,
                    error=exc.message,
                    details=strategy.details,
                )
            )
            continue

        ok = bool(succeeded(response.data))
        attempts.append(
            Attempt(
                strategy=strategy.name,
                ok=ok,
                http_status=response.status_code,
                response=response.data,
                details=strategy.details,
            )
        )
        if ok:
            break
        logger.info("Courier attempt not accepted", strategy=strategy.name, http_status=response.status_code)

    return Negotiation(attempts=attempts)


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TransportStrategy:
    encoding: str
    dialect: FieldDialect

    @property
    def name(self) -> str:
        return f"{self.encoding}:{self.dialect.name}"

    def send(self, http: CourierHttp, url: str, strict: dict, credentials: dict) -> HttpResponse:
        fields = self.dialect.fields(strict, credentials)
        logger.info("Posting booking", strategy=self.name, keys=[key for key, _ in fields])
        if self.dialect.settings.debug_payload:
            logger.info("Booking request body", strategy=self.name, body=masked(fields))

        if self.encoding == MULTIPART:
            return http.post_multipart(url, fields)
        return http.post_form(url, fields)


def booking_transports(settings: LcsSettings) -> list[TransportStrategy]:
    """Urlencoded in the configured dialect, then multipart snake_case."""
    transports = []
    if not settings.force_multipart:
        transports.append(TransportStrategy(URLENCODED, primary_dialect(settings)))
    transports.append(TransportStrategy(MULTIPART, MultipartDialect(settings)))
    return transports


def booking_strategies(
    http: CourierHttp,
    settings: LcsSettings,
    strict: dict,
    credentials: dict,
) -> list[Strategy]:
    url = f"{settings.api_root}bookPacket/format/json/"
    return [
        Strategy(
            name=transport.name,
            send=partial(transport.send, http, url, strict, credentials),
            details={"encoding": transport.encoding, "dialect": transport.dialect.name},
        )
        for transport in booking_transports(settings)
    ]


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------
def tracking_credentials(settings: LcsSettings) -> list[dict]:
    """Credential variants, most specific first: key+password, secure key, none."""
    return [
        {"api_key": settings.api_key, "api_password": settings.api_password},
        {"api_key_secure": settings.tracking_key},
        {},
    ]


def tracking_strategies(http: CourierHttp, settings: LcsSettings, consignment_no: str) -> list[Strategy]:
    """2 endpoints × 3 credential variants × (POST, GET), in that order."""
    strategies = []
    for endpoint in TRACKING_ENDPOINTS:
        url = f"{settings.api_root}{endpoint}"
        for credentials in tracking_credentials(settings):
            params = [(key, value) for key, value in credentials.items() if value]
            params += [(name, consignment_no) for name in TRACKING_NUMBER_PARAMS]
            auth = list(credentials)
            for method in ("POST", "GET"):
                send = partial(http.post_form if method == "POST" else http.get, url, params)
                strategies.append(
                    Strategy(
                        name=f"{method} {endpoint}",
                        send=send,
                        details={"method": method, "url": url, "auth": auth},
                    )
                )
    return strategies
