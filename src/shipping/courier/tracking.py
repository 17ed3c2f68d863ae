"""Consignment tracking.

Tenants differ in endpoint, credential style and HTTP method, so every
combination is tried until one reports success. Responses are normalized
to a single shape regardless of which variant answered.
"""

from dataclasses import asdict, dataclass, field

import structlog

from shipping.courier.errors import CourierConfigurationError, TrackingExhaustedError
from shipping.courier.port import CourierHttp
from shipping.courier.settings import LcsSettings
from shipping.courier.transport import run_strategies, tracking_strategies

logger = structlog.get_logger(__name__)

DETAIL_KEYS = ("booked_packet_tracking_detail", "Tracking Detail", "tracking_detail")
UNKNOWN_STATUS = "Unknown"


def _pick(source: dict, *keys):
    for key in keys:
        value = source.get(key)
        if value:
            return value
    return None


@dataclass
class TrackingEvent:
    date: str | None = None
    status: str | None = None
    origin: str | None = None
    destination: str | None = None
    remarks: str | None = None

    @classmethod
    def from_raw(cls, raw) -> "TrackingEvent":
        raw = raw if isinstance(raw, dict) else {}
        return cls(
            date=_pick(raw, "date", "Date", "datetime"),
            status=_pick(raw, "status", "Status", "message"),
            origin=_pick(raw, "origin_city", "Origin"),
            destination=_pick(raw, "destination_city", "Destination"),
            remarks=_pick(raw, "remarks", "Remarks"),
        )


@dataclass
class TrackingReport:
    cn: str
    status: str
    current_city: str | None
    last_event_at: str | None
    events: list[TrackingEvent] = field(default_factory=list)
    raw: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "cn": self.cn,
            "status": self.status,
            "currentCity": self.current_city,
            "lastEventAt": self.last_event_at,
            "events": [asdict(event) for event in self.events],
        }


def normalize_tracking(cn: str, raw: dict) -> TrackingReport:
    details = next((raw[key] for key in DETAIL_KEYS if isinstance(raw.get(key), list)), [])
    events = [TrackingEvent.from_raw(entry) for entry in details]
    latest = events[-1] if events else None

    packet_list = raw.get("packet_list")
    packet = packet_list[0] if isinstance(packet_list, list) and packet_list and isinstance(packet_list[0], dict) else {}

    status = (latest.status if latest else None) or _pick(packet, "booked_packet_status", "title") or _pick(
        raw, "booked_packet_status", "Status"
    )
    return TrackingReport(
        cn=cn,
        status=status or UNKNOWN_STATUS,
        current_city=raw.get("current_city") or packet.get("origin_city_name") or (latest.origin if latest else None),
        last_event_at=(latest.date if latest else None) or packet.get("booking_date"),
        events=events,
        raw=raw,
    )


def track_by_consignment_number(http: CourierHttp, settings: LcsSettings, cn: str) -> TrackingReport:
    cn = str(cn or "").strip()
    if not cn:
        raise CourierConfigurationError("Consignment number is required")
    if not settings.has_credentials:
        raise CourierConfigurationError(
            "LCS credentials not configured. Please set LCS_BASE_URL, LCS_API_KEY, LCS_API_PASSWORD in environment."
        )

    negotiation = run_strategies(tracking_strategies(http, settings, cn))
    attempts = [attempt.to_log() for attempt in negotiation.attempts]

    winner = negotiation.winner
    if winner is None:
        last = negotiation.last.response if negotiation.last else None
        last = last if isinstance(last, dict) else None
        message = (last or {}).get("error") or "LCS tracking failed"
        logger.warning("Tracking exhausted every variant", cn=cn, attempts=len(attempts))
        raise TrackingExhaustedError(str(message), attempts=attempts, response=last)

    logger.info("Tracking succeeded", cn=cn, attempt=len(attempts), **winner.details)
    return normalize_tracking(cn, winner.response)
