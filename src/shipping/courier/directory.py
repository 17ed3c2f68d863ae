"""LCS city directory — the list of cities the courier services.

The list changes rarely and the remote endpoint is slow, so it is cached
for a TTL. Sources are tried in order (remote, ``LCS_CITIES_JSON``, the
bundled file) and the first non-empty list wins. When every source fails
the last known list is served, however old.
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from shipping.courier.errors import CourierError
from shipping.courier.port import CourierHttp
from shipping.courier.settings import LcsSettings, cities_from_payload

logger = structlog.get_logger(__name__)

ID_KEYS = ("CityID", "city_id", "id", "CityId")
NAME_KEYS = ("CityName", "city_name", "name")


def _first(raw: dict, keys: tuple[str, ...]):
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


@dataclass(frozen=True)
class CityRecord:
    id: str | int | None
    name: str
    raw: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_raw(cls, raw: dict) -> "CityRecord":
        name = _first(raw, NAME_KEYS)
        return cls(id=_first(raw, ID_KEYS), name=str(name) if name is not None else "", raw=raw)


class CityDirectory:
    def __init__(
        self,
        settings: LcsSettings,
        http: CourierHttp,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.http = http
        self.ttl_seconds = settings.cities_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self.fetched_at: float | None = None
        self.cities: list[CityRecord] = []

    @property
    def is_fresh(self) -> bool:
        return (
            bool(self.cities)
            and self.fetched_at is not None
            and self.clock() - self.fetched_at < self.ttl_seconds
        )

    def get_cities(self, force: bool = False) -> list[CityRecord]:
        if not force and self.is_fresh:
            return self.cities

        for source, loader in (
            ("remote", self.fetch_remote),
            ("env", self._load_env),
            ("file", self._load_file),
        ):
            cities = [CityRecord.from_raw(raw) for raw in loader() if isinstance(raw, dict)]
            if cities:
                self.cities = cities
                self.fetched_at = self.clock()
                logger.info("City directory loaded", source=source, count=len(self.cities))
                return self.cities

        logger.warning("No city source available, serving cached directory", count=len(self.cities))
        return self.cities

    def refresh(self) -> list[CityRecord]:
        return self.get_cities(force=True)

    def fetch_remote(self) -> list:
        if not self.settings.has_credentials:
            return []
        url = f"{self.settings.api_root}getAllCities/format/json/"
        try:
            response = self.http.post_json(
                url,
                {"api_key": self.settings.api_key, "api_password": self.settings.api_password},
            )
        except CourierError as exc:
            logger.warning("Remote city list unavailable", error=exc.message)
            return []
        return cities_from_payload(response.data)

    def _load_env(self) -> list:
        return self.settings.static_cities

    def _load_file(self) -> list:
        path = self.settings.cities_file
        try:
            with open(path, encoding="utf-8") as handle:
                return cities_from_payload(json.load(handle))
        except (OSError, ValueError) as exc:
            logger.warning("City file unreadable", path=str(path), error=str(exc))
            return []
