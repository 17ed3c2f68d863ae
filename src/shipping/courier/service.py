"""LCS courier service — wires directory, resolver, dispatcher and tracking together."""

from shipping.courier.directory import CityDirectory, CityRecord
from shipping.courier.dispatcher import BookingDispatcher, BookingResult
from shipping.courier.port import CourierHttp
from shipping.courier.resolver import CityResolver, Resolution, Suggestion
from shipping.courier.settings import LcsSettings
from shipping.courier.tracking import TrackingReport, track_by_consignment_number


class LcsCourier:
    def __init__(self, settings: LcsSettings, http: CourierHttp, directory: CityDirectory | None = None):
        self.settings = settings
        self.http = http
        self.directory = directory or CityDirectory(settings, http)
        self.resolver = CityResolver(self.directory, aliases=settings.city_aliases)
        self.dispatcher = BookingDispatcher(settings, http, self.resolver)

    def push_batch(self, order_ids, force_rebook: bool = False) -> list[BookingResult]:
        return self.dispatcher.push_batch(order_ids, force_rebook=force_rebook)

    def track(self, cn: str) -> TrackingReport:
        return track_by_consignment_number(self.http, self.settings, cn)

    def resolve_city(self, name: str) -> Resolution | None:
        return self.resolver.resolve(name)

    def suggest_cities(self, query: str, limit: int = 5) -> list[Suggestion]:
        return self.resolver.suggest(query, limit)

    def list_cities(self, force: bool = False) -> list[CityRecord]:
        return self.directory.get_cities(force=force)
