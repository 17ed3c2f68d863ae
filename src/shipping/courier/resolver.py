"""Match free-text destination cities against the LCS city directory.

Resolution order is fixed: alias, then exact normalized name, then the
first entry where either name is a prefix of the other. Suggestions use
a separate, ranked similarity score.
"""

import re
from dataclasses import dataclass

from shipping.courier.directory import CityDirectory, CityRecord
from shipping.courier.settings import LcsSettings
from shipping.order.order import ResolutionMethod

FUZZY_CONFIDENCE = 0.9

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize(text) -> str:
    """Lowercase, collapse every non-alphanumeric run to one space, trim."""
    return _NON_ALNUM.sub(" ", str(text or "").lower()).strip()


@dataclass(frozen=True)
class Resolution:
    city_id: str
    city_name: str | None
    method: str
    confidence: float


@dataclass(frozen=True)
class Suggestion:
    city_id: str
    name: str
    score: float


def accepts(resolution: Resolution | None, settings: LcsSettings) -> bool:
    """Whether a resolution may be used without an operator."""
    if resolution is None:
        return False
    if settings.city_automap:
        return resolution.confidence >= settings.min_confidence
    return resolution.method in (ResolutionMethod.EXACT.value, ResolutionMethod.ALIAS.value)


def _jaccard(a: str, b: str) -> float:
    left, right = set(a.split()), set(b.split())
    union = left | right
    return len(left & right) / (len(union) or 1)


def _score(query: str, candidate: str) -> float:
    if candidate == query:
        return 1.0
    if candidate.startswith(query) or query.startswith(candidate):
        return 0.9
    if query in candidate or candidate in query:
        return 0.8
    return 0.75 * _jaccard(query, candidate)


class CityResolver:
    def __init__(self, directory: CityDirectory, aliases: dict | None = None):
        self.directory = directory
        self.aliases: dict[str, str] = {}
        self.set_aliases(aliases or {})

    def set_aliases(self, aliases: dict) -> None:
        """Replace the alias map; keys are normalized, values are city ids."""
        self.aliases = {normalize(name): str(city_id) for name, city_id in aliases.items() if normalize(name)}

    def resolve(self, name) -> Resolution | None:
        query = normalize(name)
        if not query:
            return None

        if query in self.aliases:
            return Resolution(self.aliases[query], query, ResolutionMethod.ALIAS.value, 1.0)

        cities = self.directory.get_cities()
        for city in cities:
            if normalize(city.name) == query:
                # an exact name with no id is unbookable; no fuzzy fallback to a neighbour
                if city.id is None:
                    return None
                return self._resolution(city, ResolutionMethod.EXACT.value, 1.0)

        for city in cities:
            if city.id is None:
                continue
            candidate = normalize(city.name)
            if candidate and (candidate.startswith(query) or query.startswith(candidate)):
                return self._resolution(city, ResolutionMethod.FUZZY.value, FUZZY_CONFIDENCE)

        return None

    def suggest(self, name, limit: int = 5) -> list[Suggestion]:
        query = normalize(name)
        if not query:
            return []

        scored = [
            Suggestion(city_id=str(city.id), name=city.name, score=_score(query, normalize(city.name)))
            for city in self.directory.get_cities()
            if city.id is not None
        ]
        scored.sort(key=lambda suggestion: suggestion.score, reverse=True)
        return scored[: max(0, limit)]

    @staticmethod
    def _resolution(city: CityRecord, method: str, confidence: float) -> Resolution:
        return Resolution(str(city.id), city.name, method, confidence)
