"""Courier HTTP port — the wire-level interface the LCS engine programs against.

LCS accepts the same logical request in several encodings, so the port
exposes each encoding explicitly instead of hiding it behind one ``post``.
Adapters are swapped via configuration (``COURIER_ADAPTER``).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class HttpResponse:
    """A decoded courier response."""

    status_code: int
    data: dict | list | None = None
    headers: dict = field(default_factory=dict)


class CourierHttp(ABC):
    """Abstract HTTP interface for courier adapters.

    ``fields`` are ordered ``(name, value)`` pairs; the same name may
    appear more than once. Implementations raise ``CourierTransportError``
    when no usable JSON response was obtained.
    """

    @abstractmethod
    def post_form(self, url: str, fields: list[tuple[str, str]]) -> HttpResponse:
        """POST as ``application/x-www-form-urlencoded``."""
        ...

    @abstractmethod
    def post_multipart(self, url: str, fields: list[tuple[str, str]]) -> HttpResponse:
        """POST as ``multipart/form-data``."""
        ...

    @abstractmethod
    def post_json(self, url: str, body: dict) -> HttpResponse:
        """POST a JSON document."""
        ...

    @abstractmethod
    def get(self, url: str, params: list[tuple[str, str]]) -> HttpResponse:
        """GET with query parameters."""
        ...
