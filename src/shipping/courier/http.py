"""LCS HTTP adapter backed by ``requests``."""

import requests
import structlog

from shipping.courier.errors import CourierTransportError
from shipping.courier.port import CourierHttp, HttpResponse

logger = structlog.get_logger(__name__)

_ACCEPT_JSON = {"Accept": "application/json"}


class LcsHttp(CourierHttp):
    """Production adapter: one pooled session, fixed timeout per request."""

    def __init__(self, timeout: float = 20.0, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def post_form(self, url: str, fields: list[tuple[str, str]]) -> HttpResponse:
        return self._send("POST", url, data=fields)

    def post_multipart(self, url: str, fields: list[tuple[str, str]]) -> HttpResponse:
        # (None, value) parts carry no filename, so they are sent as plain form fields
        return self._send("POST", url, files=[(name, (None, value)) for name, value in fields])

    def post_json(self, url: str, body: dict) -> HttpResponse:
        return self._send("POST", url, json=body)

    def get(self, url: str, params: list[tuple[str, str]]) -> HttpResponse:
        return self._send("GET", url, params=params)

    def _send(self, method: str, url: str, **kwargs) -> HttpResponse:
        try:
            response = self.session.request(method, url, headers=_ACCEPT_JSON, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Courier request failed", method=method, url=url, error=str(exc))
            raise CourierTransportError(f"{method} {url} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise CourierTransportError(
                f"{method} {url} returned a non-JSON body (HTTP {response.status_code})",
                http_status=response.status_code,
            ) from exc

        if response.status_code >= 400:
            error = data.get("error") if isinstance(data, dict) else None
            raise CourierTransportError(
                f"HTTP {response.status_code}: {error or response.reason}",
                http_status=response.status_code,
            )

        return HttpResponse(status_code=response.status_code, data=data, headers=dict(response.headers))
