"""Fake courier HTTP adapter — scripted responses for testing and development.

Responses are scripted per endpoint (matched by a fragment of the URL,
e.g. ``"bookPacket"``). Each call consumes the next scripted response for
its endpoint; the last one repeats once the script runs out. A scripted
``Exception`` instance is raised instead of returned. Every call is
recorded in ``calls``.
"""

from shipping.courier.port import CourierHttp, HttpResponse

NO_SCRIPT = {"status": 0, "error": "No scripted response"}


class FakeLcsHttp(CourierHttp):
    """Configurable fake for the LCS HTTP surface."""

    def __init__(self) -> None:
        self.scripts: dict[str, list] = {}
        self.calls: list[dict] = []

    def script(self, endpoint: str, *responses) -> "FakeLcsHttp":
        """Queue responses (dicts, lists, ``HttpResponse`` or exceptions) for an endpoint."""
        self.scripts.setdefault(endpoint, []).extend(responses)
        return self

    def reset(self) -> None:
        self.scripts.clear()
        self.calls.clear()

    def calls_to(self, endpoint: str) -> list[dict]:
        return [call for call in self.calls if endpoint in call["url"]]

    def post_form(self, url: str, fields: list[tuple[str, str]]) -> HttpResponse:
        return self._respond({"method": "POST", "encoding": "urlencoded", "url": url, "fields": list(fields)})

    def post_multipart(self, url: str, fields: list[tuple[str, str]]) -> HttpResponse:
        return self._respond({"method": "POST", "encoding": "multipart", "url": url, "fields": list(fields)})

    def post_json(self, url: str, body: dict) -> HttpResponse:
        return self._respond({"method": "POST", "encoding": "json", "url": url, "body": dict(body)})

    def get(self, url: str, params: list[tuple[str, str]]) -> HttpResponse:
        return self._respond({"method": "GET", "encoding": "query", "url": url, "fields": list(params)})

    def _respond(self, call: dict) -> HttpResponse:
        self.calls.append(call)

        queue = next((q for endpoint, q in self.scripts.items() if endpoint in call["url"]), None)
        if not queue:
            response = NO_SCRIPT
        elif len(queue) > 1:
            response = queue.pop(0)
        else:
            response = queue[0]

        if isinstance(response, Exception):
            raise response
        if isinstance(response, HttpResponse):
            return response
        return HttpResponse(status_code=200, data=response)

    def posted(self, index: int = -1) -> dict:
        """Fields of a recorded call as a dict, keeping the first value of repeated keys."""
        fields: dict = {}
        for key, value in self.calls[index].get("fields", []):
            fields.setdefault(key, value)
        return fields
