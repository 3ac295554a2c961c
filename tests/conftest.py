"""Shared fixtures: an in-process fake of the logs API."""

import gzip
from typing import Optional

import httpx
import pytest


class FakeLogsAPI:
    """
    httpx handler serving one gzip body per requested range.

    Statuses can be scripted per request start, and every request is
    recorded for assertions.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.statuses: dict[int, int] = {}
        self.on_request = None

    def body_for(self, start: int, end: int) -> bytes:
        return gzip.compress(f'{{"start":{start},"end":{end}}}\n'.encode())

    def fail_at(self, start: int, status: int = 500) -> None:
        self.statuses[start] = status

    def ranges(self) -> list[tuple[int, int]]:
        return [
            (int(r.url.params["start"]), int(r.url.params["end"]))
            for r in self.requests
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request:
            self.on_request(request)
        start = int(request.url.params["start"])
        end = int(request.url.params["end"])
        status = self.statuses.get(start, 200)
        body: Optional[bytes] = self.body_for(start, end) if status < 300 else b"error"
        return httpx.Response(
            status,
            headers=[("Content-Type", "application/json"), ("Content-Encoding", "gzip")],
            stream=httpx.ByteStream(body),
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_api():
    return FakeLogsAPI()
