"""Shared fixtures: a real requests.Session with a scripted transport adapter."""

import threading
from typing import List, Optional

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from courier import CompletionQueue, Courier, CourierSettings

BASE_URL = "https://api.example.com/"


class FakeAdapter(BaseAdapter):
    """Transport adapter that records requests and replays a scripted outcome."""

    def __init__(self):
        super().__init__()
        self.requests: List[requests.PreparedRequest] = []
        self.timeouts: list = []
        self.status = 200
        self.body = b""
        self.error: Optional[Exception] = None
        self._lock = threading.Lock()

    def respond(self, status: int = 200, body: bytes = b"") -> None:
        self.status, self.body, self.error = status, body, None

    def fail(self, error: Exception) -> None:
        self.error = error

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        with self._lock:
            self.requests.append(request)
            self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error

        response = requests.Response()
        response.status_code = self.status
        response._content = self.body
        response.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        return response

    def close(self):
        pass

    @property
    def last(self) -> requests.PreparedRequest:
        return self.requests[-1]


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def session(adapter):
    s = requests.Session()
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    yield s
    s.close()


@pytest.fixture
def completion_queue():
    queue = CompletionQueue("courier-test")
    yield queue
    queue.shutdown()


@pytest.fixture
def client(session, completion_queue):
    c = Courier(BASE_URL, session=session, settings=CourierSettings(), completion_queue=completion_queue)
    yield c
    c.close()
