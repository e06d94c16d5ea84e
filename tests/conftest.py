import os
import socket
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]

# Prefer repo sources over any installed package.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from property_mapper.geocoding.base import BaseGeocoder, GeocodingResult  # noqa: E402
from property_mapper.models import PropertyRecord  # noqa: E402


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0]
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)


class FakeGeocoder(BaseGeocoder):
    """Scripted geocoder: answers come from dicts, calls are recorded."""

    def __init__(
        self,
        forward: Optional[Dict[str, Optional[Tuple[float, float]]]] = None,
        reverse: Optional[Dict[Tuple[float, float], Optional[str]]] = None,
    ):
        self.forward = forward or {}
        self.reverse = reverse or {}
        self.forward_calls: List[str] = []
        self.reverse_calls: List[Tuple[float, float]] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def forward_geocode(self, query):
        self.forward_calls.append(query)
        coords = self.forward.get(query)
        if coords is None:
            return None
        return GeocodingResult(
            latitude=coords[0],
            longitude=coords[1],
            query=query,
            provider=self.provider_name,
        )

    async def reverse_geocode(self, lat, lon):
        self.reverse_calls.append((lat, lon))
        return self.reverse.get((lat, lon))


def make_record(**overrides) -> PropertyRecord:
    fields = {
        "title": "The Meadows at Canton",
        "url": "https://gshrealestate.com/portfolio/the-meadows/",
        "image": None,
        "description": None,
        "address": "Address Not Found",
        "location_field": None,
    }
    fields.update(overrides)
    return PropertyRecord(**fields)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder()
