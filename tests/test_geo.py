"""Visitor country/city lookup."""
import io
import json
from urllib.error import URLError

import pytest

from giftx.core import geo
from giftx.core.config import settings


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def geo_enabled(monkeypatch):
    monkeypatch.setattr(settings, "geo_lookup_enabled", True)
    geo.clear_cache()
    yield
    geo.clear_cache()


def test_lookup_disabled_returns_empty(monkeypatch):
    monkeypatch.setattr(settings, "geo_lookup_enabled", False)
    assert geo.lookup_ip("203.0.113.7") == (None, None)


def test_lookup_skips_local_addresses(geo_enabled):
    assert geo.lookup_ip("127.0.0.1") == (None, None)
    assert geo.lookup_ip(None) == (None, None)


def test_lookup_is_cached(geo_enabled, monkeypatch):
    calls = []

    def fake_urlopen(req, timeout):
        calls.append(req.full_url)
        return _FakeResponse(json.dumps({"countryCode": "NG", "city": "Lagos"}).encode())

    monkeypatch.setattr(geo, "urlopen", fake_urlopen)
    assert geo.lookup_ip("203.0.113.7") == ("NG", "Lagos")
    assert geo.lookup_ip("203.0.113.7") == ("NG", "Lagos")
    assert len(calls) == 1


def test_lookup_failure_returns_empty(geo_enabled, monkeypatch):
    def fake_urlopen(req, timeout):
        raise URLError("timed out")

    monkeypatch.setattr(geo, "urlopen", fake_urlopen)
    assert geo.lookup_ip("198.51.100.1") == (None, None)
