"""Visitor IP -> (country code, city) via ip-api.com (free tier, 45 requests/minute)."""
import json
import logging
import time
from urllib.error import URLError
from urllib.request import Request, urlopen

from .config import settings

log = logging.getLogger("giftx.geo")

GeoResult = tuple[str | None, str | None]

_EMPTY: GeoResult = (None, None)
# IP -> ((country, city), expires). Simple in-memory cache.
_geo_cache: dict[str, tuple[GeoResult, float]] = {}
_CACHE_TTL = 3600.0
_LOCAL_IPS = ("127.0.0.1", "::1", "localhost", "testclient")


def _now() -> float:
    return time.monotonic()


def lookup_ip(ip: str | None) -> GeoResult:
    """Country code and city for an IP. (None, None) on localhost, errors or when disabled."""
    if not settings.geo_lookup_enabled:
        return _EMPTY
    if not ip or ip in _LOCAL_IPS:
        return _EMPTY
    now = _now()
    if ip in _geo_cache:
        result, exp = _geo_cache[ip]
        if exp > now:
            return result
        del _geo_cache[ip]
    try:
        req = Request(f"http://ip-api.com/json/{ip}?fields=countryCode,city", method="GET")
        with urlopen(req, timeout=2) as r:
            data = json.loads(r.read().decode())
    except (URLError, OSError, ValueError) as e:
        log.warning("geo lookup failed for %s: %s", ip, e)
        return _EMPTY
    result = (data.get("countryCode") or None, data.get("city") or None)
    if result[0]:
        _geo_cache[ip] = (result, now + _CACHE_TTL)
    return result


def clear_cache() -> None:
    _geo_cache.clear()
