"""Admin auth: X-Admin-Secret header or admin_secret query parameter."""
import hmac

from fastapi import Header, HTTPException, Query

from giftx.core.config import settings


def _admin_secret_constant_time_compare(provided: str | None, expected: str | None) -> bool:
    """Timing-safe comparison; leaks nothing about the expected value."""
    p = (provided or "").encode("utf-8")
    e = (expected or "").encode("utf-8")
    if len(p) != len(e):
        # Compare equal-length buffers anyway to keep timing flat
        dummy = b"\x00" * max(len(p), len(e))
        hmac.compare_digest(p if len(p) >= len(e) else dummy[: len(p)], e if len(e) >= len(p) else dummy[: len(e)])
        return False
    return hmac.compare_digest(p, e)


def admin_configured() -> bool:
    return bool(settings.admin_secret)


def admin_secret_ok(secret: str | None) -> bool:
    return admin_configured() and _admin_secret_constant_time_compare(secret, settings.admin_secret)


def require_admin(
    x_admin_secret: str | None = Header(None, alias="X-Admin-Secret"),
    admin_secret: str | None = Query(None, description="Admin secret"),
) -> None:
    if not admin_configured():
        raise HTTPException(status_code=503, detail="Admin API is not configured (ADMIN_SECRET missing).")
    if not admin_secret_ok(x_admin_secret or admin_secret):
        raise HTTPException(status_code=403, detail="Forbidden.")
