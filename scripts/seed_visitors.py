#!/usr/bin/env python3
"""Simulated tabs browsing the marketplace against a running service.
From the project root: python3 scripts/seed_visitors.py http://127.0.0.1:8000 [tabs]"""
import asyncio
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from giftx.tracking import Element, HttpEventLog, PageTracker, Rect, SessionContext, Viewport  # noqa: E402

PAGES = ["/", "/gift-cards", "/buy", "/sell", "/faq", "/blog", "/contact-us"]
REFERRERS = ["", "", "https://www.google.com/", "https://t.co/", "https://www.facebook.com/"]


def _buy_button() -> Element:
    button = Element("BUTTON", id="buy-now", class_name="btn btn-primary", rect=Rect(100, 400, 120, 40))
    return button.append(Element("SPAN", text="Buy now"))


async def browse(base_url: str) -> None:
    viewport = Viewport(width=1280, height=720, document_height=random.choice([720, 2400, 4000]))
    tracker = PageTracker(
        SessionContext(),
        HttpEventLog(base_url),
        referrer=random.choice(REFERRERS),
        user_agent="giftx-seed/1.0",
        viewport=viewport,
        scroll_debounce=0.05,
    )
    tracker.mount(random.choice(PAGES))
    for _ in range(random.randint(1, 4)):
        for y in range(0, int(viewport.document_height), 300):
            tracker.interactions.on_scroll(y)
        await asyncio.sleep(0.1)
        if random.random() < 0.6:
            tracker.interactions.on_click(_buy_button())
        if random.random() < 0.2:
            tracker.interactions.on_submit(Element("FORM", id="sell-form"))
        tracker.navigate(random.choice(PAGES))
    await tracker.drain()
    tracker.unmount()


async def main(base_url: str, tabs: int) -> None:
    await asyncio.gather(*(browse(base_url) for _ in range(tabs)))
    print(f"Seeded {tabs} simulated tabs against {base_url}.")


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8000"
    n = int(sys.argv[2]) if len(sys.argv) > 2 else 10
    asyncio.run(main(url, n))
