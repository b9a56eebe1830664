"""Entry point: uvicorn main:app"""
from giftx.main import app

__all__ = ["app"]

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("giftx.main:app", host="0.0.0.0", port=8000)
