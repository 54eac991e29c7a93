"""ASGI entry point.

Run with ``uvicorn vrf_api.main:app`` or ``python -m vrf_api.main``.
"""

import os

import uvicorn

from vrf_api.core.app_factory import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )
