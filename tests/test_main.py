"""Tests for the ASGI entry module served by uvicorn."""

import runpy
from unittest.mock import patch

from fastapi import FastAPI


def test_module_exposes_app() -> None:
    from vrf_api.main import app

    assert isinstance(app, FastAPI)
    assert app.title == "Harmony VRF API"


def test_running_module_starts_uvicorn(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "8123")

    with patch("uvicorn.run") as run:
        runpy.run_module("vrf_api.main", run_name="__main__")

    run.assert_called_once()
    assert isinstance(run.call_args.args[0], FastAPI)
    assert run.call_args.kwargs["port"] == 8123
