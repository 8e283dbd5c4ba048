"""Tests for API endpoints."""

from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from vectorslide.config import Settings
from vectorslide.dependencies import get_settings
from vectorslide.main import app
from tests.conftest import COMPLEX_ID_SVG, SCRIPT_SVG, SIMPLE_SVG, make_emf


client = TestClient(app)


def _svg_file(name: str, markup: str):
    return ("files", (name, markup.encode("utf-8"), "image/svg+xml"))


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["rules_registered"] == 11


def test_convert_single_svg():
    response = client.post("/api/convert", files=[_svg_file("square.svg", SIMPLE_SVG)])
    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "converted-presentation"
    assert data["canvas"] == "widescreen"
    (slide,) = data["slides"]
    assert slide["index"] == 0
    assert slide["kind"] == "markup"
    assert slide["media_type"] == "image/svg+xml"
    assert slide["markup"].startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert base64.b64decode(slide["data_uri"].split(",", 1)[1]).decode() == slide["markup"]
    assert slide["placement"]["w"] == pytest.approx(4.625)


def test_convert_mixed_batch_keeps_order():
    files = [
        _svg_file("one.svg", SIMPLE_SVG),
        ("files", ("two.emf", make_emf(), "image/x-emf")),
        _svg_file("three.svg", SCRIPT_SVG),
    ]
    response = client.post(
        "/api/convert", files=files, data={"canvas": "standard"}, params={"filename": "deck"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "deck"
    assert data["canvas"] == "standard"
    assert [s["filename"] for s in data["slides"]] == ["one.svg", "two.emf", "three.svg"]
    emf = data["slides"][1]
    assert emf["kind"] == "opaque-binary"
    assert emf["markup"] is None
    assert emf["data_uri"].startswith("data:image/x-emf;base64,")
    assert "<script" not in data["slides"][2]["markup"]


def test_convert_accepts_any_file_field_name():
    files = [
        ("file_0", ("b.svg", SIMPLE_SVG.encode("utf-8"), "image/svg+xml")),
        ("file_1", ("a.emf", make_emf(), "image/x-emf")),
    ]
    response = client.post("/api/convert", files=files, params={"filename": "slides"})
    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "slides"
    assert [s["filename"] for s in data["slides"]] == ["b.svg", "a.emf"]
    assert [s["index"] for s in data["slides"]] == [0, 1]


def test_convert_broken_svg_returns_placeholder_slide():
    response = client.post("/api/convert", files=[_svg_file("broken.svg", "<svg><rect")])
    assert response.status_code == 200
    slide = response.json()["slides"][0]
    assert slide["placeholder"] is True
    assert 'viewBox="0 0 400 300"' in slide["markup"]


def test_convert_profile_override():
    response = client.post(
        "/api/convert", files=[_svg_file("a.svg", SIMPLE_SVG)], data={"profile": "aggressive"}
    )
    assert response.json()["slides"][0]["profile"] == "aggressive"


def test_convert_sanitization_flags():
    response = client.post(
        "/api/convert", files=[_svg_file("ids.svg", COMPLEX_ID_SVG)], data={"simplify_ids": "false"}
    )
    assert 'id="SVGID_1_gradient_long"' in response.json()["slides"][0]["markup"]


def test_convert_without_files():
    response = client.post("/api/convert", data={"canvas": "widescreen"})
    assert response.status_code == 400


def test_convert_unsupported_extension():
    response = client.post("/api/convert", files=[("files", ("photo.png", b"\x89PNG", "image/png"))])
    assert response.status_code == 400
    assert "photo.png" in response.json()["detail"]


def test_convert_rejects_oversized_file():
    app.dependency_overrides[get_settings] = lambda: Settings(max_upload_bytes=16)
    try:
        response = client.post("/api/convert", files=[_svg_file("big.svg", SIMPLE_SVG)])
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 413
