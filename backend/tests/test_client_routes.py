from __future__ import annotations

from promo_app.settings import settings


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_client_config(client):
    response = client.get("/api/config")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["users"] == settings.OPERATORS
    assert data["default_currency"] == "eur"
    assert data["chunk_size"] == 4000


def test_index_served(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Promo Code Generator" in response.text


def test_unknown_path_falls_back_to_index(client):
    response = client.get("/history/latest")
    assert response.status_code == 200
    assert "START_GENERATION" in response.text


def test_static_asset_served(client, tmp_path, monkeypatch):
    (tmp_path / "index.html").write_text("<html>index</html>")
    (tmp_path / "app.css").write_text("body { margin: 0; }")
    monkeypatch.setattr(settings, "STATIC_DIR", tmp_path)

    response = client.get("/app.css")
    assert response.status_code == 200
    assert response.text == "body { margin: 0; }"


def test_missing_client_build(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "STATIC_DIR", tmp_path)

    response = client.get("/")
    assert response.status_code == 404
    assert response.json() == {
        "ok": False,
        "error": {"code": "NOT_FOUND", "message": "Client build not found."},
    }
