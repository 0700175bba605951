from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


PAYLOAD = bytes(range(256)) * 39 + b"0123456789012345"  # 10000 bytes


def _seed(root: Path) -> Path:
    target = root / "clip1.mp4"
    target.write_bytes(PAYLOAD)
    (root / "clip2.mp4").write_bytes(b"second")
    return target


def test_partial_content_range(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    response = client.get("/api/media/stream/clip1.mp4", headers={"Range": "bytes=500-999"})
    assert response.status_code == 206
    assert response.headers["content-range"] == "bytes 500-999/10000"
    assert response.headers["content-length"] == "500"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["content-type"] == "video/mp4"
    assert response.content == PAYLOAD[500:1000]


def test_full_content_without_range(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    response = client.get("/api/media/stream/clip1.mp4")
    assert response.status_code == 200
    assert response.headers["content-length"] == "10000"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["cache-control"] == "public, max-age=31536000"
    assert response.content == PAYLOAD


def test_full_range_equals_full_body(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    full = client.get("/api/media/stream/clip1.mp4")
    ranged = client.get("/api/media/stream/clip1.mp4", headers={"Range": "bytes=0-9999"})
    assert ranged.status_code == 206
    assert ranged.content == full.content


def test_range_past_end_is_not_satisfiable(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    response = client.get("/api/media/stream/clip1.mp4", headers={"Range": "bytes=10000-10000"})
    assert response.status_code == 416
    assert response.headers["content-range"] == "bytes */10000"
    assert response.content == b""

    inverted = client.get("/api/media/stream/clip1.mp4", headers={"Range": "bytes=20-10"})
    assert inverted.status_code == 416


def test_malformed_range_serves_whole_file(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    response = client.get("/api/media/stream/clip1.mp4", headers={"Range": "frames=1-2"})
    assert response.status_code == 200
    assert response.content == PAYLOAD


def test_only_first_range_is_honored(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    response = client.get("/api/media/stream/clip1.mp4", headers={"Range": "bytes=0-9, 100-199"})
    assert response.status_code == 206
    assert response.headers["content-range"] == "bytes 0-9/10000"
    assert response.content == PAYLOAD[:10]


def test_head_reports_headers_only(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    response = client.head("/api/media/stream/clip1.mp4")
    assert response.status_code == 200
    assert response.headers["content-length"] == "10000"
    assert response.headers["content-type"] == "video/mp4"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.content == b""


def test_nested_path_with_encoded_backslash(client: TestClient, env_settings: Path) -> None:
    shows = env_settings / "shows"
    shows.mkdir()
    (shows / "pilot.webm").write_bytes(b"pilot")
    response = client.get("/api/media/stream/shows%5Cpilot.webm")
    assert response.status_code == 200
    assert response.headers["content-type"] == "video/webm"
    assert response.content == b"pilot"


def test_stream_errors(client: TestClient, env_settings: Path) -> None:
    _seed(env_settings)
    (env_settings / "folder").mkdir()
    (env_settings / "notes.txt").write_text("text")

    assert client.get("/api/media/stream").status_code == 400
    assert client.get("/api/media/stream/..%2f..%2fetc%2fpasswd").status_code == 400
    assert client.get("/api/media/stream/missing.mp4").status_code == 404
    assert client.get("/api/media/stream/folder").status_code == 404
    assert client.get("/api/media/stream/notes.txt").status_code == 404
    assert client.head("/api/media/stream/missing.mp4").status_code == 404


def test_overlong_name_is_not_found(client: TestClient, env_settings: Path) -> None:
    long_name = "x" * 300 + ".mp4"
    assert client.get(f"/api/media/stream/{long_name}").status_code == 404
    assert client.head(f"/api/media/stream/{long_name}").status_code == 404


def test_unreadable_media_is_server_error(
    client: TestClient, env_settings: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _seed(env_settings)

    def denied(resolved):
        raise PermissionError(13, "Permission denied", str(resolved.path))

    monkeypatch.setattr("media_browser.api.media.open_media", denied)
    for response in (client.get("/api/media/stream/clip1.mp4"), client.head("/api/media/stream/clip1.mp4")):
        assert response.status_code == 500
    assert client.get("/api/media/stream/clip1.mp4").json() == {"detail": "Internal server error"}
