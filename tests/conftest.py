from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from media_browser import config
from media_browser.storage.paths import RootContext


@pytest.fixture()
def media_root(tmp_path: Path) -> Path:
    root = tmp_path / "media"
    root.mkdir()
    return root


@pytest.fixture()
def root_context(media_root: Path) -> RootContext:
    return RootContext.from_path(media_root)


@pytest.fixture()
def env_settings(media_root: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    monkeypatch.setenv("MEDIA_BROWSER_ROOT_DIRECTORY", str(media_root))
    monkeypatch.setenv("MEDIA_BROWSER_STREAM_CHUNK_SIZE", "4096")
    monkeypatch.setenv("MEDIA_BROWSER_CORS_ORIGINS", "*")
    config.reset_settings_cache()
    config.get_settings()
    yield media_root
    config.reset_settings_cache()


@pytest.fixture()
def client(env_settings: Path) -> TestClient:
    module = importlib.import_module("media_browser.main")
    importlib.reload(module)
    application = module.create_app()
    return TestClient(application)
