from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from storybeat.images import ImageAsset
from storybeat.models import Character
from storybeat.opcodes.engine import RewriteEngine


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs.

    In CI we don't auto-load `.env`, so local overrides (e.g. layout tweaks or
    STORYBEAT_DEBUG) never leak into the suite there.
    """

    if os.environ.get("CI"):
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture(autouse=True)
def _fresh_engine(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Each test starts without a cached engine and with debug mode off."""

    from storybeat.runtime import reset_engine_for_tests

    monkeypatch.delenv("STORYBEAT_DEBUG", raising=False)
    monkeypatch.delenv("STORYBEAT_MAX_NESTING", raising=False)
    reset_engine_for_tests()
    yield
    reset_engine_for_tests()


@pytest.fixture()
def engine() -> RewriteEngine:
    return RewriteEngine()


@pytest.fixture()
def happy() -> ImageAsset:
    return ImageAsset(path="eric/happy.png", width=120, height=200)


@pytest.fixture()
def eric(happy: ImageAsset) -> Character:
    """A character with a current image (draws before speaking)."""

    return Character(
        dialog_name="Eric",
        text_color="#3a3",
        images={"happy": happy, "sad": ImageAsset(path="eric/sad.png", width=100, height=180)},
        current_image="happy",
    )


@pytest.fixture()
def jeff() -> Character:
    """A character with no image at all."""

    return Character(dialog_name="Jeff", text_color="#a33")


@pytest.fixture()
def client() -> Generator:
    from fastapi.testclient import TestClient

    from storybeat.api.deps import engine_dependency
    from storybeat.main import app

    app.dependency_overrides[engine_dependency] = lambda: RewriteEngine()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
