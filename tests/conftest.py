# tests/conftest.py
from __future__ import annotations

import io
import os
from collections.abc import Iterator
from pathlib import Path

import fakeredis
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image

from cornchan.core.context import AppContext
from cornchan.core.settings import Settings
from cornchan.db.keys import BOARDS_KEY
from cornchan.main import create_app
from cornchan.schemas import Board

# Host TestClient reports as the caller address
TEST_CLIENT_HOST = "testclient"
TEST_THRESHOLD = 500 * 1024


def make_image(fmt: str = "PNG", size: tuple[int, int] = (64, 64), *, noise: bool = False) -> bytes:
    """Return an encoded image; noise makes the payload incompressible."""
    if noise:
        image = Image.frombytes("RGB", size, os.urandom(size[0] * size[1] * 3))
    else:
        image = Image.new("RGB", size)
        for x in range(size[0]):
            image.putpixel((x, x % size[1]), (x % 256, 128, 255 - x % 256))
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def redis_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture()
def redis_client(redis_server: fakeredis.FakeServer) -> fakeredis.FakeAsyncRedis:
    return fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True)


@pytest.fixture()
def sync_redis(redis_server: fakeredis.FakeServer) -> fakeredis.FakeRedis:
    """Synchronous view of the same fake server for seeding and assertions."""
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture()
def public_dir(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture()
def test_settings(public_dir: Path) -> Settings:
    return Settings(
        public_dir=str(public_dir),
        seed_default_board=False,
        image_size_threshold=TEST_THRESHOLD,
    )


@pytest.fixture()
def context(test_settings: Settings, redis_client: fakeredis.FakeAsyncRedis) -> AppContext:
    return AppContext.build(test_settings, client=redis_client)


@pytest.fixture()
def app(context: AppContext) -> FastAPI:
    return create_app(context=context)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def board(sync_redis: fakeredis.FakeRedis) -> Board:
    """Seed the ``/r/`` board."""
    random_board = Board(name="Random", slug="r", description="anything goes")
    sync_redis.hset(BOARDS_KEY, "board:r", random_board.model_dump_json())
    return random_board


@pytest.fixture()
def png_bytes() -> bytes:
    return make_image("PNG")
