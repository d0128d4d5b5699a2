"""Shared fixtures for logo pipeline tests."""

import io
import json

import httpx
import pytest
from PIL import Image

from club_logos.config import PipelineSettings


def make_png_bytes(size=(512, 512), color=(10, 20, 120)) -> bytes:
    """Solid-color PNG used as a fake generated logo."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at tmp_path, with no real delays."""
    reference = tmp_path / "reference.png"
    reference.write_bytes(make_png_bytes())
    return PipelineSettings(
        LEO_API_KEY="test-key",
        LEO_BASE_URL="https://leo.test/api/rest/v1",
        LOGOS_REFERENCE_IMAGE=str(reference),
        LOGOS_OUTPUT_DIR=str(tmp_path / "output"),
        LOGOS_POLL_INTERVAL_SECONDS=3.0,
        LOGOS_CLUB_DELAY_SECONDS=2.0,
    )


class FakeLeonardo:
    """Scripted stand-in for the Leonardo API behind httpx.MockTransport.

    statuses: list of status bodies (dict) or exceptions returned by
    successive GET /generations/<id> calls; the last one repeats.
    """

    def __init__(self, statuses=None, init_image_id="ref-1", generation_id="job-1",
                 image_bytes=None):
        self.statuses = list(statuses or [{"status": "succeeded",
                                           "generated_images": [{"url": "http://x/img.png"}]}])
        self.init_image_id = init_image_id
        self.generation_id = generation_id
        self.image_bytes = image_bytes or make_png_bytes()
        self.requests: list[httpx.Request] = []
        self.generation_payloads: list[dict] = []
        self.status_calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path.endswith("/init-image"):
            return httpx.Response(200, json={"init_image_id": self.init_image_id})

        if request.method == "POST" and path.endswith("/generations"):
            self.generation_payloads.append(json.loads(request.content))
            return httpx.Response(
                200, json={"sdGenerationJob": {"generationId": self.generation_id}}
            )

        if request.method == "GET" and "/generations/" in path:
            index = min(self.status_calls, len(self.statuses) - 1)
            self.status_calls += 1
            item = self.statuses[index]
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                # Fresh copy, the client takes ownership of each response
                return httpx.Response(item.status_code, content=item.content,
                                      headers=item.headers)
            return httpx.Response(200, json=item)

        if request.url.host == "x":
            return httpx.Response(200, content=self.image_bytes)

        return httpx.Response(404, json={"error": "not found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_leonardo():
    return FakeLeonardo()


@pytest.fixture
def make_fake():
    """Factory for FakeLeonardo with scripted status responses."""
    return FakeLeonardo
