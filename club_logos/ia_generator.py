"""Leonardo IA Logo Generator Client.

Wraps the three Leonardo REST endpoints used by the pipeline plus the
download of finished images.

Flow:
1. POST /init-image -> reference image id (once per run)
2. POST /generations -> generation id (once per club)
3. Poll GET /generations/<id> until succeeded / failed / attempts exhausted
4. GET <result url> -> raw image bytes on disk

Usage:
    client = LeonardoClient(settings)
    ref_id = await client.upload_reference_image("reference.png")
    job_id = await client.start_generation("Chelsea FC", "royal blue", ref_id)
    url = await client.poll_for_image(job_id)
    path = await client.download_image(url, "chelsea_fc.jpg")
    await client.close()
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import httpx

from club_logos.config import PipelineSettings
from club_logos.errors import (
    DownloadError,
    GenerationFailedError,
    GenerationRequestError,
    PollTimeoutError,
    UploadError,
)

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = (
    "Modern esport football logo using the layout of the reference image, "
    "{color} color theme, shield shape, central soccer ball, clean background, "
    "no text, no writing, no letters"
)


class JobStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Leonardo reports COMPLETE; older payloads and mocks use succeeded.
_STATUS_MAP = {
    "succeeded": JobStatus.SUCCEEDED,
    "complete": JobStatus.SUCCEEDED,
    "failed": JobStatus.FAILED,
}


@dataclass
class GenerationJob:
    """Snapshot of a remote generation job."""

    id: str
    status: JobStatus
    result_url: Optional[str] = None

    @classmethod
    def from_response(cls, job_id: str, data: dict) -> "GenerationJob":
        """Parse a GET /generations/<id> response body.

        Raises:
            GenerationRequestError: If the body is not a JSON object.
        """
        if not isinstance(data, dict):
            raise GenerationRequestError(
                f"Unexpected status response for {job_id}", payload=data
            )
        body = data.get("generations_by_pk") or data
        if not isinstance(body, dict):
            raise GenerationRequestError(
                f"Unexpected status response for {job_id}", payload=data
            )
        raw_status = str(body.get("status") or "").lower()
        status = _STATUS_MAP.get(raw_status, JobStatus.PENDING)

        result_url = None
        images = body.get("generated_images") or []
        if images and isinstance(images[0], dict):
            result_url = images[0].get("url")

        return cls(id=job_id, status=status, result_url=result_url)


def build_logo_prompt(color: str) -> str:
    """Build the generation prompt for a club color theme."""
    return PROMPT_TEMPLATE.format(color=color)


def build_generation_payload(
    settings: PipelineSettings,
    prompt: str,
    init_image_id: str,
) -> dict:
    """Build the POST /generations body.

    The reference image is bound twice: as the init image (influence
    LOGOS_INIT_STRENGTH) and as a controlnet block at high strength.
    """
    return {
        "modelId": settings.LEO_MODEL_ID,
        "prompt": prompt,
        "init_image_id": init_image_id,
        "init_strength": settings.LOGOS_INIT_STRENGTH,
        "width": settings.LOGOS_WIDTH,
        "height": settings.LOGOS_HEIGHT,
        "num_images": settings.LOGOS_NUM_IMAGES,
        "presetStyle": settings.LOGOS_PRESET_STYLE,
        "alchemy": settings.LOGOS_ALCHEMY,
        "controlnets": [
            {
                "initImageId": init_image_id,
                "initImageType": "UPLOADED",
                "preprocessorId": settings.LOGOS_CONTROLNET_PREPROCESSOR_ID,
                "strengthType": settings.LOGOS_CONTROLNET_STRENGTH_TYPE,
            }
        ],
    }


def _error_payload(response: httpx.Response) -> Any:
    """Best-effort decode of an error response body."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


class LeonardoClient:
    """Async client for the Leonardo REST API."""

    def __init__(
        self,
        settings: PipelineSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.api_key = settings.LEO_API_KEY.strip()
        self.base_url = settings.LEO_BASE_URL.strip().rstrip("/")
        self.timeout = settings.LEO_HTTP_TIMEOUT_SECONDS
        self.poll_interval = settings.LOGOS_POLL_INTERVAL_SECONDS
        self.max_attempts = settings.LOGOS_POLL_MAX_ATTEMPTS
        self.output_dir = Path(settings.LOGOS_OUTPUT_DIR)

        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @property
    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    # ------------------------------------------------------------------
    # Reference upload
    # ------------------------------------------------------------------

    async def upload_reference_image(self, file_path: str | Path) -> str:
        """Upload the reference image and return its init image id.

        Raises:
            UploadError: On read/transport failure or missing identifier.
        """
        path = Path(file_path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise UploadError(f"Cannot read reference image {path}: {e}") from e

        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}/init-image",
                headers=self._auth_headers,
                files={"init_image": (path.name, content)},
                data={"filename": path.name},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise UploadError(
                f"Upload failed: {e.response.status_code}",
                payload=_error_payload(e.response),
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UploadError(f"Upload failed: {e}") from e

        if not isinstance(data, dict):
            raise UploadError("Unexpected upload response", payload=data)

        init_image_id = data.get("init_image_id")
        upload = data.get("uploadInitImage")
        if not init_image_id and isinstance(upload, dict):
            init_image_id = upload.get("id")
        if not init_image_id:
            raise UploadError("No init image id in upload response", payload=data)

        logger.info(f"Reference image uploaded: {init_image_id}")
        return init_image_id

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def start_generation(self, club_name: str, color: str, init_image_id: str) -> str:
        """Submit a generation job for a club and return its id.

        Raises:
            GenerationRequestError: On transport or API-level error.
        """
        prompt = build_logo_prompt(color)
        payload = build_generation_payload(self.settings, prompt, init_image_id)
        logger.debug(f"Generation payload for {club_name}: {payload}")

        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}/generations",
                headers=self._auth_headers,
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise GenerationRequestError(
                f"Generation request failed for {club_name}: {e.response.status_code}",
                payload=_error_payload(e.response),
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationRequestError(f"Generation request failed for {club_name}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("sdGenerationJob") or {}, dict):
            raise GenerationRequestError(
                f"Unexpected generation response for {club_name}", payload=data
            )

        generation_id = (data.get("sdGenerationJob") or {}).get("generationId")
        if not generation_id:
            raise GenerationRequestError(
                f"No generation id in response for {club_name}", payload=data
            )

        logger.info(f"Generation job submitted for {club_name}: {generation_id}")
        return generation_id

    async def get_generation(self, generation_id: str) -> GenerationJob:
        """Query the current state of a generation job.

        Raises:
            GenerationRequestError: If the status query itself fails.
        """
        client = await self._get_client()
        try:
            response = await client.get(
                f"{self.base_url}/generations/{generation_id}",
                headers=self._auth_headers,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise GenerationRequestError(
                f"Status query failed for {generation_id}: {e.response.status_code}",
                payload=_error_payload(e.response),
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationRequestError(f"Status query failed for {generation_id}: {e}") from e

        return GenerationJob.from_response(generation_id, data)

    async def poll_for_image(self, generation_id: str) -> str:
        """Poll a job until its image is ready and return the image URL.

        At most max_attempts queries, poll_interval seconds apart. A job
        reporting failed is terminal; a failing query is retried until the
        budget runs out, then re-raised.

        Raises:
            GenerationFailedError: Job reported failed.
            GenerationRequestError: Last status query errored.
            PollTimeoutError: No finished image within the budget.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                job = await self.get_generation(generation_id)
            except GenerationRequestError as e:
                if attempt == self.max_attempts:
                    raise
                logger.warning(
                    f"Retrying poll for {generation_id} "
                    f"(attempt {attempt}/{self.max_attempts}): {e}"
                )
            else:
                if job.status is JobStatus.SUCCEEDED and job.result_url:
                    logger.info(f"Generation {generation_id} ready after {attempt} poll(s)")
                    return job.result_url
                if job.status is JobStatus.FAILED:
                    raise GenerationFailedError(f"Generation {generation_id} failed")

            if attempt < self.max_attempts:
                await asyncio.sleep(self.poll_interval)

        raise PollTimeoutError(
            f"Timed out waiting for generation {generation_id} "
            f"after {self.max_attempts} attempts"
        )

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    async def download_image(self, url: str, filename: str) -> Path:
        """Download a generated image to <output_dir>/<filename>.

        Overwrites an existing file of the same name.

        Raises:
            DownloadError: On transport, HTTP status or write failure.
        """
        client = await self._get_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DownloadError(
                f"Download failed for {url}: {e.response.status_code}",
                payload=_error_payload(e.response),
            ) from e
        except httpx.HTTPError as e:
            raise DownloadError(f"Download failed for {url}: {e}") from e

        file_path = self.output_dir / filename
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(response.content)
        except OSError as e:
            raise DownloadError(f"Cannot write {file_path}: {e}") from e

        logger.info(f"Saved raw: {filename} ({len(response.content)} bytes)")
        return file_path
