"""Batch Worker for Club Logo Generation.

Processes the club list strictly one club at a time:
upload reference -> (generate -> poll -> download -> overlay -> pause) per club.

Any error aborts the whole batch. Artifacts written for earlier clubs are
left on disk.

Usage:
    client = LeonardoClient(settings)
    try:
        stats = await run_batch(settings, client)
    finally:
        await client.close()
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from club_logos.clubs import CLUBS, ClubSpec, build_final_filename, build_raw_filename
from club_logos.config import PipelineSettings
from club_logos.ia_generator import LeonardoClient
from club_logos.processor import add_text_to_image

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    GENERATING = "generating"
    POLLING = "polling"
    DOWNLOADING = "downloading"
    RENDERING = "rendering"
    DONE = "done"


@dataclass
class LogoArtifact:
    """Files produced for one club."""

    club: ClubSpec
    raw_path: Path
    final_path: Path


@dataclass
class BatchStats:
    """Progress of a batch run."""

    total_clubs: int = 0
    state: PipelineState = PipelineState.IDLE
    current_club: Optional[str] = None
    init_image_id: Optional[str] = None
    artifacts: list[LogoArtifact] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def completed(self) -> int:
        return len(self.artifacts)

    def transition(self, state: PipelineState, club: Optional[ClubSpec] = None) -> None:
        self.state = state
        self.current_club = club.name if club else None
        logger.debug(f"Batch state -> {state.value} ({self.current_club or '-'})")

    def summary(self) -> str:
        elapsed = time.monotonic() - self.started_at
        return f"{self.completed}/{self.total_clubs} clubs in {elapsed:.1f}s"


async def process_club(
    client: LeonardoClient,
    settings: PipelineSettings,
    club: ClubSpec,
    init_image_id: str,
    stats: BatchStats,
) -> LogoArtifact:
    """Run generate -> poll -> download -> overlay for a single club."""
    stats.transition(PipelineState.GENERATING, club)
    generation_id = await client.start_generation(club.name, club.color, init_image_id)

    stats.transition(PipelineState.POLLING, club)
    image_url = await client.poll_for_image(generation_id)

    stats.transition(PipelineState.DOWNLOADING, club)
    raw_path = await client.download_image(image_url, build_raw_filename(club))

    stats.transition(PipelineState.RENDERING, club)
    final_path = Path(settings.LOGOS_OUTPUT_DIR) / build_final_filename(club)
    result = add_text_to_image(raw_path, final_path, club.name, settings)

    return LogoArtifact(club=club, raw_path=raw_path, final_path=result.path)


async def run_batch(
    settings: PipelineSettings,
    client: LeonardoClient,
    clubs: Sequence[ClubSpec] = CLUBS,
) -> BatchStats:
    """Generate and annotate logos for every club, in order.

    Errors propagate to the caller; no club after a failing one is started.
    """
    stats = BatchStats(total_clubs=len(clubs))

    stats.transition(PipelineState.UPLOADING)
    logger.info("Uploading reference image...")
    # Assumes the reference id stays valid for the whole run
    stats.init_image_id = await client.upload_reference_image(settings.LOGOS_REFERENCE_IMAGE)

    for index, club in enumerate(clubs, start=1):
        logger.info(f"({index}/{len(clubs)}) Generating for: {club.name}")

        artifact = await process_club(client, settings, club, stats.init_image_id, stats)
        stats.artifacts.append(artifact)

        # Short pause to avoid hitting rate limits
        await asyncio.sleep(settings.LOGOS_CLUB_DELAY_SECONDS)

    stats.transition(PipelineState.DONE)
    logger.info(f"All done! Logos saved in {settings.LOGOS_OUTPUT_DIR} ({stats.summary()})")
    return stats
