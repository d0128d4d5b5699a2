"""
Club Logo Pipeline entry point.

Uploads the reference image, generates one logo per club through Leonardo,
downloads it and overlays the club name.

Usage:
  club-logos
  python -m club_logos.main

Requires LEO_API_KEY in the environment or in .env.
"""

import asyncio
import logging
import sys

from club_logos.batch_worker import run_batch
from club_logos.config import PipelineSettings, load_settings
from club_logos.errors import ConfigError, LogoPipelineError
from club_logos.ia_generator import LeonardoClient

logger = logging.getLogger("club_logos")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def run(settings: PipelineSettings) -> int:
    """Run the batch and map errors to an exit code."""
    client = LeonardoClient(settings)
    try:
        await run_batch(settings, client)
    except LogoPipelineError as e:
        logger.error(f"Error: {e.describe()}")
        return 1
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1
    finally:
        await client.close()
    return 0


def main() -> int:
    configure_logging()

    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    return asyncio.run(run(settings))


if __name__ == "__main__":
    sys.exit(main())
