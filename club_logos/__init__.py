"""Club Logo Generation Pipeline.

Generates esport-style club logos from one reference layout via the
Leonardo API, then overlays each club's name.

Outputs per club (in LOGOS_OUTPUT_DIR):
- <slug>.jpg: raw generated image
- <slug>_new.jpg: image with the club name overlaid
"""

from club_logos.config import get_pipeline_settings, PipelineSettings

__all__ = ["get_pipeline_settings", "PipelineSettings"]
