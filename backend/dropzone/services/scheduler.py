"""APScheduler-based ticker for the simulated upload pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler

if TYPE_CHECKING:
    from dropzone.services.upload_pipeline import UploadPipeline

logger = logging.getLogger(__name__)


class UploadTicker:
    """Calls ``UploadPipeline.tick()`` on a fixed interval."""

    def __init__(self, pipeline: UploadPipeline, interval_seconds: float = 0.2):
        self._pipeline = pipeline
        self._interval = interval_seconds
        self._scheduler = AsyncIOScheduler(
            job_defaults={"coalesce": True, "max_instances": 1}
        )

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Register the tick job and start the scheduler."""
        self._scheduler.add_job(
            self._tick,
            "interval",
            seconds=self._interval,
            id="upload_tick",
            name="Advance simulated uploads",
        )
        self._scheduler.start()
        logger.info("Upload ticker started — every %.2fs", self._interval)

    async def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Upload ticker stopped")

    async def _tick(self) -> None:
        try:
            await self._pipeline.tick()
        except Exception as e:
            logger.error("Upload tick failed: %s", e)
