"""
Daily trending filter job.

Once per UTC day, asks the generation service for a trending filter concept
and saves it to the catalog under "AI Generated". The day of the last
successful run is kept in the local state file.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, Optional

from modules.filters.interfaces import IFilterRepository, ITrendGenerator
from modules.filters.models import Filter, FilterCategory, FilterCreate
from modules.generation.interfaces import IGenerationService
from shared.exceptions import FilterFusionError
from shared.local_store import LocalStore

logger = logging.getLogger(__name__)

LAST_TREND_CHECK_KEY = "lastTrendCheck"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class DailyTrendService(ITrendGenerator):
    """Generates at most one trending filter per UTC day."""

    def __init__(
        self,
        generation: IGenerationService,
        repository: IFilterRepository,
        local_store: LocalStore,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._generation = generation
        self._repository = repository
        self._local = local_store
        self._today = today

    def last_check(self) -> Optional[str]:
        value = self._local.get(LAST_TREND_CHECK_KEY)
        return value if isinstance(value, str) else None

    async def check_and_generate_daily_trend(self) -> Optional[Filter]:
        """
        Generate and save today's trending filter if not done yet.

        The marker is only written after a successful save, so a failed
        attempt is retried on the next call.

        Returns:
            The saved Filter, or None if today's filter already exists.

        Raises:
            FilterFusionError: Generation or save failed
        """
        today = self._today().isoformat()
        if self.last_check() == today:
            logger.debug("Daily trend filter already generated today")
            return None

        logger.info("Generating new daily AI filter")
        try:
            generated = await self._generation.generate_trending_filter()
            saved = await self._repository.create(
                FilterCreate(
                    name=generated.name,
                    description=generated.description,
                    prompt=generated.prompt,
                    preview_image_url=generated.preview_image_url,
                    category=FilterCategory.AI_GENERATED,
                )
            )
        except FilterFusionError as e:
            logger.error(f"Failed to generate or save the daily AI filter: {e.message}")
            raise

        self._local.set(LAST_TREND_CHECK_KEY, today)
        logger.info(f"Saved daily AI filter: {saved.name}")
        return saved
