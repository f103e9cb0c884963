"""Periodic driver for the renewal billing sweep."""
import asyncio
import logging
from typing import Optional

from .renewal_billing import DEFAULT_BATCH_SIZE, RenewalBillingService, RenewalRunSummary, clamp_batch_size

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30 * 60


class RenewalScheduler:
    """
    Runs ``RenewalBillingService.process_due`` on a fixed interval.

    Owned by the process: ``start`` once at startup, ``stop`` at shutdown.
    A pass in flight is allowed to finish; passes never overlap.
    """

    def __init__(
        self,
        billing_service: RenewalBillingService,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        run_on_start: bool = True,
    ) -> None:
        self._billing_service = billing_service
        self._interval_seconds = max(float(interval_seconds), 0.01)
        self._batch_size = clamp_batch_size(batch_size)
        self._run_on_start = run_on_start
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None
        self.passes = 0
        self.last_summary: Optional[RenewalRunSummary] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def start(self) -> None:
        """Start the periodic loop on the running event loop (no-op if already running)."""
        if self.is_running:
            logger.warning("Renewal scheduler already running")
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="renewal-scheduler")
        logger.info(
            f"🚀 Renewal scheduler started (every {self._interval_seconds}s, batch {self._batch_size})"
        )

    async def stop(self) -> None:
        """Signal the loop to exit and wait for the current pass to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("✅ Renewal scheduler stopped")

    async def run_once(self) -> Optional[RenewalRunSummary]:
        """Run a single pass. Errors are logged; the scheduler keeps going."""
        try:
            summary = await self._billing_service.process_due(limit=self._batch_size)
        except Exception as e:
            logger.error(f"Renewal pass failed: {e}", exc_info=True)
            return None
        finally:
            self.passes += 1
        self.last_summary = summary
        return summary

    async def _run(self) -> None:
        if self._run_on_start:
            await self.run_once()
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval_seconds)
            except asyncio.TimeoutError:
                await self.run_once()
