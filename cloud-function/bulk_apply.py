"""
Bulk apply: push a computed price set to a storefront region by region.

A failing region never aborts the rest of the batch. Each failure is recorded
against its item and the run carries on.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import config
from errors import PartialApplyFailure
from models import (
    BulkApplyAggregate,
    BulkApplyItem,
    BulkApplyResult,
    Money,
    PriceChange,
    format_money_plain,
)
from ndjson_stream import NdjsonWriter

logger = logging.getLogger(__name__)

GRANULARITY_TERRITORY = 'territory'
GRANULARITY_ITEM = 'item'
GRANULARITIES = (GRANULARITY_TERRITORY, GRANULARITY_ITEM)

SKIPPED_AFTER_FAILURE = 'Skipped due to earlier failure'

ProgressCallback = Callable[[int, int, Optional[str]], None]


class PriceUpdater:
    """
    Storefront collaborator performing one regional price update.
    GooglePlayPriceUpdater in play_client.py is the production implementation.
    """

    def supports_region(self, item: BulkApplyItem, region_code: str) -> bool:
        return True

    def update_region_price(
        self,
        item_id: str,
        region_code: str,
        new_price: Money,
        base_plan_id: Optional[str] = None,
    ) -> Optional[Money]:
        """
        Set the price of one item in one region.

        Returns:
            The price that was replaced, if the storefront reported one
        """
        raise NotImplementedError


def status_code_of(error: Exception) -> Optional[int]:
    """HTTP status carried by a storefront error (googleapiclient HttpError or requests HTTPError)"""
    status = getattr(error, 'status_code', None)
    if status is None:
        status = getattr(getattr(error, 'resp', None), 'status', None)
    if status is None:
        status = getattr(getattr(error, 'response', None), 'status_code', None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def is_retryable(error: Exception) -> bool:
    return status_code_of(error) in config.RETRYABLE_STATUS_CODES


class _Cancelled(Exception):
    pass


class _RunState:
    """Mutable bookkeeping for one apply() call, guarded by a lock"""

    def __init__(self, items: List[BulkApplyItem], plan: Dict[int, List[str]], skipped: Dict[int, List[str]]):
        self.lock = threading.Lock()
        self.items = items
        self.changes: Dict[int, List[PriceChange]] = {index: [] for index in plan}
        self.failures: Dict[int, List[PartialApplyFailure]] = {index: [] for index in plan}
        self.stopped_regions: Dict[int, List[str]] = {index: [] for index in plan}
        self.remaining: Dict[int, int] = {index: len(regions) for index, regions in plan.items()}
        self.skipped = skipped
        self.stopped = False
        self.completed = 0


class BulkApplyOrchestrator:
    """Applies territory prices for many items, collecting per-region outcomes"""

    def __init__(
        self,
        updater: PriceUpdater,
        concurrency: int = config.BULK_APPLY_CONCURRENCY,
        granularity: str = GRANULARITY_TERRITORY,
        max_retries: int = config.BULK_APPLY_MAX_RETRIES,
        retry_delay: float = config.BULK_APPLY_RETRY_DELAY_SECONDS,
        stop_on_failure: bool = False,
    ):
        if granularity not in GRANULARITIES:
            raise ValueError(f"granularity must be one of {GRANULARITIES}, got {granularity!r}")
        self.updater = updater
        self.concurrency = max(1, int(concurrency))
        self.granularity = granularity
        self.max_retries = max(1, int(max_retries))
        self.retry_delay = retry_delay
        self.stop_on_failure = stop_on_failure

    def apply(
        self,
        items: List[BulkApplyItem],
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkApplyAggregate:
        """
        Apply every item's territory prices.

        Args:
            items: Items with their per-territory target prices
            on_progress: Called with (completed, total, phase) after each unit of work
            cancel_event: Set to stop issuing updates; finished updates are kept

        Returns:
            BulkApplyAggregate (counts at the configured granularity)
        """
        cancel_event = cancel_event or threading.Event()

        plan: Dict[int, List[str]] = {}
        skipped: Dict[int, List[str]] = {}
        for index, item in enumerate(items):
            regions, unsupported = [], []
            for region_code in sorted(item.territory_prices):
                if self.updater.supports_region(item, region_code):
                    regions.append(region_code)
                else:
                    unsupported.append(region_code)
            plan[index] = regions
            skipped[index] = unsupported
            if unsupported:
                logger.info(f"{item.id}: skipping unsupported regions {', '.join(unsupported)}")

        units = [(index, region_code) for index, regions in plan.items() for region_code in regions]
        total = len(units) if self.granularity == GRANULARITY_TERRITORY else len(items)
        state = _RunState(items, plan, skipped)

        logger.info(
            f"Applying {len(units)} regional prices across {len(items)} items "
            f"(concurrency={self.concurrency}, granularity={self.granularity})"
        )

        def report(completed: Optional[int]) -> None:
            if on_progress and completed is not None and not cancel_event.is_set():
                on_progress(completed, total, 'updating')

        # Items with nothing to update are finished before any call is made
        if self.granularity == GRANULARITY_ITEM:
            empty = [index for index, regions in plan.items() if not regions]
            if empty:
                state.completed += len(empty)
                report(state.completed)

        def run(unit: Tuple[int, str]) -> None:
            self._run_unit(unit, state, cancel_event, report)

        if self.concurrency == 1:
            for unit in units:
                if cancel_event.is_set():
                    break
                run(unit)
        else:
            with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
                for future in [executor.submit(run, unit) for unit in units]:
                    future.result()

        aggregate = self._aggregate(state, total, cancel_event.is_set())
        logger.info(
            f"Bulk apply finished: {aggregate.successful} successful, {aggregate.failed} failed, "
            f"{len(aggregate.skipped)} skipped{' (cancelled)' if aggregate.cancelled else ''}"
        )
        return aggregate

    def _run_unit(
        self,
        unit: Tuple[int, str],
        state: _RunState,
        cancel_event: threading.Event,
        report: Callable[[Optional[int]], None],
    ) -> None:
        """Process one (item, region) pair, reporting progress when a progress unit finished"""
        index, region_code = unit
        item = state.items[index]

        if cancel_event.is_set():
            return

        with state.lock:
            if state.stopped:
                state.stopped_regions[index].append(region_code)
                report(self._complete_unit(index, state))
                return

        new_price = item.territory_prices[region_code]
        try:
            old_price = self._update_with_retry(item, region_code, new_price, cancel_event)
        except _Cancelled:
            return
        except Exception as e:
            failure = PartialApplyFailure(item.id, region_code, e)
            logger.error(f"Failed to update {item.id} in {region_code}: {e}")
            with state.lock:
                state.failures[index].append(failure)
                if self.stop_on_failure:
                    state.stopped = True
                report(self._complete_unit(index, state))
            return

        change = PriceChange(
            region_code=region_code,
            old_price=format_money_plain(old_price) if old_price else None,
            new_price=format_money_plain(new_price),
        )
        with state.lock:
            state.changes[index].append(change)
            # Reported under the lock so completed counts reach the callback in order
            report(self._complete_unit(index, state))

    def _complete_unit(self, index: int, state: _RunState) -> Optional[int]:
        # Caller holds state.lock
        state.remaining[index] -= 1
        if self.granularity == GRANULARITY_ITEM and state.remaining[index] > 0:
            return None
        state.completed += 1
        return state.completed

    def _update_with_retry(
        self,
        item: BulkApplyItem,
        region_code: str,
        new_price: Money,
        cancel_event: threading.Event,
    ) -> Optional[Money]:
        for attempt in range(self.max_retries):
            if cancel_event.is_set():
                raise _Cancelled()
            try:
                return self.updater.update_region_price(item.id, region_code, new_price, item.base_plan_id)
            except Exception as e:
                if not is_retryable(e) or attempt == self.max_retries - 1:
                    raise
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(
                    f"Retryable error updating {item.id} in {region_code} "
                    f"(attempt {attempt + 1}/{self.max_retries}), retrying in {delay}s: {e}"
                )
                if cancel_event.wait(delay):
                    raise _Cancelled()
        raise _Cancelled()

    def _aggregate(
        self,
        state: _RunState,
        total: int,
        cancelled: bool,
    ) -> BulkApplyAggregate:
        results: List[BulkApplyResult] = []
        successful = failed = 0

        for index, item in enumerate(state.items):
            failures = sorted(state.failures[index], key=lambda f: f.region_code)
            stopped_regions = sorted(state.stopped_regions[index])
            failure_records = [{'regionCode': f.region_code, 'error': str(f.cause)} for f in failures]
            failure_records += [{'regionCode': code, 'error': SKIPPED_AFTER_FAILURE} for code in stopped_regions]

            if failures:
                error = '; '.join(str(f) for f in failures)
            elif stopped_regions:
                error = SKIPPED_AFTER_FAILURE
            else:
                error = None

            results.append(BulkApplyResult(
                item_id=item.id,
                success=not failure_records,
                base_plan_id=item.base_plan_id,
                error=error,
                changes=sorted(state.changes[index], key=lambda c: c.region_code),
                failures=failure_records,
                skipped=list(state.skipped[index]),
            ))

            if self.granularity == GRANULARITY_TERRITORY:
                successful += len(state.changes[index])
                failed += len(failure_records)
            elif state.remaining[index] == 0:
                if failure_records:
                    failed += 1
                else:
                    successful += 1

        skipped = sorted({code for codes in state.skipped.values() for code in codes})
        return BulkApplyAggregate(
            total=total,
            successful=successful,
            failed=failed,
            granularity=self.granularity,
            results=results,
            skipped=skipped,
            cancelled=cancelled,
        )


def stream_bulk_apply(
    orchestrator: BulkApplyOrchestrator,
    items: List[BulkApplyItem],
    writer: Optional[NdjsonWriter] = None,
) -> Iterator[bytes]:
    """
    Run a bulk apply on a worker thread and yield its NDJSON event lines.

    The stream ends with a done event carrying the aggregate, or an error event
    if the run itself blew up. Closing the generator (client disconnect)
    cancels the run.
    """
    writer = writer or NdjsonWriter()
    cancel_event = threading.Event()
    progress: Dict[str, Any] = {'completed': 0, 'total': 0}

    def on_progress(completed: int, total: int, phase: Optional[str]) -> None:
        progress['completed'], progress['total'] = completed, total
        writer.progress(completed, total, phase)

    def worker() -> None:
        try:
            aggregate = orchestrator.apply(items, on_progress=on_progress, cancel_event=cancel_event)
        except Exception as e:
            logger.error(f"Bulk apply failed: {e}", exc_info=True)
            writer.error(str(e), progress['completed'], progress['total'])
            return
        if cancel_event.is_set():
            writer.close()
        else:
            writer.done(aggregate.to_dict())

    thread = threading.Thread(target=worker, name='bulk-apply', daemon=True)
    thread.start()

    try:
        for line in writer.lines():
            yield line
    finally:
        if thread.is_alive():
            logger.info("Bulk apply stream closed early, cancelling")
            cancel_event.set()
            writer.close()
