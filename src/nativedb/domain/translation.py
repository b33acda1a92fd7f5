"""Bounded producer/consumer pipeline that localizes pending natives.

One producer pages through Pending records and feeds a bounded queue of
capacity ``2 * workers``; the bound is the only backpressure. Each worker
pulls records until it sees the end-of-stream marker, calls the translation
service with a small fixed-backoff retry budget and persists the result. A
record whose retries run out stays Pending for a later run.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from queue import Queue
from typing import TYPE_CHECKING, Final

from nativedb.domain.errors import TranslationServiceError
from nativedb.domain.model import NativeParam, NativeRecord, TranslationStatus
from nativedb.domain.ports import TranslationRequest

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from nativedb.domain.ports import TranslationResult, Translator, UnitOfWorkFactory

log = getLogger(__name__)

PENDING_BATCH_SIZE: Final[int] = 100
IDLE_RETRY_SECONDS: Final[float] = 2.0
RETRY_BACKOFF_SECONDS: Final[float] = 1.0
MAX_ATTEMPTS: Final[int] = 3

_END_OF_STREAM: Final[None] = None


class Outcome(StrEnum):
    OK = "OK"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass(slots=True)
class TranslationRunResult:
    total: int = 0
    completed: int = 0
    translated: int = 0
    skipped: int = 0
    failed: int = 0


class ProgressCounter:
    """Completed-record counter shared by all workers."""

    def __init__(self, total: int) -> None:
        self.total = total
        self._lock = threading.Lock()
        self._completed = 0
        self._by_outcome = dict.fromkeys(Outcome, 0)

    def record(self, outcome: Outcome) -> int:
        with self._lock:
            self._completed += 1
            self._by_outcome[outcome] += 1
            return self._completed

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def snapshot(self) -> TranslationRunResult:
        with self._lock:
            return TranslationRunResult(
                total=self.total,
                completed=self._completed,
                translated=self._by_outcome[Outcome.OK],
                skipped=self._by_outcome[Outcome.SKIPPED],
                failed=self._by_outcome[Outcome.FAILED],
            )


def needs_translation(record: NativeRecord) -> bool:
    if record.description_original.strip():
        return True
    return any(param.description.strip() for param in record.params)


def build_request(record: NativeRecord) -> TranslationRequest:
    return TranslationRequest(
        name=record.name,
        description=record.description_original,
        params={param.name: param.description for param in record.params if param.description},
    )


def apply_localized_params(
    params: Iterable[NativeParam],
    localized: Mapping[str, str],
) -> list[NativeParam]:
    """Merge translated parameter text by name; unknown names are ignored."""

    merged: list[NativeParam] = []
    for param in params:
        text = localized.get(param.name)
        merged.append(param.with_localized(text) if text else param)
    return merged


class TranslationPipeline:
    def __init__(
        self,
        *,
        unit_of_work_factory: UnitOfWorkFactory,
        translator: Translator,
        workers: int,
        batch_size: int = PENDING_BATCH_SIZE,
        idle_interval: float = IDLE_RETRY_SECONDS,
        retry_backoff: float = RETRY_BACKOFF_SECONDS,
        max_attempts: int = MAX_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if workers < 1:
            raise ValueError("Translation pipeline needs at least one worker")
        self.unit_of_work_factory = unit_of_work_factory
        self.translator = translator
        self.workers = workers
        self.batch_size = batch_size
        self.idle_interval = idle_interval
        self.retry_backoff = retry_backoff
        self.max_attempts = max_attempts
        self._sleep = sleep

    def run(self) -> TranslationRunResult:
        """Translate Pending natives until none are left to dispatch."""

        total = self._count_pending()
        if total == 0:
            log.info("No pending translation tasks found. All done!")
            return TranslationRunResult()

        log.info("Starting translation: pending=%d, workers=%d", total, self.workers)
        queue: Queue[NativeRecord | None] = Queue(maxsize=2 * self.workers)
        progress = ProgressCounter(total)

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="translate") as pool:
            consumers = [pool.submit(self._consume, queue, progress) for _ in range(self.workers)]
            try:
                self._produce(queue)
            finally:
                for _ in range(self.workers):
                    queue.put(_END_OF_STREAM)
            for consumer in consumers:
                consumer.result()

        result = progress.snapshot()
        log.info(
            "Translation job finished: completed=%d/%d, translated=%d, skipped=%d, failed=%d",
            result.completed,
            result.total,
            result.translated,
            result.skipped,
            result.failed,
        )
        return result

    # Producer -----------------------------------------------------------------

    def _produce(self, queue: Queue[NativeRecord | None]) -> None:
        dispatched: set[str] = set()
        cursor: str | None = None
        while True:
            with self.unit_of_work_factory() as uow:
                batch = list(
                    uow.repositories.natives.list_pending(limit=self.batch_size, after=cursor)
                )
            if batch:
                cursor = batch[-1].hash
                for record in batch:
                    if record.hash in dispatched:
                        continue
                    dispatched.add(record.hash)
                    queue.put(record)
                continue

            if not self._has_undispatched(dispatched):
                return
            log.info("New pending natives appeared; rescanning in %.0fs", self.idle_interval)
            self._sleep(self.idle_interval)
            cursor = None

    def _has_undispatched(self, dispatched: set[str]) -> bool:
        with self.unit_of_work_factory() as uow:
            natives = uow.repositories.natives
            if natives.count_pending() == 0:
                return False
            # the rest is either in flight or deferred after exhausting retries
            return bool(natives.pending_hashes() - dispatched)

    def _count_pending(self) -> int:
        with self.unit_of_work_factory() as uow:
            return uow.repositories.natives.count_pending()

    # Consumers ----------------------------------------------------------------

    def _consume(self, queue: Queue[NativeRecord | None], progress: ProgressCounter) -> None:
        while (record := queue.get()) is not _END_OF_STREAM:
            try:
                outcome = self._process(record)
            except Exception:  # noqa: BLE001
                log.exception("Unexpected failure while translating %s", record.hash)
                outcome = Outcome.FAILED
            current = progress.record(outcome)
            log.info("[%4d/%d] [%s] %s", current, progress.total, outcome, record.name)

    def _process(self, record: NativeRecord) -> Outcome:
        if not needs_translation(record):
            self._save(record.hash, "", record.params)
            return Outcome.SKIPPED

        result = self._translate_with_retry(record)
        if result is None:
            return Outcome.FAILED

        params = apply_localized_params(record.params, result.params)
        self._save(record.hash, result.description, params)
        return Outcome.OK

    def _translate_with_retry(self, record: NativeRecord) -> TranslationResult | None:
        request = build_request(record)
        last_error: TranslationServiceError | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self.translator(request)
            except TranslationServiceError as exc:
                last_error = exc
                log.debug(
                    "Attempt %d/%d failed for %s: %s", attempt, self.max_attempts, record.name, exc
                )
            if attempt < self.max_attempts:
                self._sleep(self.retry_backoff)

        log.warning(
            "Translation failed for %s after %d attempts, left pending: %s",
            record.name,
            self.max_attempts,
            last_error,
        )
        return None

    def _save(self, native_hash: str, description: str, params: list[NativeParam]) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.natives.save_translation(
                native_hash,
                description_localized=description,
                params=params,
                status=TranslationStatus.TRANSLATED,
            )
            uow.commit()
