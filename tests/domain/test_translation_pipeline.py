from __future__ import annotations

import threading

import pytest

from nativedb.domain.errors import TranslationServiceError
from nativedb.domain.model import NativeParam, NativeRecord, TranslationStatus
from nativedb.domain.ports import TranslationRequest, TranslationResult
from nativedb.domain.translation import (
    Outcome,
    ProgressCounter,
    TranslationPipeline,
    apply_localized_params,
    build_request,
    needs_translation,
)
from tests.helpers.catalog import (
    FailingTranslator,
    InMemoryCatalog,
    RecordingTranslator,
    make_record,
)


def _pipeline(
    catalog: InMemoryCatalog,
    translator: RecordingTranslator,
    *,
    workers: int = 5,
    sleeps: list[float] | None = None,
) -> TranslationPipeline:
    recorded = sleeps if sleeps is not None else []
    return TranslationPipeline(
        unit_of_work_factory=catalog.unit_of_work,
        translator=translator,
        workers=workers,
        sleep=recorded.append,
    )


def test_pipeline_translates_every_pending_record_once() -> None:
    catalog = InMemoryCatalog(make_record(f"0x{index:08X}") for index in range(250))
    translator = RecordingTranslator()

    result = _pipeline(catalog, translator, workers=5).run()

    assert translator.calls <= 250
    assert len({request.name for request in translator.requests}) == translator.calls
    assert result.completed == 250
    assert result.translated == 250
    assert all(
        record.translation_status is TranslationStatus.TRANSLATED
        for record in catalog.natives.values()
    )
    assert catalog.natives["0x00000000"].description_localized == "[zh] Returns something."


def test_pipeline_skips_records_without_source_text() -> None:
    catalog = InMemoryCatalog(
        make_record(
            f"0x{index:08X}",
            description="   ",
            params=[NativeParam(name="p0", type="int")],
        )
        for index in range(10)
    )
    translator = RecordingTranslator()

    result = _pipeline(catalog, translator, workers=3).run()

    assert translator.calls == 0
    assert result.skipped == 10
    for record in catalog.natives.values():
        assert record.translation_status is TranslationStatus.TRANSLATED
        assert record.description_localized == ""
        assert record.params == [NativeParam(name="p0", type="int")]


def test_pipeline_leaves_records_pending_after_exhausting_retries() -> None:
    catalog = InMemoryCatalog(make_record(f"0x{index:08X}") for index in range(4))
    translator = FailingTranslator()
    sleeps: list[float] = []

    result = _pipeline(catalog, translator, workers=2, sleeps=sleeps).run()

    assert result.failed == 4
    assert result.completed == 4
    assert translator.calls == 4 * 3
    assert sleeps.count(1.0) == 4 * 2
    assert all(record.is_pending for record in catalog.natives.values())
    assert catalog.saves == []


def test_pipeline_recovers_on_a_later_attempt() -> None:
    attempts: dict[str, int] = {}
    lock = threading.Lock()

    def flaky(request: TranslationRequest) -> TranslationResult:
        with lock:
            attempts[request.name] = attempts.get(request.name, 0) + 1
            current = attempts[request.name]
        if current < 3:
            raise TranslationServiceError("timeout")
        return TranslationResult(description="ok", params={})

    catalog = InMemoryCatalog([make_record("0x00000001")])
    translator = RecordingTranslator(flaky)

    result = _pipeline(catalog, translator, workers=1).run()

    assert result.translated == 1
    assert translator.calls == 3
    assert catalog.natives["0x00000001"].description_localized == "ok"


def test_pipeline_rescans_when_new_pending_rows_appear_behind_the_cursor() -> None:
    catalog = InMemoryCatalog([make_record("0x00000005")])
    late = make_record("0x00000001")

    def insert_late_row(page: list[NativeRecord]) -> None:
        with catalog.lock:
            if page and late.hash not in catalog.natives:
                catalog.natives[late.hash] = late

    catalog.on_page = insert_late_row
    translator = RecordingTranslator()
    sleeps: list[float] = []

    result = _pipeline(catalog, translator, workers=2, sleeps=sleeps).run()

    assert sleeps == [2.0]
    assert translator.calls == 2
    assert result.translated == 2
    assert late.translation_status is TranslationStatus.TRANSLATED
    assert not any(record.is_pending for record in catalog.natives.values())


def test_pipeline_with_nothing_pending_returns_immediately() -> None:
    catalog = InMemoryCatalog([make_record("0x00000001", status=TranslationStatus.TRANSLATED)])
    translator = RecordingTranslator()

    result = _pipeline(catalog, translator).run()

    assert result.total == 0
    assert translator.calls == 0


def test_pipeline_merges_localized_params_by_name() -> None:
    catalog = InMemoryCatalog(
        [
            make_record(
                "0x00000001",
                params=[
                    NativeParam(name="ped", type="Ped", description="The ped."),
                    NativeParam(name="p1", type="BOOL"),
                ],
            )
        ]
    )

    def respond(request: TranslationRequest) -> TranslationResult:
        return TranslationResult(
            description="说明",
            params={"ped": "角色", "unknown": "忽略"},
        )

    _pipeline(catalog, RecordingTranslator(respond), workers=1).run()

    record = catalog.natives["0x00000001"]
    assert [param.description_localized for param in record.params] == ["角色", None]


def test_pipeline_rejects_non_positive_worker_count() -> None:
    with pytest.raises(ValueError, match="at least one worker"):
        TranslationPipeline(
            unit_of_work_factory=InMemoryCatalog().unit_of_work,
            translator=RecordingTranslator(),
            workers=0,
        )


def test_needs_translation_and_request_shape() -> None:
    record = make_record(
        "0x00000001",
        description="",
        params=[
            NativeParam(name="ped", type="Ped", description="The ped."),
            NativeParam(name="p1", type="BOOL"),
        ],
    )

    request = build_request(record)

    assert needs_translation(record)
    assert request.description == ""
    assert request.params == {"ped": "The ped."}


def test_apply_localized_params_ignores_blank_text() -> None:
    params = [NativeParam(name="a"), NativeParam(name="b")]

    merged = apply_localized_params(params, {"a": "", "b": "乙"})

    assert [param.description_localized for param in merged] == [None, "乙"]


def test_progress_counter_is_thread_safe() -> None:
    counter = ProgressCounter(total=800)

    def work() -> None:
        for _ in range(100):
            counter.record(Outcome.OK)

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = counter.snapshot()
    assert snapshot.completed == 800
    assert snapshot.translated == 800
