import pytest

from docsum.extraction.exceptions import InvalidTransitionError
from docsum.extraction.models import ExtractionProgress, ExtractionStage
from docsum.extraction.state import (
    Event,
    ExtractionState,
    Failed,
    Finished,
    OcrRead,
    OcrStarted,
    PdfLoaded,
    Phase,
    TextRead,
    TextStarted,
    initial_state,
    transition,
)


def _run(events: list[Event]) -> tuple[ExtractionState, list[ExtractionProgress]]:
    state = initial_state()
    emitted: list[ExtractionProgress] = []
    for event in events:
        state, progress = transition(state, event)
        if progress is not None:
            emitted.append(progress)
    return state, emitted


class TestHappyPath:
    def test_initial_state_is_reading(self) -> None:
        state = initial_state()
        assert state.phase is Phase.READING
        assert state.progress.total_pages == 0

    def test_loaded_does_not_emit(self) -> None:
        state, progress = transition(initial_state(), PdfLoaded(3))
        assert state.phase is Phase.LOADED
        assert state.progress.total_pages == 3
        assert progress is None

    def test_text_page_emits_start_and_read(self) -> None:
        state, emitted = _run([PdfLoaded(1), TextStarted(1), TextRead(1, has_text=True)])
        assert [p.text_processed for p in emitted] == [0, 1]
        assert all(p.current_page == 1 for p in emitted)
        assert all(p.stage is ExtractionStage.TEXT for p in emitted)
        assert state.needs_ocr is False

    def test_ocr_page_emits_ocr_stage(self) -> None:
        _, emitted = _run(
            [
                PdfLoaded(1),
                TextStarted(1),
                TextRead(1, has_text=False),
                OcrStarted(1),
                OcrRead(1),
            ]
        )
        assert len(emitted) == 4
        ocr_start, ocr_done = emitted[2], emitted[3]
        assert ocr_start.stage is ExtractionStage.OCR
        assert (ocr_start.ocr_total, ocr_start.ocr_processed) == (1, 0)
        assert (ocr_done.ocr_total, ocr_done.ocr_processed) == (1, 1)

    def test_next_page_returns_to_text_stage(self) -> None:
        state, emitted = _run(
            [
                PdfLoaded(2),
                TextStarted(1),
                TextRead(1, has_text=False),
                OcrStarted(1),
                OcrRead(1),
                TextStarted(2),
            ]
        )
        assert emitted[-1].stage is ExtractionStage.TEXT
        assert emitted[-1].current_page == 2
        assert emitted[-1].ocr_total == 1
        assert state.phase is Phase.TEXT

    def test_finished_after_last_page(self) -> None:
        state, _ = _run([PdfLoaded(1), TextStarted(1), TextRead(1, has_text=True), Finished()])
        assert state.phase is Phase.DONE
        assert state.is_terminal

    def test_zero_page_document_finishes_from_loaded(self) -> None:
        state, emitted = _run([PdfLoaded(0), Finished()])
        assert state.phase is Phase.DONE
        assert emitted == []

    def test_counters_hold_throughout(self) -> None:
        _, emitted = _run(
            [
                PdfLoaded(3),
                TextStarted(1),
                TextRead(1, has_text=True),
                TextStarted(2),
                TextRead(2, has_text=False),
                OcrStarted(2),
                OcrRead(2),
                TextStarted(3),
                TextRead(3, has_text=False),
                OcrStarted(3),
                OcrRead(3),
            ]
        )
        for p in emitted:
            assert 0 <= p.ocr_processed <= p.ocr_total <= p.text_processed <= p.total_pages
            assert p.current_page <= p.total_pages
        totals = [p.ocr_total for p in emitted]
        assert totals == sorted(totals)
        assert emitted[-1].ocr_total == 2


class TestFailure:
    @pytest.mark.parametrize(
        "events",
        [
            [],
            [PdfLoaded(2)],
            [PdfLoaded(2), TextStarted(1)],
            [PdfLoaded(2), TextStarted(1), TextRead(1, has_text=False), OcrStarted(1)],
        ],
    )
    def test_failed_from_any_live_state(self, events: list[Event]) -> None:
        state, _ = _run([*events, Failed("boom")])
        assert state.phase is Phase.FAILED
        assert state.reason == "boom"

    def test_failed_does_not_emit(self) -> None:
        _, progress = transition(initial_state(), Failed("boom"))
        assert progress is None

    @pytest.mark.parametrize("event", [Finished(), Failed("again"), TextStarted(1)])
    def test_terminal_states_reject_events(self, event: Event) -> None:
        state, _ = _run([PdfLoaded(0), Finished()])
        with pytest.raises(InvalidTransitionError):
            transition(state, event)

    def test_failed_state_rejects_events(self) -> None:
        state, _ = _run([Failed("boom")])
        with pytest.raises(InvalidTransitionError):
            transition(state, PdfLoaded(1))


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "events",
        [
            pytest.param([TextStarted(1)], id="text-before-load"),
            pytest.param([PdfLoaded(1), PdfLoaded(1)], id="loaded-twice"),
            pytest.param([PdfLoaded(2), TextStarted(2)], id="page-skipped"),
            pytest.param([PdfLoaded(1), TextStarted(1), TextStarted(2)], id="page-not-read"),
            pytest.param(
                [PdfLoaded(1), TextStarted(1), TextRead(1, has_text=True), TextStarted(2)],
                id="past-last-page",
            ),
            pytest.param(
                [PdfLoaded(1), TextStarted(1), TextRead(1, has_text=True), OcrStarted(1)],
                id="ocr-without-need",
            ),
            pytest.param(
                [PdfLoaded(2), TextStarted(1), TextRead(1, has_text=False), TextStarted(2)],
                id="ocr-skipped",
            ),
            pytest.param(
                [PdfLoaded(1), TextStarted(1), TextRead(1, has_text=True), TextRead(1, True)],
                id="read-twice",
            ),
            pytest.param(
                [
                    PdfLoaded(1),
                    TextStarted(1),
                    TextRead(1, has_text=False),
                    OcrStarted(1),
                    OcrRead(1),
                    OcrRead(1),
                ],
                id="ocr-read-twice",
            ),
            pytest.param(
                [PdfLoaded(2), TextStarted(1), TextRead(1, has_text=True), Finished()],
                id="finished-early",
            ),
            pytest.param(
                [PdfLoaded(1), TextStarted(1), TextRead(1, has_text=False), Finished()],
                id="finished-before-ocr",
            ),
        ],
    )
    def test_rejects_out_of_order_events(self, events: list[Event]) -> None:
        with pytest.raises(InvalidTransitionError, match="is not valid in phase"):
            _run(events)
