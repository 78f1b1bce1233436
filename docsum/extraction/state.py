"""Extraction state machine.

A run moves READING -> LOADED -> TEXT(page) [-> OCR(page)] -> ... -> DONE,
or to FAILED from any non-terminal state. transition() is pure: it returns
the next state and the progress snapshot to publish, if the event produces
one.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import NoReturn

from docsum.extraction.exceptions import InvalidTransitionError
from docsum.extraction.models import ExtractionProgress, ExtractionStage


class Phase(str, Enum):
    READING = "reading"
    LOADED = "loaded"
    TEXT = "text"
    OCR = "ocr"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractionState:
    phase: Phase
    progress: ExtractionProgress
    needs_ocr: bool = False
    reason: str = ""

    @property
    def page(self) -> int:
        return self.progress.current_page

    @property
    def is_terminal(self) -> bool:
        return self.phase in (Phase.DONE, Phase.FAILED)


@dataclass(frozen=True)
class PdfLoaded:
    total_pages: int


@dataclass(frozen=True)
class TextStarted:
    page: int


@dataclass(frozen=True)
class TextRead:
    page: int
    has_text: bool


@dataclass(frozen=True)
class OcrStarted:
    page: int


@dataclass(frozen=True)
class OcrRead:
    page: int


@dataclass(frozen=True)
class Finished:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str


Event = PdfLoaded | TextStarted | TextRead | OcrStarted | OcrRead | Finished | Failed


def initial_state() -> ExtractionState:
    return ExtractionState(phase=Phase.READING, progress=ExtractionProgress(total_pages=0))


def transition(
    state: ExtractionState, event: Event
) -> tuple[ExtractionState, ExtractionProgress | None]:
    """Apply one event to a state.

    Returns:
        The next state and the progress snapshot to emit (None for events
        that are not reported to observers).

    Raises:
        InvalidTransitionError: if the event is not allowed in this state.
    """
    if state.is_terminal:
        _reject(state, event)

    if isinstance(event, Failed):
        return replace(state, phase=Phase.FAILED, reason=event.reason), None

    if isinstance(event, PdfLoaded):
        if state.phase is not Phase.READING or event.total_pages < 0:
            _reject(state, event)
        progress = ExtractionProgress(total_pages=event.total_pages)
        return ExtractionState(phase=Phase.LOADED, progress=progress), None

    if isinstance(event, TextStarted):
        if not _page_settled(state) or event.page != state.page + 1:
            _reject(state, event)
        if event.page > state.progress.total_pages:
            _reject(state, event)
        progress = replace(
            state.progress, stage=ExtractionStage.TEXT, current_page=event.page
        )
        return replace(state, phase=Phase.TEXT, progress=progress, needs_ocr=False), progress

    if isinstance(event, TextRead):
        if (
            state.phase is not Phase.TEXT
            or event.page != state.page
            or _text_read(state)
        ):
            _reject(state, event)
        progress = replace(state.progress, text_processed=state.progress.text_processed + 1)
        return replace(state, progress=progress, needs_ocr=not event.has_text), progress

    if isinstance(event, OcrStarted):
        if (
            state.phase is not Phase.TEXT
            or event.page != state.page
            or not _text_read(state)
            or not state.needs_ocr
        ):
            _reject(state, event)
        progress = replace(
            state.progress,
            stage=ExtractionStage.OCR,
            ocr_total=state.progress.ocr_total + 1,
        )
        return replace(state, phase=Phase.OCR, progress=progress, needs_ocr=False), progress

    if isinstance(event, OcrRead):
        if state.phase is not Phase.OCR or event.page != state.page or _ocr_read(state):
            _reject(state, event)
        progress = replace(state.progress, ocr_processed=state.progress.ocr_processed + 1)
        return replace(state, progress=progress), progress

    if isinstance(event, Finished):
        if not _page_settled(state) or state.page != state.progress.total_pages:
            _reject(state, event)
        return replace(state, phase=Phase.DONE), None

    _reject(state, event)


def _text_read(state: ExtractionState) -> bool:
    return state.progress.text_processed == state.page


def _ocr_read(state: ExtractionState) -> bool:
    return state.progress.ocr_processed == state.progress.ocr_total


def _page_settled(state: ExtractionState) -> bool:
    """True when the current page needs no further work."""
    if state.phase is Phase.LOADED:
        return True
    if state.phase is Phase.TEXT:
        return _text_read(state) and not state.needs_ocr
    if state.phase is Phase.OCR:
        return _ocr_read(state)
    return False


def _reject(state: ExtractionState, event: Event) -> NoReturn:
    raise InvalidTransitionError(
        f"Event {type(event).__name__} is not valid in phase '{state.phase.value}' "
        f"(page {state.page})"
    )
