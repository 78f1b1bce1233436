"""Tesseract OCR adapter with a lazily created, shared worker.

The engine owns at most one TesseractWorker. The first recognize() call
starts it; concurrent callers, including those arriving while the worker is
still starting, wait on the same creation future. Recognitions run on the
worker's single thread, one at a time.
"""

import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor

import pytesseract
from PIL import Image

from docsum.logging.logger import Log
from docsum.ocr.base import BaseOcrEngine
from docsum.ocr.exceptions import OcrError


class TesseractWorker:
    """A configured Tesseract engine bound to a dedicated thread."""

    def __init__(
        self,
        *,
        language: str,
        tesseract_cmd: str,
        tessdata_dir: str = "",
    ) -> None:
        self._language = language
        self._tesseract_cmd = tesseract_cmd
        self._config = f'--tessdata-dir "{tessdata_dir}"' if tessdata_dir else ""
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ocr-worker")

    def start(self) -> "Future[TesseractWorker]":
        """Begin loading the engine; the future resolves to this worker."""
        return self._executor.submit(self._load)

    async def recognize(self, image: Image.Image) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._recognize, image)

    def _load(self) -> "TesseractWorker":
        pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
        try:
            version = pytesseract.get_tesseract_version()
            available = pytesseract.get_languages(config=self._config)
        except (pytesseract.TesseractError, OSError) as exc:
            raise OcrError(f"Failed to start Tesseract: {exc}") from exc
        missing = [lang for lang in self._language.split("+") if lang not in available]
        if missing:
            raise OcrError(f"Tesseract language data not found: {missing}")
        Log.info(f"OCR worker ready (tesseract {version}, lang={self._language})")
        return self

    def _recognize(self, image: Image.Image) -> str:
        try:
            text = pytesseract.image_to_string(
                image, lang=self._language, config=self._config
            )
        except (pytesseract.TesseractError, OSError, RuntimeError) as exc:
            raise OcrError(f"Tesseract recognition failed: {exc}") from exc
        return str(text)


class TesseractOcrEngine(BaseOcrEngine):
    """Recognizes page bitmaps with a single shared Tesseract worker."""

    def __init__(
        self,
        *,
        language: str = "eng",
        tesseract_cmd: str = "tesseract",
        tessdata_dir: str = "",
    ) -> None:
        self._language = language
        self._tesseract_cmd = tesseract_cmd
        self._tessdata_dir = tessdata_dir
        self._lock = threading.Lock()
        self._worker_future: Future[TesseractWorker] | None = None

    async def recognize(self, image: Image.Image) -> str:
        worker = await asyncio.wrap_future(self._get_worker())
        return await worker.recognize(image)

    def _get_worker(self) -> "Future[TesseractWorker]":
        # A failed start stays cached; every later call re-raises the same error.
        with self._lock:
            if self._worker_future is None:
                Log.info("Creating OCR worker")
                worker = TesseractWorker(
                    language=self._language,
                    tesseract_cmd=self._tesseract_cmd,
                    tessdata_dir=self._tessdata_dir,
                )
                self._worker_future = worker.start()
            return self._worker_future
