from abc import ABC, abstractmethod

from PIL import Image


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    async def recognize(self, image: Image.Image) -> str:
        """Recognize the text in a page bitmap.

        Args:
            image: Rendered page bitmap.

        Returns:
            Recognized text; may be empty or whitespace-only.

        Raises:
            OcrError: if the engine cannot be started or recognition fails.
        """
