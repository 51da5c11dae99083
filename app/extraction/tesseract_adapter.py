import io

import pytesseract
from PIL import Image, ImageSequence

from app.extraction.base import BaseTextExtractor, ProgressCallback
from app.extraction.exceptions import OcrExtractionError
from app.extraction.image_preprocessing import preprocess_image
from app.logging.logger import Log


class TesseractOcrAdapter(BaseTextExtractor):
    """Extracts text from images with Tesseract after preprocessing.

    Progress is reported as 0.0 once preprocessing is done, then after each
    recognised frame (single-frame PNG/JPEG files jump straight to 1.0).
    """

    def __init__(self, language: str = "eng") -> None:
        self._language = language

    def extract(
        self,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        try:
            frames = self._load_frames(content)
            if on_progress is not None:
                on_progress(0.0)
            texts: list[str] = []
            for index, frame in enumerate(frames):
                texts.append(
                    pytesseract.image_to_string(frame, lang=self._language).strip()
                )
                if on_progress is not None:
                    on_progress((index + 1) / len(frames))
            Log.debug(f"OCR recognised {len(frames)} frame(s)", language=self._language)
            return "\n".join(texts).strip()
        except OcrExtractionError:
            raise
        except Exception as exc:
            raise OcrExtractionError(f"OCR failed: {exc}") from exc

    @staticmethod
    def _load_frames(content: bytes) -> list[Image.Image]:
        try:
            with Image.open(io.BytesIO(content)) as image:
                return [preprocess_image(frame) for frame in ImageSequence.Iterator(image)]
        except (OSError, ValueError) as exc:
            raise OcrExtractionError(f"Failed to load image: {exc}") from exc
