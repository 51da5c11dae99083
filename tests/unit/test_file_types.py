import pytest

from app.pipeline.exceptions import UploadRejectedError
from app.pipeline.file_types import classify_file_type, validate_upload
from app.pipeline.models import FileKind


class TestClassifyFileType:
    @pytest.mark.parametrize(
        ("mime_type", "expected"),
        [
            ("application/pdf", FileKind.PDF),
            ("APPLICATION/PDF", FileKind.PDF),
            ("application/pdf; charset=binary", FileKind.PDF),
            ("image/png", FileKind.IMAGE),
            ("image/jpeg", FileKind.IMAGE),
            ("image/webp", FileKind.IMAGE),
            ("application/vnd.ms-excel", FileKind.SPREADSHEET),
            (
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                FileKind.SPREADSHEET,
            ),
            ("text/plain", FileKind.UNSUPPORTED),
            ("application/zip", FileKind.UNSUPPORTED),
            ("", FileKind.UNSUPPORTED),
        ],
    )
    def test_routes(self, mime_type: str, expected: FileKind) -> None:
        assert classify_file_type(mime_type) is expected


class TestValidateUpload:
    def test_accepts_allowed_type_within_limit(self) -> None:
        validate_upload("application/pdf", 1024)

    def test_rejects_unlisted_type(self) -> None:
        with pytest.raises(UploadRejectedError, match="Invalid file type"):
            validate_upload("image/webp", 1024)

    def test_rejects_oversized_file(self) -> None:
        with pytest.raises(UploadRejectedError, match="Maximum size is 10MB"):
            validate_upload("image/png", 10 * 1024 * 1024 + 1)

    def test_custom_limit(self) -> None:
        with pytest.raises(UploadRejectedError, match="Maximum size is 1MB"):
            validate_upload("image/png", 2 * 1024 * 1024, max_size_bytes=1024 * 1024)

    def test_exact_limit_is_accepted(self) -> None:
        validate_upload("image/png", 10 * 1024 * 1024)
