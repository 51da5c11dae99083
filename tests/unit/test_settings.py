import pytest
from pydantic import ValidationError

from app.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_ocr_language(self) -> None:
        s = Settings()
        assert s.ocr_language == "eng"

    def test_default_limits(self) -> None:
        s = Settings()
        assert s.max_text_length == 6000
        assert s.max_file_size_bytes == 10 * 1024 * 1024
        assert s.max_concurrent_files == 4

    def test_default_structuring_provider(self) -> None:
        s = Settings()
        assert s.structuring_provider == "groq"
        assert s.structuring_model_name == "llama-3.3-70b-versatile"
        assert s.structuring_temperature == 0.1

    def test_default_structuring_timeouts(self) -> None:
        s = Settings()
        assert s.structuring_timeout_seconds == 30
        assert s.structuring_max_retries == 3


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_structuring_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRUCTURING_PROVIDER", "example")
        s = Settings()
        assert s.structuring_provider == "example"

    def test_loads_max_concurrent_files(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_CONCURRENT_FILES", "8")
        s = Settings()
        assert s.max_concurrent_files == 8


class TestSettingsValidation:
    def test_invalid_max_text_length_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_TEXT_LENGTH", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_temperature_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRUCTURING_TEMPERATURE", "warm")
        with pytest.raises(ValidationError):
            Settings()
