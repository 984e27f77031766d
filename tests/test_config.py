import pytest
from pydantic import ValidationError

from easypdf.config import Settings


def test_defaults(monkeypatch) -> None:
    for name in ("EASYPDF_OUTPUT_PATH", "EASYPDF_PAGE_SIZE", "EASYPDF_CREATE_DIRS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings()

    assert s.output_path == "result.pdf"
    assert s.page_size == "A4"
    assert s.create_dirs is False


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("EASYPDF_OUTPUT_PATH", "/tmp/out.pdf")
    monkeypatch.setenv("easypdf_page_size", "letter")
    monkeypatch.setenv("EASYPDF_INVARIANT", "true")

    s = Settings()

    assert s.output_path == "/tmp/out.pdf"
    assert s.page_size == "LETTER"
    assert s.invariant is True


def test_log_level_is_normalized(monkeypatch) -> None:
    monkeypatch.setenv("EASYPDF_LOG_LEVEL", "debug")

    assert Settings().log_level == "DEBUG"


def test_unknown_log_level(monkeypatch) -> None:
    monkeypatch.setenv("EASYPDF_LOG_LEVEL", "loud")

    with pytest.raises(ValidationError):
        Settings()


def test_unknown_page_size(monkeypatch) -> None:
    monkeypatch.setenv("EASYPDF_PAGE_SIZE", "tabloid")

    with pytest.raises(ValidationError):
        Settings()
