import logging
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    output_path: str = "result.pdf"
    page_size: str = "A4"
    margin: float = 72  # 1 inch
    font_name: str = "Helvetica"
    font_path: Optional[str] = None
    font_size: float = 11
    line_height: float = 14
    max_chars_per_line: int = 80
    invariant: bool = False
    create_dirs: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="EASYPDF_",
        case_sensitive=False,
    )

    @field_validator("page_size")
    @classmethod
    def _known_page_size(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in ("A4", "LETTER"):
            raise ValueError(f"unsupported page size: {value!r}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"unknown log level: {value!r}")
        return normalized


settings = Settings()
