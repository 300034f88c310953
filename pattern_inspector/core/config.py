from typing import Annotated, Any

from pydantic import BeforeValidator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_list(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Search path for the FileSystemLoader; empty means templates come from a
    # caller-supplied loader.
    TEMPLATE_DIRS: Annotated[list[str] | str, BeforeValidator(parse_list)] = []
    TEMPLATE_ENCODING: str = "utf-8"
    TEMPLATE_FOLLOW_LINKS: bool = False
    TEMPLATE_AUTOESCAPE: bool = True
    # Extra Jinja2 extensions, as import paths (e.g. "jinja2.ext.do")
    TEMPLATE_EXTENSIONS: Annotated[list[str] | str, BeforeValidator(parse_list)] = []

    # Block rendered by inspect_pattern_data
    PATTERN_INFO_BLOCK: str = "patterninfo"


settings = Settings()  # type: ignore
