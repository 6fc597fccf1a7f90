from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _get_bool_env(name: str, default: bool) -> bool:
    """Parse a boolean environment variable with a safe default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.replace("_", ""))
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class CodecConfig:
    """Formatting options shared by the JSON and XML codecs."""

    json_indent: int = 4
    json_ensure_ascii: bool = False
    xml_root_tag: str = "resource"
    xml_indent: str = "  "
    xml_declaration: bool = True
    max_depth: int = 64

    def __post_init__(self) -> None:
        if self.json_indent < 0:
            raise ValueError("json_indent must not be negative")
        if not self.xml_root_tag:
            raise ValueError("xml_root_tag must be provided")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be greater than zero")

    @classmethod
    def from_env(cls) -> "CodecConfig":
        xml_indent = _read_int_env("HAL_XML_INDENT", len(cls.xml_indent))
        if xml_indent < 0:
            raise ValueError("HAL_XML_INDENT must not be negative")
        return cls(
            json_indent=_read_int_env("HAL_JSON_INDENT", cls.json_indent),
            json_ensure_ascii=_get_bool_env(
                "HAL_JSON_ENSURE_ASCII", cls.json_ensure_ascii
            ),
            xml_root_tag=os.getenv("HAL_XML_ROOT_TAG", cls.xml_root_tag).strip(),
            xml_indent=" " * xml_indent,
            xml_declaration=_get_bool_env("HAL_XML_DECLARATION", cls.xml_declaration),
            max_depth=_read_int_env("HAL_MAX_DEPTH", cls.max_depth),
        )


DEFAULT_CONFIG = CodecConfig()


def load_env_config(*, use_dotenv: bool = True) -> CodecConfig:
    """Build a CodecConfig from HAL_* environment variables (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return CodecConfig.from_env()


__all__ = ["CodecConfig", "DEFAULT_CONFIG", "load_env_config"]
