from __future__ import annotations


class HalError(Exception):
    """Base error for HAL document failures."""


class HalParseError(HalError):
    """Input text is not well-formed JSON or XML."""


class HalStructureError(HalError):
    """Input is well-formed but lacks a mandatory HAL element."""


class HalCycleError(HalStructureError):
    """A document embeds itself, or embedding exceeds the depth limit."""


__all__ = [
    "HalError",
    "HalParseError",
    "HalStructureError",
    "HalCycleError",
]
