"""hal_resource package exports."""

from .config import CodecConfig, load_env_config
from .document import Document
from .errors import HalCycleError, HalError, HalParseError, HalStructureError
from .json_codec import parse_json, render_json
from .logging import setup_logging
from .models import Link
from .observability import log_event
from .xml_codec import parse_xml, render_xml

__all__ = [
    # Model
    "Document",
    "Link",
    # Codecs
    "render_json",
    "parse_json",
    "render_xml",
    "parse_xml",
    # Exceptions
    "HalError",
    "HalParseError",
    "HalStructureError",
    "HalCycleError",
    # Config helpers
    "CodecConfig",
    "load_env_config",
    # Logging
    "setup_logging",
    "log_event",
]
