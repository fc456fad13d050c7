"""Runtime infrastructure for strukscan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Keyword override loading via load_receipt_keywords()
- Recognizer adapters and the RecognizerHandle that owns them

Usage:
    from strukscan.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.receipt_keywords)
"""

from strukscan.runtime.keyword_rules import load_receipt_keywords
from strukscan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    reset_logging,
    set_log_level,
)
from strukscan.runtime.paths import ProjectPaths, get_paths, reset_paths
from strukscan.runtime.recognizer import (
    DEFAULT_OCR_SERVICE_URL,
    OCRServiceRecognizer,
    OCRServiceUnavailable,
    RecognizedText,
    Recognizer,
    RecognizerHandle,
    TesseractRecognizer,
    create_recognizer_factory,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "reset_logging",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_receipt_keywords",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
    # Recognizers
    "DEFAULT_OCR_SERVICE_URL",
    "OCRServiceRecognizer",
    "OCRServiceUnavailable",
    "RecognizedText",
    "Recognizer",
    "RecognizerHandle",
    "TesseractRecognizer",
    "create_recognizer_factory",
]
