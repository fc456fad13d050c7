"""Runtime loader for receipt keyword overrides."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from strukscan.receipt.keywords import DEFAULT_KEYWORDS, ReceiptKeywords, build_receipt_keywords
from strukscan.runtime.logging import get_logger
from strukscan.runtime.paths import get_paths

logger = get_logger(__name__)


@lru_cache(maxsize=4)
def load_receipt_keywords(config_path: str | None = None) -> ReceiptKeywords:
    """
    Load keyword configuration from receipt_keywords.toml.

    The file holds a ``[keywords]`` table whose keys name the lists to
    replace, for example::

        [keywords]
        total = ["grand total", "total", "total belanja"]
        income_en = ["received", "credited", "refund"]

    Lists that are not mentioned keep their built-in values.

    Args:
        config_path: Optional TOML path override. If None, uses default project path.

    Returns:
        ReceiptKeywords; the built-in defaults when the file does not exist.
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    path = Path(config_path) if config_path is not None else get_paths().receipt_keywords
    if not path.exists():
        return DEFAULT_KEYWORDS

    with open(path, "rb") as f:
        config = tomllib.load(f)

    overrides = config.get("keywords", {})
    if not isinstance(overrides, dict):
        raise ValueError(f"[keywords] must be a table in {path}")

    keywords = build_receipt_keywords(overrides)
    logger.debug("Loaded keyword overrides for %s from %s", sorted(overrides), path)
    return keywords
