"""Runtime loader for tally options (threshold, price ceiling, denylist)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any

from receipt_tally.domain.tally import DEFAULT_DENYLIST_KEYWORDS, TallyConfig
from receipt_tally.runtime.logging import get_logger
from receipt_tally.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def build_tally_config(section: dict[str, Any]) -> TallyConfig:
    """
    Build a TallyConfig from a parsed ``[tally]`` table.

    ``extra_denylist_keywords`` extends the default keywords, while
    ``denylist_keywords`` replaces them.

    Raises:
        ValueError: If a value has the wrong type or is out of range.
    """
    kwargs: dict[str, Any] = {}

    if "similarity_threshold" in section:
        threshold = section["similarity_threshold"]
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ValueError(f"similarity_threshold must be a number, got {threshold!r}")
        kwargs["similarity_threshold"] = float(threshold)

    if "price_ceiling" in section:
        ceiling = section["price_ceiling"]
        if isinstance(ceiling, bool):
            raise ValueError(f"price_ceiling must be a number, got {ceiling!r}")
        try:
            # str() keeps TOML floats like 1000.0 from turning into binary noise.
            kwargs["price_ceiling"] = Decimal(str(ceiling))
        except InvalidOperation as exc:
            raise ValueError(f"price_ceiling must be a number, got {ceiling!r}") from exc

    keywords = set(DEFAULT_DENYLIST_KEYWORDS)
    if "denylist_keywords" in section:
        keywords = set(_string_list(section["denylist_keywords"], "denylist_keywords"))
    keywords.update(_string_list(section.get("extra_denylist_keywords", []), "extra_denylist_keywords"))
    kwargs["denylist_keywords"] = frozenset(keywords)

    return TallyConfig(**kwargs)


def _string_list(value: Any, name: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{name} must be a list of strings, got {value!r}")
    return [v for v in value if v.strip()]


@lru_cache(maxsize=4)
def load_tally_config(config_path: str | None = None) -> TallyConfig:
    """
    Load tally options from receipt_tally.toml.

    Args:
        config_path: Optional TOML path override. If None, uses default project path.

    Returns:
        TallyConfig; defaults when the file does not exist.
    """
    path = Path(config_path) if config_path is not None else get_paths().tally_config
    data = _load_toml(path)
    if not data:
        logger.debug("No tally config at %s, using defaults", path)
        return TallyConfig()

    section = data.get("tally", {})
    if not isinstance(section, dict):
        raise ValueError(f"[tally] in {path} must be a table")
    config = build_tally_config(section)
    logger.debug("Loaded tally config from %s: %s", path, config)
    return config
