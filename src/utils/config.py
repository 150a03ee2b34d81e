"""
Configuration management for conservation score mapping.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from loguru import logger

from conservation.score_parser import ScoreFormat, DEFAULT_FORMAT
from utils.settings import get_settings

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class ConservationConfig:
    """Settings shared by the locator, parser and score map builder."""

    # Column layout assumed for score files
    score_format: ScoreFormat = DEFAULT_FORMAT
    # Score files are named <structure base name><CHAIN><score_suffix>
    score_suffix: str = ".scores"
    # Chain id used for blank chain ids (old single-chain PDB files)
    default_chain_id: str = "A"


def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(ConservationConfig)}
    out: Dict[str, Any] = {}
    for k, v in data.items():
        key = str(k).strip().lower().replace(" ", "_").replace("-", "_")
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {k}")
            continue
        if key == "score_format":
            v = ScoreFormat.from_name(v)
        out[key] = v
    return out


def load_config(path: Optional[Union[str, Path]] = None) -> ConservationConfig:
    """Load configuration: defaults, overlaid by a YAML file when given.

    When ``path`` is None the ``CONSERVATION_CONFIG_FILE`` setting is used.
    """
    if path is None:
        path = get_settings().config_file
    config = ConservationConfig()
    if not path:
        return config
    p = Path(path)
    if not p.exists():
        logger.warning(f"Config file {p} not found; using defaults")
        return config
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {p} must contain a mapping, got {type(data).__name__}")
    # Allow the settings to be nested under a top-level 'conservation' key
    if isinstance(data.get("conservation"), dict):
        data = data["conservation"]
    return replace(config, **_coerce(data))
