"""
Pipeline configuration resolver.

Per-stage LLM settings live in configs/pipeline.yaml (OmegaConf) and are
merged over the built-in defaults below, so a partial YAML file only needs
to name what it changes and a missing file is not an error.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
PIPELINE_CONFIG_PATH = os.getenv("PIPELINE_CONFIG_PATH")

STAGES = ("analyzer", "matcher", "experience", "skills", "projects")

DEFAULT_PIPELINE_CONFIG: Dict[str, Any] = {
    "stage_timeout_s": 60,
    "stages": {
        "analyzer": {"temperature": 0.3, "max_tokens": 4000},
        "matcher": {"temperature": 0.3, "max_tokens": 4000},
        "experience": {"temperature": 0.4, "max_tokens": 6000},
        "skills": {"temperature": 0.3, "max_tokens": 3000},
        "projects": {"temperature": 0.4, "max_tokens": 4000},
    },
    "session_store": {"ttl_s": 3600, "sweep_interval_s": 60},
    "default_template": "classic",
}


@dataclass(frozen=True)
class StageSettings:
    """LLM call settings for one pipeline stage."""

    temperature: float
    max_tokens: int
    timeout_s: Optional[float]


def load_pipeline_config(config_path: Optional[Path] = None) -> DictConfig:
    """
    Load the pipeline configuration.

    Args:
        config_path: YAML file to merge over the defaults (default:
                     PIPELINE_CONFIG_PATH env var; defaults only when unset)

    Returns:
        Merged OmegaConf config

    Raises:
        FileNotFoundError: An explicitly named config file does not exist
    """
    config = OmegaConf.create(DEFAULT_PIPELINE_CONFIG)

    if config_path is None and PIPELINE_CONFIG_PATH:
        config_path = Path(PIPELINE_CONFIG_PATH)
    if config_path is None:
        return config

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Pipeline config not found: {config_path}")

    return OmegaConf.merge(config, OmegaConf.load(config_path))


def get_stage_settings(
    stage: str, config: Optional[DictConfig] = None, timeout_override: Optional[float] = None
) -> StageSettings:
    """
    Resolve settings for a stage.

    A stage-level timeout_s wins over the global stage_timeout_s;
    timeout_override wins over both.
    """
    if stage not in STAGES:
        raise ValueError(f"Unknown pipeline stage: {stage}. Expected one of: {', '.join(STAGES)}")

    config = config if config is not None else load_pipeline_config()
    stage_node = (config.get("stages") or {}).get(stage)
    stage_config = (
        OmegaConf.to_container(stage_node, resolve=True) if isinstance(stage_node, DictConfig) else {}
    )
    defaults = DEFAULT_PIPELINE_CONFIG["stages"][stage]

    timeout = timeout_override
    if timeout is None:
        timeout = stage_config.get("timeout_s", config.get("stage_timeout_s"))

    return StageSettings(
        temperature=float(stage_config.get("temperature", defaults["temperature"])),
        max_tokens=int(stage_config.get("max_tokens", defaults["max_tokens"])),
        timeout_s=float(timeout) if timeout is not None else None,
    )
