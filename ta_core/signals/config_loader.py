"""
YAML configuration loader for analysis runs.

Loads analysis configurations from YAML files, allowing easy sharing
and modification of indicator setups without code changes.
"""
import logging
from pathlib import Path
from typing import Union

import yaml

from .config import AnalysisConfig, MovingAverageConfig, SignalConfig
from ..shared.defaults import DEFAULT_LENGTH, RSI_OVERBOUGHT, RSI_OVERSOLD, CROSSOVER_STRICT

logger = logging.getLogger(__name__)


def load_config_from_yaml(yaml_path: Union[str, Path]) -> AnalysisConfig:
    """
    Load an analysis configuration from a YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        AnalysisConfig object

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is empty or holds invalid values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if not config_dict:
        raise ValueError(f"Empty config file: {yaml_path}")

    config = config_from_dict(config_dict, default_name=yaml_path.stem)
    logger.info(f"Loaded config '{config.name}' from {yaml_path}")
    return config


def config_from_dict(config_dict: dict, default_name: str = "analysis") -> AnalysisConfig:
    """Build an AnalysisConfig from the nested dict layout used in YAML files."""
    moving_average = config_dict.get('moving_average', {}) or {}
    signal = config_dict.get('signal', {}) or {}

    return AnalysisConfig(
        name=config_dict.get('name', default_name),
        description=config_dict.get('description', ''),
        input_name=config_dict.get('input', 'close'),
        moving_average=MovingAverageConfig(
            kind=moving_average.get('kind', 'exponential'),
            length=int(moving_average.get('length', DEFAULT_LENGTH)),
            params={k: float(v) for k, v in (moving_average.get('params') or {}).items()},
        ),
        signal=SignalConfig(
            mode=signal.get('mode', 'compare'),
            strict=bool(signal.get('strict', CROSSOVER_STRICT)),
            is_reversed=bool(signal.get('reversed', False)),
            overbought=float(signal.get('overbought', RSI_OVERBOUGHT)),
            oversold=float(signal.get('oversold', RSI_OVERSOLD)),
            threshold=float(signal.get('threshold', 0.0)),
        ),
    )


def save_config_to_yaml(config: AnalysisConfig, yaml_path: Union[str, Path]) -> None:
    """Write config in the layout load_config_from_yaml() reads."""
    config_dict = {
        'name': config.name,
        'description': config.description,
        'input': config.input_name.value,
        'moving_average': {
            'kind': config.moving_average.kind.value,
            'length': config.moving_average.length,
            'params': dict(config.moving_average.params),
        },
        'signal': {
            'mode': config.signal.mode.value,
            'strict': config.signal.strict,
            'reversed': config.signal.is_reversed,
            'overbought': config.signal.overbought,
            'oversold': config.signal.oversold,
            'threshold': config.signal.threshold,
        },
    }
    with open(yaml_path, 'w') as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
