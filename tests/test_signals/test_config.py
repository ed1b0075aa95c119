"""
Tests for analysis configuration and the YAML loader.
"""
import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from ta_core.indicators.implementations import MovingAverageIndicator
from ta_core.indicators.ma_kinds import MovingAvgKind
from ta_core.shared.defaults import DEFAULT_LENGTH, RSI_OVERBOUGHT, RSI_OVERSOLD
from ta_core.shared.types import BarSet, InputName
from ta_core.signals.classifier import SignalMode
from ta_core.signals.config import AnalysisConfig, MovingAverageConfig, SignalConfig
from ta_core.signals.config_loader import config_from_dict, load_config_from_yaml, save_config_to_yaml


class TestAnalysisConfig:
    """Test AnalysisConfig dataclass."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.input_name == InputName.CLOSE
        assert config.moving_average.kind == MovingAvgKind.EXPONENTIAL
        assert config.moving_average.length == DEFAULT_LENGTH
        assert config.signal.mode == SignalMode.COMPARE
        assert config.signal.overbought == RSI_OVERBOUGHT
        assert config.signal.oversold == RSI_OVERSOLD

    def test_strings_are_parsed(self):
        config = AnalysisConfig(
            name="test_config",
            input_name='typical_price',
            moving_average=MovingAverageConfig(kind='hull', length=9),
            signal=SignalConfig(mode='crossover', strict=True),
        )
        assert config.input_name == InputName.TYPICAL_PRICE
        assert config.moving_average.kind == MovingAvgKind.HULL
        assert config.signal.mode == SignalMode.CROSSOVER

    def test_build_indicator(self):
        config = AnalysisConfig(moving_average=MovingAverageConfig(kind='simple', length=3))
        indicator = config.build_indicator()
        assert isinstance(indicator, MovingAverageIndicator)
        prices = pd.Series(np.arange(10, dtype=float))
        values = indicator.calculate(BarSet.from_series(prices))
        assert values.iloc[4] == pytest.approx(3.0)


class TestConfigValidation:
    """Config validation fails fast with clear errors."""

    def test_length_must_be_positive(self):
        with pytest.raises(ValueError, match="length must be >= 1"):
            MovingAverageConfig(length=0)

    def test_oversold_must_be_less_than_overbought(self):
        with pytest.raises(ValueError, match="oversold.*must be less than overbought"):
            AnalysisConfig(signal=SignalConfig(overbought=20, oversold=80))

    def test_threshold_must_be_non_negative(self):
        with pytest.raises(ValueError, match="threshold must be >= 0"):
            AnalysisConfig(signal=SignalConfig(threshold=-1))

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown moving average kind"):
            MovingAverageConfig(kind='magic')

    def test_unknown_parameter(self):
        with pytest.raises(ValueError, match="Unknown parameter"):
            MovingAverageConfig(kind='simple', params={'gamma': 0.5})

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown signal mode"):
            SignalConfig(mode='sideways')

    def test_unknown_input(self):
        with pytest.raises(ValueError):
            AnalysisConfig(input_name='midpoint')


class TestConfigLoader:
    """YAML loading and saving."""

    def test_load_from_yaml(self):
        yaml_content = """
name: laguerre_trend
description: Laguerre filter on typical price
input: typical_price
moving_average:
  kind: ehlers_laguerre
  length: 10
  params:
    gamma: 0.6
signal:
  mode: bounded_oscillator
  reversed: true
  overbought: 80
  oversold: 20
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(yaml_content)
            path = Path(f.name)
        try:
            config = load_config_from_yaml(path)
            assert config.name == 'laguerre_trend'
            assert config.input_name == InputName.TYPICAL_PRICE
            assert config.moving_average.kind == MovingAvgKind.EHLERS_LAGUERRE
            assert config.moving_average.params == {'gamma': 0.6}
            assert config.signal.mode == SignalMode.BOUNDED_OSCILLATOR
            assert config.signal.is_reversed is True
            assert config.signal.overbought == 80.0
        finally:
            path.unlink(missing_ok=True)

    def test_name_defaults_to_file_stem(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("moving_average:\n  kind: simple\n")
            path = Path(f.name)
        try:
            config = load_config_from_yaml(path)
            assert config.name == path.stem
            assert config.moving_average.length == DEFAULT_LENGTH
        finally:
            path.unlink(missing_ok=True)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config_from_yaml('/nonexistent/config.yaml')

    def test_empty_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            path = Path(f.name)
        try:
            with pytest.raises(ValueError, match="Empty config file"):
                load_config_from_yaml(path)
        finally:
            path.unlink(missing_ok=True)

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError, match="oversold"):
            config_from_dict({'signal': {'overbought': 10, 'oversold': 90}})

    def test_save_and_reload(self):
        config = AnalysisConfig(
            name='saved',
            moving_average=MovingAverageConfig(kind='arnaud_legoux', length=21, params={'sigma': 4.0}),
            signal=SignalConfig(mode='volatility', threshold=1.5),
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'saved.yaml'
            save_config_to_yaml(config, path)
            reloaded = load_config_from_yaml(path)
        assert reloaded == config
