"""
Tests for the moving-average kernel dispatcher.
"""
import numpy as np
import pandas as pd
import pytest

from ta_core.indicators.kernel import compute_many, compute_moving_average, moving_average, supported_kinds
from ta_core.indicators.ma_kinds import KIND_INPUTS, MovingAverageSpec, MovingAvgKind
from ta_core.shared.exceptions import CalculationError

SCENARIO = [10, 11, 12, 11, 10, 9, 10, 11, 12, 13]


@pytest.fixture
def sample_ohlcv():
    """Create sample OHLCV data with a fixed seed."""
    rng = np.random.default_rng(42)
    dates = pd.date_range('2020-01-01', periods=120, freq='D')
    base = 100 + np.arange(120) * 0.3
    noise = rng.normal(0, 2, 120)
    return pd.DataFrame({
        'High': base + np.abs(noise) + 1,
        'Low': base - np.abs(noise) - 1,
        'Close': base + noise * 0.5,
        'Volume': rng.integers(1_000_000, 5_000_000, 120).astype(float),
    }, index=dates)


def _run(kind, df, length=10):
    return compute_moving_average(
        MovingAverageSpec(kind, length),
        df['Close'],
        volume=df['Volume'],
        high=df['High'],
        low=df['Low'],
    )


class TestDispatchTable:
    """Every declared kind has a kernel."""

    def test_all_kinds_supported(self):
        assert set(supported_kinds()) == set(MovingAvgKind)


@pytest.mark.parametrize("kind", list(MovingAvgKind))
class TestKernelInvariants:
    """Properties every kernel must hold."""

    def test_length_and_index_preserved(self, kind, sample_ohlcv):
        result = _run(kind, sample_ohlcv)
        assert len(result) == len(sample_ohlcv)
        assert result.index.equals(sample_ohlcv.index)
        assert np.isfinite(result.to_numpy()).all()

    def test_causal(self, kind, sample_ohlcv):
        """Outputs up to bar k depend only on inputs up to bar k."""
        full = _run(kind, sample_ohlcv)
        partial = _run(kind, sample_ohlcv.iloc[:60])
        np.testing.assert_allclose(full.iloc[:60].to_numpy(), partial.to_numpy(), rtol=1e-9, atol=1e-9)

    def test_deterministic(self, kind, sample_ohlcv):
        first = _run(kind, sample_ohlcv)
        second = _run(kind, sample_ohlcv)
        np.testing.assert_array_equal(first.to_numpy(), second.to_numpy())

    def test_zero_input_gives_zero_output(self, kind):
        zeros = np.zeros(40)
        result = compute_moving_average(
            MovingAverageSpec(kind, 8), zeros, volume=np.ones(40), high=zeros, low=zeros
        )
        assert isinstance(result, np.ndarray)
        np.testing.assert_allclose(result, 0.0, atol=1e-12)

    def test_input_not_mutated(self, kind, sample_ohlcv):
        before = sample_ohlcv.copy()
        _run(kind, sample_ohlcv)
        pd.testing.assert_frame_equal(sample_ohlcv, before)

    def test_empty_input(self, kind):
        result = compute_moving_average(
            MovingAverageSpec(kind, 5), np.array([]), volume=np.array([]), high=np.array([]), low=np.array([])
        )
        assert len(result) == 0

    def test_length_one(self, kind, sample_ohlcv):
        result = _run(kind, sample_ohlcv, length=1)
        assert len(result) == len(sample_ohlcv)
        assert np.isfinite(result.to_numpy()).all()


class TestKnownValues:
    """Hand-computed reference values."""

    def test_simple_average_scenario(self):
        result = moving_average('simple', 3, SCENARIO)
        assert result[4] == pytest.approx(11.0)
        assert result[0] == pytest.approx(10.0)
        assert result[1] == pytest.approx(10.5)

    def test_double_smoothing_lags_further(self):
        """Feeding an SMA into a second SMA delays the trough."""
        first = moving_average('simple', 3, SCENARIO)
        second = moving_average('simple', 3, first)
        assert int(np.argmin(first[2:])) + 2 == 6
        assert int(np.argmin(second[2:])) + 2 == 7
        assert np.std(np.diff(second)) < np.std(np.diff(first))

    def test_triangular_is_double_simple(self):
        single = moving_average('simple', 3, SCENARIO)
        np.testing.assert_allclose(
            moving_average('triangular', 3, SCENARIO), moving_average('simple', 3, single)
        )

    def test_weighted_average(self):
        result = moving_average('weighted', 3, [1.0, 2.0, 3.0, 4.0])
        assert result[3] == pytest.approx((4 * 3 + 3 * 2 + 2 * 1) / 6)
        # Offsets before the first bar read as 0
        assert result[0] == pytest.approx(1.0 * 3 / 6)

    def test_ema_recurrence(self):
        result = moving_average('exponential', 3, [10.0, 10.0, 10.0])
        # k = 0.5, prior output starts at 0
        np.testing.assert_allclose(result, [5.0, 7.5, 8.75])

    def test_ema_alpha_clamped(self):
        result = moving_average('exponential', 1, [10.0, 20.0])
        # 2 / (1 + 1) = 1 clamps to 0.99
        assert result[0] == pytest.approx(9.9)

    def test_wilders(self):
        result = moving_average('wilders', 4, [8.0, 8.0])
        np.testing.assert_allclose(result, [2.0, 3.5])

    def test_dema_composes_ema_stages(self):
        values = np.linspace(10, 20, 30)
        e1 = moving_average('exponential', 5, values)
        e2 = moving_average('exponential', 5, e1)
        np.testing.assert_allclose(moving_average('double_exponential', 5, values), 2 * e1 - e2)

    def test_linear_regression_on_a_line(self):
        values = np.arange(20, dtype=float) * 2 + 1
        result = moving_average('linear_regression', 5, values)
        np.testing.assert_allclose(result, values)

    def test_vwap_cumulative(self):
        result = moving_average('volume_weighted_average_price', 3, [10.0, 20.0], volume=[1.0, 3.0])
        np.testing.assert_allclose(result, [10.0, 17.5])

    def test_vwma_zero_volume_is_zero(self):
        result = moving_average('volume_weighted', 3, [10.0, 20.0], volume=[0.0, 0.0])
        np.testing.assert_allclose(result, [0.0, 0.0])

    def test_mcginley_starts_at_input(self):
        result = moving_average('mcginley_dynamic', 10, [50.0, 50.0, 50.0])
        np.testing.assert_allclose(result, [50.0, 50.0, 50.0])

    def test_super_smoother_passes_first_bars(self):
        result = moving_average('ehlers_super_smoother_2pole', 10, [5.0, 6.0, 7.0])
        assert result[0] == 5.0
        assert result[1] == 6.0

    def test_high_pass_removes_constant(self):
        result = moving_average('ehlers_decycler', 10, np.full(200, 42.0))
        assert result[-1] == pytest.approx(42.0, rel=1e-3)

    def test_tuning_parameter_changes_output(self):
        values = np.sin(np.arange(50) / 3) * 10 + 100
        default = moving_average('arnaud_legoux', 9, values)
        tuned = moving_average('arnaud_legoux', 9, values, sigma=2)
        assert not np.allclose(default, tuned)


class TestOverflow:
    """Huge inputs saturate at the largest float instead of turning into NaN."""

    @pytest.mark.parametrize("kind", [
        MovingAvgKind.DOUBLE_EXPONENTIAL,
        MovingAvgKind.TRIPLE_EXPONENTIAL,
        MovingAvgKind.QUADRUPLE_EXPONENTIAL,
        MovingAvgKind.PENTUPLE_EXPONENTIAL,
        MovingAvgKind.T3,
        MovingAvgKind.ZERO_LAG_EXPONENTIAL,
        MovingAvgKind.ZERO_LAG_TRIPLE_EXPONENTIAL,
        MovingAvgKind.GENERALIZED_DOUBLE_EXPONENTIAL,
        MovingAvgKind.HULL,
        MovingAvgKind.LEAST_SQUARES,
        MovingAvgKind.TRIMEAN,
    ])
    @pytest.mark.parametrize("magnitude", [1e307, 1e308])
    def test_combined_stages_stay_finite(self, kind, magnitude):
        values = moving_average(kind, 5, [magnitude] * 10)
        assert np.isfinite(values).all()

class TestDispatchErrors:
    """Dispatcher validation."""

    def test_missing_volume(self):
        with pytest.raises(ValueError, match="requires a volume series"):
            moving_average('volume_weighted', 5, [1.0, 2.0, 3.0])

    def test_mismatched_high(self):
        with pytest.raises(CalculationError, match="high series has 2 bars"):
            moving_average('adaptive', 5, [1.0, 2.0, 3.0], high=[1.0, 2.0])

    def test_high_low_default_to_input(self):
        values = np.linspace(1, 5, 20)
        np.testing.assert_allclose(
            moving_average('ehlers_fractal_adaptive', 6, values),
            moving_average('ehlers_fractal_adaptive', 6, values, high=values, low=values),
        )

    def test_auxiliary_kinds_declared(self):
        assert 'high' in KIND_INPUTS[MovingAvgKind.ADAPTIVE]


class TestComputeMany:
    """Independent specs evaluated in parallel."""

    def test_matches_sequential(self, sample_ohlcv):
        specs = [
            MovingAverageSpec(MovingAvgKind.SIMPLE, 5),
            MovingAverageSpec(MovingAvgKind.EXPONENTIAL, 10),
            MovingAverageSpec(MovingAvgKind.JURIK, 7),
        ]
        timings = {}
        results = compute_many(specs, sample_ohlcv['Close'], max_workers=3, timings=timings)
        assert list(results) == ['simple_5', 'exponential_10', 'jurik_7']
        assert set(timings) == set(results)
        for spec in specs:
            pd.testing.assert_series_equal(
                results[spec.label], compute_moving_average(spec, sample_ohlcv['Close'])
            )

    def test_same_kind_with_different_params(self, sample_ohlcv):
        specs = [
            MovingAverageSpec(MovingAvgKind.ARNAUD_LEGOUX, 9, {'sigma': 2.0}),
            MovingAverageSpec(MovingAvgKind.ARNAUD_LEGOUX, 9, {'sigma': 6.0}),
        ]
        results = compute_many(specs, sample_ohlcv['Close'])
        assert list(results) == ['arnaud_legoux_9_sigma=2', 'arnaud_legoux_9']

    def test_duplicate_labels(self, sample_ohlcv):
        specs = [MovingAverageSpec('simple', 5), MovingAverageSpec('simple', 5)]
        with pytest.raises(ValueError, match="Duplicate moving average labels"):
            compute_many(specs, sample_ohlcv['Close'])
