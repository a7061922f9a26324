"""Tests for time-grid resampling."""

import numpy as np
import pandas as pd
import pytest

from sdensemble.contracts.errors import ValidationError
from sdensemble.simulation.resample import resample, resample_long_table


class TestResample:
    """Linear interpolation with nearest extrapolation."""

    def test_interpolation(self):
        result = resample([0.0, 1.0, 2.0], [10.0, 20.0, 30.0], [0.5, 1.5])
        np.testing.assert_allclose(result, [15.0, 25.0])

    def test_nearest_extrapolation(self):
        result = resample([1.0, 2.0], [10.0, 20.0], [0.0, 3.0])
        np.testing.assert_allclose(result, [10.0, 20.0])

    def test_unsorted_input(self):
        result = resample([2.0, 0.0, 1.0], [30.0, 10.0, 20.0], [0.5])
        np.testing.assert_allclose(result, [15.0])

    def test_single_point(self):
        np.testing.assert_allclose(resample([1.0], [4.0], [0.0, 5.0]), [4.0, 4.0])

    def test_empty_series(self):
        with pytest.raises(ValidationError, match="empty"):
            resample([], [], [0.0])

    def test_shape_mismatch(self):
        with pytest.raises(ValidationError):
            resample([0.0, 1.0], [1.0], [0.5])


class TestResampleLongTable:
    """Resampling every series of a long table."""

    def test_common_grid(self):
        table = pd.DataFrame({
            "combination_index": [1, 1, 1, 1, 1],
            "replicate_index": [1, 1, 2, 2, 2],
            "time": [0.0, 2.0, 0.0, 1.0, 3.0],
            "variable": ["x"] * 5,
            "value": [0.0, 2.0, 10.0, 11.0, 13.0],
        })

        result = resample_long_table(table, [0.0, 1.0, 2.0])

        assert list(result.columns) == list(table.columns)
        assert result["time"].tolist() == [0.0, 1.0, 2.0, 0.0, 1.0, 2.0]
        np.testing.assert_allclose(result["value"], [0.0, 1.0, 2.0, 10.0, 11.0, 12.0])
        assert result["replicate_index"].tolist() == [1, 1, 1, 2, 2, 2]
        assert result["combination_index"].dtype == table["combination_index"].dtype

    def test_empty_table(self):
        table = pd.DataFrame({
            "combination_index": pd.Series(dtype="int64"),
            "replicate_index": pd.Series(dtype="int64"),
            "time": pd.Series(dtype="float64"),
            "variable": pd.Series(dtype="object"),
            "value": pd.Series(dtype="float64"),
        })

        assert resample_long_table(table, [0.0, 1.0]).empty
