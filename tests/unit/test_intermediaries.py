"""Tests for intermediary normalization."""

import pytest

from sdensemble.contracts.errors import ValidationError
from sdensemble.contracts.types import IntermediaryRecord
from sdensemble.simulation.intermediaries import NormalizedIntermediary, normalize_intermediaries


class TestNormalizeIntermediaries:
    """Uniform shaping of per-run intermediary records."""

    def test_basic_transformation(self):
        records = [
            {"t": [0.0, 1.0, 2.0], "saveval": [10.0, 20.0, 30.0]},
            {"t": [0.0, 1.0, 2.0], "saveval": [15.0, 25.0, 35.0]},
        ]

        normalized = normalize_intermediaries(records, ["x"])

        assert len(normalized) == 2
        assert list(normalized[0].times) == [0.0, 1.0, 2.0]
        assert list(normalized[0].values) == [10.0, 20.0, 30.0]
        assert normalized[0].parameters is None

    def test_empty_record(self):
        normalized = normalize_intermediaries([{"t": [], "saveval": []}])

        assert len(normalized) == 1
        assert normalized[0].is_empty()
        assert len(normalized[0].values) == 0

    def test_absent_records(self):
        normalized = normalize_intermediaries([None, None])

        assert len(normalized) == 2
        assert all(item == NormalizedIntermediary() for item in normalized)
        assert all(item.is_empty() for item in normalized)

    def test_content_passes_through(self):
        """Values are not converted at this stage."""
        values = [[1, 2], [3, 4]]
        record = IntermediaryRecord(times=[0, 1], values=values)

        normalized = normalize_intermediaries([record])

        assert normalized[0].values is values

    def test_already_normalized(self):
        item = NormalizedIntermediary(times=[0.0], values=[1.0])
        assert normalize_intermediaries([item])[0] is item

    def test_mismatched_lengths(self):
        with pytest.raises(ValidationError, match="2 time points but 1 values"):
            normalize_intermediaries([{"t": [0.0, 1.0], "saveval": [1.0]}])

    def test_unrecognised_record(self):
        with pytest.raises(ValidationError) as excinfo:
            normalize_intermediaries([None, 42])
        assert excinfo.value.details == {"run_index": 1}
