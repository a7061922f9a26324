"""Tests for parameter-combination generation."""

import pytest

from sdensemble.config.model import DesignConfig
from sdensemble.contracts.errors import InvalidDesign
from sdensemble.simulation.design import (
    RunTask,
    build_run_tasks,
    design_table,
    generate_combinations,
)


class TestCrossedDesign:
    """Full factorial designs."""

    def test_two_parameters(self):
        """3 x 2 values give 6 combinations and 60 runs."""
        ranges = {"alpha": [0.1, 0.5, 1.0], "beta": [2.0, 5.0]}
        combinations, total = generate_combinations(ranges, crossed=True, replicates=10)

        assert len(combinations) == 6
        assert total == 60
        assert len(set(combinations)) == 6

    def test_three_parameters(self):
        """2 x 2 x 2 values give 8 combinations."""
        ranges = {"a": [1, 2], "b": [10, 20], "c": [100, 200]}
        combinations, total = generate_combinations(ranges, crossed=True, replicates=5)

        assert len(combinations) == 8
        assert total == 40

    @pytest.mark.parametrize("sizes", [(1,), (3,), (2, 3), (4, 1, 2), (2, 2, 2, 3)])
    def test_count_is_product_of_sizes(self, sizes):
        """Combination count equals the product of the range sizes."""
        ranges = {f"p{i}": list(range(size)) for i, size in enumerate(sizes)}
        combinations, total = generate_combinations(ranges, crossed=True, replicates=3)

        expected = 1
        for size in sizes:
            expected *= size
        assert len(combinations) == expected
        assert total == expected * 3
        assert len(set(combinations)) == expected

    def test_order_is_sorted_odometer(self):
        """Names are sorted and the last name varies fastest."""
        ranges = {"b": [10, 20], "a": [1, 2]}
        combinations, _ = generate_combinations(ranges, crossed=True)

        assert combinations == [(1, 10), (1, 20), (2, 10), (2, 20)]

    def test_order_is_reproducible(self):
        """Insertion order of the mapping does not change the result."""
        first, _ = generate_combinations({"x": [1, 2], "y": [3, 4]})
        second, _ = generate_combinations({"y": [3, 4], "x": [1, 2]})
        assert first == second

    def test_single_parameter(self):
        """A single range gives one combination per value."""
        combinations, total = generate_combinations({"alpha": [0.1, 0.5, 1.0]}, replicates=5)

        assert combinations == [(0.1,), (0.5,), (1.0,)]
        assert total == 15

    def test_replicate_counts(self):
        """Total runs scale with the replicate count."""
        ranges = {"a": [1, 2], "b": [10, 20]}
        _, total_10 = generate_combinations(ranges, replicates=10)
        _, total_100 = generate_combinations(ranges, replicates=100)

        assert total_10 == 40
        assert total_100 == 400


class TestPairedDesign:
    """Element-wise (zipped) designs."""

    def test_pairing_uses_sorted_names(self):
        """The i-th values of every sorted range are paired."""
        ranges = {"beta": [2.0, 5.0, 10.0], "alpha": [0.1, 0.5, 1.0]}
        combinations, total = generate_combinations(ranges, crossed=False, replicates=10)

        assert combinations == [(0.1, 2.0), (0.5, 5.0), (1.0, 10.0)]
        assert total == 30

    def test_mismatched_lengths(self):
        """Unequal lengths are rejected."""
        ranges = {"alpha": [0.1, 0.5], "beta": [2.0, 5.0, 10.0]}

        with pytest.raises(InvalidDesign, match="equal-length") as excinfo:
            generate_combinations(ranges, crossed=False, replicates=10)
        assert excinfo.value.details["lengths"] == {"alpha": 2, "beta": 3}

    def test_mismatch_allowed_when_crossed(self):
        """Crossed designs accept ranges of any length."""
        combinations, _ = generate_combinations({"a": [1, 2], "b": [1, 2, 3]}, crossed=True)
        assert len(combinations) == 6


class TestDesignValidation:
    """Invalid design inputs."""

    def test_empty_ranges(self):
        with pytest.raises(InvalidDesign, match="must not be empty"):
            generate_combinations({})

    def test_empty_sequence(self):
        with pytest.raises(InvalidDesign, match="no candidate values"):
            generate_combinations({"a": [1, 2], "b": []})

    def test_zero_replicates(self):
        with pytest.raises(InvalidDesign, match="replicates"):
            generate_combinations({"a": [1]}, replicates=0)


class TestDesignTable:
    """Design tables for joining summaries back to parameter values."""

    def test_columns_and_index(self):
        table = design_table({"beta": [2.0, 5.0], "alpha": [0.1, 0.5]}, crossed=False)

        assert list(table.columns) == ["combination_index", "alpha", "beta"]
        assert table["combination_index"].tolist() == [1, 2]
        assert table["alpha"].tolist() == [0.1, 0.5]
        assert table["beta"].tolist() == [2.0, 5.0]


class TestRunTasks:
    """Expansion of a design into per-run tasks."""

    def test_combination_major_order(self):
        tasks = build_run_tasks({"a": [1, 2]}, replicates=3, base_seed=100)

        assert len(tasks) == 6
        assert all(isinstance(task, RunTask) for task in tasks)
        assert [task.run_index for task in tasks] == list(range(6))
        assert [task.combination_index for task in tasks] == [1, 1, 1, 2, 2, 2]
        assert [task.replicate_index for task in tasks] == [1, 2, 3, 1, 2, 3]
        assert tasks[3].parameters == {"a": 2}

    def test_seeds_are_deterministic_and_distinct(self):
        first = build_run_tasks({"a": [1, 2], "b": [3]}, replicates=4, base_seed=7)
        second = build_run_tasks({"a": [1, 2], "b": [3]}, replicates=4, base_seed=7)

        assert [t.seed for t in first] == [t.seed for t in second]
        assert len({t.seed for t in first}) == len(first)
        assert first[0].seed == 7 + 10_000 + 1


class TestDesignSettings:
    """Defaults taken from the design configuration."""

    def test_run_tasks_use_config(self):
        config = DesignConfig(crossed=False, n_replicates=2, base_seed=50)

        tasks = build_run_tasks({"a": [1, 2], "b": [3, 4]}, config=config)

        assert len(tasks) == 4
        assert [task.parameters for task in tasks[::2]] == [{"a": 1, "b": 3}, {"a": 2, "b": 4}]
        assert tasks[0].seed == 50 + 10_000 + 1

    def test_explicit_arguments_override_config(self):
        config = DesignConfig(crossed=False, n_replicates=2, base_seed=50)

        tasks = build_run_tasks({"a": [1, 2], "b": [3, 4]}, crossed=True, replicates=1,
                                base_seed=0, config=config)

        assert len(tasks) == 4
        assert tasks[0].seed == 10_001

    def test_design_table_uses_config(self):
        table = design_table({"a": [1, 2], "b": [3, 4]}, config=DesignConfig(crossed=False))

        assert len(table) == 2

    def test_default_settings(self):
        tasks = build_run_tasks({"a": [1]})

        assert len(tasks) == 1
        assert tasks[0].seed == DesignConfig().base_seed + 10_001
