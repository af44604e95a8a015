"""Tests for request normalization."""

import logging

import numpy as np
import pytest

from stats_engine.core.errors import InputError
from stats_engine.core.models.request import RegressionRequest, prepare_independent_data
from stats_engine.core.models.variable import MissingValueSpec, VariableInfo


class TestPrepareIndependentData:
    """Orientation rules for predictor data."""

    def test_flat_vector_is_one_column(self):
        X, ambiguous = prepare_independent_data([1, 2, 3])
        assert X.shape == (3, 1)
        assert ambiguous is False

    def test_single_outer_element_is_one_predictor(self):
        X, _ = prepare_independent_data([[1, 2, 3, 4]])
        assert X.shape == (4, 1)
        assert X[:, 0].tolist() == [1.0, 2.0, 3.0, 4.0]

    def test_variable_major_is_transposed(self):
        X, ambiguous = prepare_independent_data([[1, 2, 3], [4, 5, 6]])
        assert X.shape == (3, 2)
        assert X[0].tolist() == [1.0, 4.0]
        assert ambiguous is False

    def test_single_value_rows_are_observations(self):
        X, _ = prepare_independent_data([[1], [2], [3]])
        assert X.shape == (3, 1)

    def test_square_input_is_flagged(self, caplog):
        with caplog.at_level(logging.WARNING):
            X, ambiguous = prepare_independent_data([[1, 2], [3, 4]])
        assert ambiguous is True
        assert X.tolist() == [[1.0, 3.0], [2.0, 4.0]]
        assert "square" in caplog.text

    def test_numpy_input(self):
        X, _ = prepare_independent_data(np.arange(6.0).reshape(2, 3))
        assert X.shape == (3, 2)

    @pytest.mark.parametrize("bad", [[], [[1, 2], [3]], [[], []]])
    def test_invalid_input(self, bad):
        with pytest.raises(InputError):
            prepare_independent_data(bad)


class TestFromArrays:
    """Listwise deletion and validation."""

    def test_default_variable_names(self):
        request = RegressionRequest.from_arrays([1, 2, 3], [[1, 2, 3], [3, 1, 2]])
        assert [v.name for v in request.variable_infos] == ["Variable 1", "Variable 2"]
        assert request.n_observations == 3
        assert request.n_predictors == 2

    def test_listwise_missing(self):
        infos = [VariableInfo(name="x", missing=MissingValueSpec(discrete=[-9]))]
        request = RegressionRequest.from_arrays(
            [1.0, 2.0, None, 4.0, 5.0],
            [1.0, -9.0, 3.0, 4.0, 5.0],
            variable_infos=infos,
        )
        assert request.dependent.tolist() == [1.0, 4.0, 5.0]
        assert request.independent[:, 0].tolist() == [1.0, 4.0, 5.0]
        assert request.dropped_cases == 2

    def test_dependent_missing_range(self):
        request = RegressionRequest.from_arrays(
            [1, 2, 97, 4], [1, 2, 3, 4],
            dependent_missing=MissingValueSpec(range=(90, 99)),
        )
        assert request.n_observations == 3

    def test_length_mismatch_hint(self):
        with pytest.raises(InputError, match="one array per variable"):
            RegressionRequest.from_arrays([1, 2, 3, 4], [[1, 2, 3], [4, 5, 6]])

    def test_empty_dependent(self):
        with pytest.raises(InputError):
            RegressionRequest.from_arrays([], [1, 2])

    def test_all_cases_missing(self):
        with pytest.raises(InputError, match="No valid cases"):
            RegressionRequest.from_arrays([None, None], [1, 2])

    def test_info_count_mismatch(self):
        with pytest.raises(InputError):
            RegressionRequest.from_arrays(
                [1, 2, 3], [1, 2, 3],
                variable_infos=[VariableInfo("a"), VariableInfo("b")],
            )


class TestFromPayload:
    """Wire payload keys."""

    def test_reads_variable_infos(self):
        request = RegressionRequest.from_payload({
            "dependentData": [1, 2, 3, -1],
            "independentData": [[1, 2, 3, 4]],
            "independentVariableInfos": [{"name": "dose", "label": "Dose (mg)"}],
            "dependentVariableInfo": {"missing": {"discrete": [-1]}},
        })
        assert request.variable_infos[0].display_name == "Dose (mg)"
        assert request.n_observations == 3

    def test_unnamed_info_gets_default_name(self):
        request = RegressionRequest.from_payload({
            "dependentData": [1, 2, 3],
            "independentData": [1, 2, 4],
            "independentVariableInfos": [{}],
        })
        assert request.variable_infos[0].name == "Variable 1"

    def test_missing_key(self):
        with pytest.raises(InputError, match="Missing data"):
            RegressionRequest.from_payload({"dependentData": [1, 2, 3]})

    def test_non_mapping(self):
        with pytest.raises(InputError):
            RegressionRequest.from_payload([1, 2, 3])
