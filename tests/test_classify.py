"""
Tests for pack type inference.
"""

import pandas as pd
import pytest

from rulepack.classify import as_frame, classify
from rulepack.errors import AmbiguousPackType, MalformedPackResult
from rulepack.keys import KEY_NAME
from rulepack.packs import PackType


class TestCanonicalOutputs:

    def test_whole(self):
        assert classify({'nrow_gt_3': True}) is PackType.WHOLE

    def test_whole_from_frame(self):
        assert classify(pd.DataFrame({'ok': [True], 'bad': [False]})) is PackType.WHOLE

    def test_grouped(self, keyed_small):
        result = keyed_small.groupby('g')['y'].min().gt(0).to_frame('positive')
        assert classify(result, group_vars=['g']) is PackType.GROUPED

    def test_column(self):
        result = pd.DataFrame({'positive._.x': [False], 'positive._.y': [True]})
        assert classify(result) is PackType.COLUMN

    def test_row(self, keyed_small):
        result = (keyed_small[['x']] > 0).rename(columns={'x': 'positive_x'})
        assert classify(result) is PackType.ROW

    def test_row_with_key_as_column(self, keyed_small):
        result = (keyed_small[['x']] > 0).reset_index()
        assert KEY_NAME in result.columns
        assert classify(result) is PackType.ROW

    def test_cell(self, keyed_small):
        result = (keyed_small[['x', 'y']] > 0).add_prefix('positive._.')
        assert classify(result) is PackType.CELL

    def test_filtered_row_output_is_still_row(self, keyed_small):
        result = (keyed_small[keyed_small['y'] > 0][['x']] > 0)
        assert classify(result) is PackType.ROW


class TestPrecedence:

    def test_group_vars_win_over_row_key(self, keyed_small):
        result = (keyed_small[['x']] > 0)
        assert classify(result, group_vars=['g']) is PackType.GROUPED

    def test_declared_type_returned_as_is(self):
        assert classify({'ok': True}, declared_type=PackType.COLUMN) is PackType.COLUMN

    def test_separator_decides_composite(self):
        result = pd.DataFrame({'positive__x': [True]})
        assert classify(result) is PackType.WHOLE
        assert classify(result, rule_sep='__') is PackType.COLUMN

    def test_deterministic(self, keyed_small):
        result = (keyed_small[['x', 'y']] > 0).add_prefix('positive._.')
        assert {classify(result) for _ in range(5)} == {PackType.CELL}


class TestAmbiguous:

    def test_multi_row_without_signals(self):
        result = pd.DataFrame({'ok': [True, False]})
        with pytest.raises(AmbiguousPackType, match='2-row'):
            classify(result)

    def test_guessing_disabled(self):
        with pytest.raises(AmbiguousPackType, match='guessing is disabled'):
            classify({'ok': True}, guess=False)

    def test_guessing_disabled_with_declared_type(self):
        assert classify({'ok': True}, declared_type=PackType.WHOLE, guess=False) is PackType.WHOLE


class TestAsFrame:

    def test_dict(self):
        frame = as_frame({'a': True, 'b': False})
        assert list(frame.columns) == ['a', 'b']
        assert len(frame) == 1

    def test_summary_series_is_one_row(self):
        frame = as_frame(pd.Series({'a': True, 'b': False}))
        assert list(frame.columns) == ['a', 'b']
        assert len(frame) == 1

    def test_keyed_series_is_one_column(self, keyed_small):
        series = (keyed_small['x'] > 0).rename('positive_x')
        frame = as_frame(series)
        assert list(frame.columns) == ['positive_x']
        assert frame.index.name == KEY_NAME
        assert classify(series) is PackType.ROW

    def test_keyed_series_needs_name(self, keyed_small):
        series = keyed_small['x'] > 0
        series.name = None
        with pytest.raises(MalformedPackResult):
            as_frame(series)

    def test_unsupported_output(self):
        with pytest.raises(MalformedPackResult, match='list'):
            as_frame([True, False])

    def test_duplicate_columns_rejected(self):
        frame = pd.DataFrame([[True, False]], columns=['same', 'same'])
        with pytest.raises(MalformedPackResult, match='duplicate column names'):
            as_frame(frame)
