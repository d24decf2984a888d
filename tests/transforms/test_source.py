"""
Tests for the series source node.
"""

import pytest

from tsgraph.core.interface import InvalidSocketError
from tsgraph.data import Longitudinal, TimeSeries
from tsgraph.transforms import SeriesSource


class TestSeriesSource:
    """Test data injection."""

    def test_holds_series(self, make_series):
        series = make_series([1.0, 2.0])
        source = SeriesSource(series)

        assert source.is_valid
        assert source.get_output(0) is series
        assert source.num_inputs() == 0
        assert source.get_output_name(0) == "Data"

    def test_empty_source_invalid(self):
        source = SeriesSource()

        assert not source.is_valid
        assert source.get_output(0) is None

    def test_set_series(self, make_series):
        source = SeriesSource()
        panel = Longitudinal([make_series([1.0])])

        source.set_series(panel)

        assert source.is_valid
        assert source.get_output(0) is panel

    def test_has_no_inputs(self, make_series):
        with pytest.raises(InvalidSocketError):
            SeriesSource().set_input(0, make_series([1.0]))

    def test_from_csv(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("date,price\n2024-01-01,1.0\n2024-01-02,2.0\n")

        source = SeriesSource(csv=path, column='price')
        out = source.get_output(0)

        assert isinstance(out, TimeSeries)
        assert out.title == 'price'
        assert len(out) == 2

    def test_csv_needs_column(self, tmp_path):
        with pytest.raises(ValueError, match="column"):
            SeriesSource(csv=tmp_path / "data.csv")
