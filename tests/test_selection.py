"""
Unit tests for series selection.
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.pharmacokinetic import LDopaModel
from sim.config import ConfigSet
from sim.errors import DataSelectionError
from sim.scan import ScanReport, SweepSpecification, run_scan
from sim.selection import ALL, AllSeries, NamedSeries, as_selection, resolve_series
from sim.simulator import Trajectory


def make_trajectory(names=('A', 'B', 'C')):
    t = np.linspace(0.0, 1.0, 4)
    return Trajectory(t, np.ones((4, len(names))), tuple(names), 'second')


class TestSelection:
    """Tests for selection types."""

    def test_all_is_singleton(self):
        assert AllSeries() is ALL

    def test_as_selection(self):
        assert as_selection(None) is ALL
        assert as_selection(ALL) is ALL
        assert as_selection('A') == NamedSeries(['A'])
        assert as_selection(['A', 'C']).names == ('A', 'C')

    def test_named_keeps_order(self):
        assert NamedSeries(['C', 'A']).names == ('C', 'A')


class TestResolveSeries:
    """Tests for resolve_series."""

    def test_all_native_order(self):
        traj = make_trajectory(('Plasma', 'GI_Tract', 'Brain'))
        assert resolve_series(traj, ALL) == ['Plasma', 'GI_Tract', 'Brain']

    def test_all_uses_first_run(self):
        runs = [make_trajectory(('A', 'B')), make_trajectory(('A', 'B', 'C'))]
        assert resolve_series(runs, ALL) == ['A', 'B']

    def test_named_exact(self):
        """Test explicit names are returned exactly, in request order."""
        traj = make_trajectory(('A', 'B', 'C'))
        assert resolve_series(traj, ['A', 'C']) == ['A', 'C']
        assert resolve_series(traj, NamedSeries(['C', 'A'])) == ['C', 'A']

    def test_missing_name(self):
        """Test a missing name is an error naming the series."""
        with pytest.raises(DataSelectionError, match='Z'):
            resolve_series(make_trajectory(), ['A', 'Z'])

    def test_missing_in_later_run(self):
        runs = [make_trajectory(('A', 'B')), make_trajectory(('A',))]
        with pytest.raises(DataSelectionError, match='run 2'):
            resolve_series(runs, ['B'])

    def test_empty_selection(self):
        with pytest.raises(DataSelectionError):
            resolve_series(make_trajectory(), [])

    def test_no_series(self):
        traj = Trajectory(np.zeros(2), np.zeros((2, 0)), ())
        with pytest.raises(DataSelectionError):
            resolve_series(traj, ALL)

    def test_no_runs(self):
        with pytest.raises(DataSelectionError):
            resolve_series([], ALL)

    def test_scan_report(self):
        """Test a scan report resolves against its trajectories."""
        report = ScanReport('A', [1.0, 2.0],
                            [make_trajectory(('A', 'B')), make_trajectory(('A', 'B'))])
        assert resolve_series(report, ALL) == ['A', 'B']
        assert resolve_series(report, ['B']) == ['B']

    def test_scan_report_from_run_scan(self):
        report = run_scan(LDopaModel(), ConfigSet(stop_time=5.0),
                          SweepSpecification('GI_Tract', [0.5, 1.0]))
        assert resolve_series(report, ALL) == ['GI_Tract', 'Plasma']

    def test_empty_scan_report(self):
        report = ScanReport('A', errored_values=[1.0])
        with pytest.raises(DataSelectionError):
            resolve_series(report, ALL)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
