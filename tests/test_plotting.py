"""
Unit tests for time-course plotting.

Tests verify:
1. Label inference and overrides
2. Overlay colors (per run for one series, per series otherwise)
3. Trellis layout
4. Single-run legend
5. Selection errors draw nothing
"""

import numpy as np
import pytest
import sys
import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgba

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sim.config import ConfigSet
from sim.errors import DataSelectionError
from sim.scan import ScanReport
from sim.selection import ALL, NamedSeries
from sim.simulator import Trajectory, RunInfo
from sim.plotting import (AxesLabels, AxesStyle, Labels, LayoutMode,
                          OverlayRenderer, PlotRequest, TrellisRenderer,
                          infer_time_label, literal_text, plot_time,
                          resolve_labels, save_figure)


PALETTE = ['red', 'green', 'blue']


def make_run(names=('GI_Tract', 'Plasma'), units='second', conversion=True, scale=1.0):
    t = np.linspace(0.0, 10.0, 11)
    data = np.column_stack([scale * (j + 1) * t for j in range(len(names))])
    info = RunInfo('system', ConfigSet(time_units=units or 'second',
                                       unit_conversion=conversion))
    return Trajectory(t, data, tuple(names), units, info)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestLabels:
    """Tests for label inference and resolution."""

    def test_time_label_with_units(self):
        assert infer_time_label([make_run(), make_run()]) == 'Time (second)'

    def test_time_label_without_conversion(self):
        assert infer_time_label([make_run(conversion=False)]) == 'Time'

    def test_time_label_mixed_units(self):
        runs = [make_run(units='second'), make_run(units='minute')]
        assert infer_time_label(runs) == 'Time'

    def test_time_label_empty_units(self):
        assert infer_time_label([make_run(units='')]) == 'Time'

    def test_time_label_no_config(self):
        traj = Trajectory([0.0, 1.0], [[0.0], [1.0]], ('A',), 'second')
        assert infer_time_label([traj]) == 'Time'

    def test_override_single_field(self):
        """Test overriding one label keeps the other defaults."""
        labels = resolve_labels(AxesLabels(ylabel='Concentration'),
                                'States versus Time', 'Time (second)', 'States')
        assert labels == Labels('States versus Time', 'Time (second)', 'Concentration')

    def test_no_overrides(self):
        labels = resolve_labels(None, 'T', 'X', 'Y')
        assert labels == Labels('T', 'X', 'Y')


class TestOverlayRenderer:
    """Tests for the one-axes overlay."""

    def test_single_series_colored_by_run(self):
        """Test run i uses palette[i mod n] when one series is drawn."""
        runs = [make_run(scale=s) for s in (1.0, 2.0, 3.0, 4.0)]
        axes, handles = OverlayRenderer(PALETTE).render(runs, ['Plasma'])

        assert len(axes) == 1
        assert handles.shape == (1, 4)
        colors = [to_rgba(h.get_color()) for h in handles[0]]
        expected = [to_rgba(c) for c in ['red', 'green', 'blue', 'red']]
        assert colors == expected

    def test_multi_series_cycle_restarts_per_run(self):
        """Test each run starts again from the first palette color."""
        runs = [make_run(), make_run(scale=2.0)]
        _, handles = OverlayRenderer(PALETTE).render(runs, ['GI_Tract', 'Plasma'])

        assert handles.shape == (2, 2)
        for i in range(2):
            assert to_rgba(handles[0, i].get_color()) == to_rgba('red')
            assert to_rgba(handles[1, i].get_color()) == to_rgba('green')

    def test_empty_selection(self):
        with pytest.raises(DataSelectionError):
            OverlayRenderer(PALETTE).render([make_run(), make_run()], [])

    def test_missing_series_draws_nothing(self):
        fig = plt.figure()
        runs = [make_run(), make_run(names=('GI_Tract',))]
        with pytest.raises(DataSelectionError):
            OverlayRenderer(PALETTE).render(runs, ['Plasma'], fig)
        assert all(len(ax.lines) == 0 for ax in fig.axes)


class TestTrellisRenderer:
    """Tests for the per-run trellis."""

    def test_one_axes_per_run(self):
        runs = [make_run() for _ in range(5)]
        axes, handles = TrellisRenderer().render(runs, ['GI_Tract', 'Plasma'])

        assert len(axes) == 5
        assert len(handles) == 5
        for ax in axes:
            assert len(ax.lines) == 2
        # 3 x 2 grid with the spare cell removed
        assert len(axes[0].figure.axes) == 5


class TestPlotTime:
    """Tests for the plot dispatcher."""

    def test_single_run_legend_all(self):
        """Test legend entries are the series names, as literal text."""
        result = plot_time(make_run(), PlotRequest(series=ALL))

        assert result.legend_entries == ['GI_Tract', 'Plasma']
        texts = [t.get_text() for t in result.legend.get_texts()]
        assert texts == ['GI_Tract', 'Plasma']
        assert result.axes[0].get_title() == 'States versus Time'
        assert result.axes[0].get_xlabel() == 'Time (second)'
        assert result.axes[0].get_ylabel() == 'States'

    def test_single_run_legend_named_order(self):
        run = make_run(names=('A', 'B', 'C'))
        result = plot_time(run, PlotRequest(series=['C', 'A']))
        assert result.legend_entries == ['C', 'A']
        assert len(result.axes[0].lines) == 2

    def test_legend_text_is_literal(self):
        run = make_run(names=('$x_1$', 'Plasma'))
        result = plot_time(run)
        texts = [t.get_text() for t in result.legend.get_texts()]
        assert texts[0] == literal_text('$x_1$')
        assert result.legend_entries[0] == '$x_1$'

    def test_single_run_label_overrides(self):
        style = AxesStyle(labels=AxesLabels(title='My title', xlabel='Time (sec)'))
        result = plot_time(make_run(), PlotRequest(style=style))
        ax = result.axes[0]
        assert ax.get_title() == 'My title'
        assert ax.get_xlabel() == 'Time (sec)'
        assert ax.get_ylabel() == 'States'

    def test_single_run_properties(self):
        style = AxesStyle(properties={'xlim': (0.0, 5.0), 'yscale': 'log'})
        result = plot_time(make_run(), PlotRequest(style=style))
        ax = result.axes[0]
        assert ax.get_xlim() == (0.0, 5.0)
        assert ax.get_yscale() == 'log'

    def test_scan_report_overlay(self):
        runs = [make_run(scale=s) for s in (1.0, 2.0, 3.0)]
        report = ScanReport('GI_Tract', [0.5, 1.0, 1.5], runs)
        style = AxesStyle(labels=AxesLabels(ylabel='Concentration'),
                          properties={'xlim': (0.0, 8.0)})

        result = plot_time(report, PlotRequest(layout=LayoutMode.OVERLAY, style=style))

        assert len(result.axes) == 1
        ax = result.axes[0]
        assert len(ax.lines) == 6
        assert ax.get_title() == 'States versus Time'
        assert ax.get_ylabel() == 'Concentration'
        assert ax.get_xlim() == (0.0, 8.0)
        assert result.legend is None

    def test_trellis_properties_on_every_axes(self):
        runs = [make_run() for _ in range(3)]
        style = AxesStyle(properties={'ylim': (0.0, 50.0)})
        result = plot_time(runs, PlotRequest(layout='trellis', style=style))

        assert len(result.axes) == 3
        for ax in result.axes:
            assert ax.get_ylim() == (0.0, 50.0)
        assert result.figure.get_suptitle() == 'States versus Time'

    def test_missing_series_draws_nothing(self):
        """Test a bad series name fails before any drawing."""
        fig = plt.figure()
        with pytest.raises(DataSelectionError, match='Brain'):
            plot_time(make_run(), PlotRequest(series=['Plasma', 'Brain']), fig=fig)
        assert fig.axes == []

    def test_empty_report(self):
        report = ScanReport('GI_Tract', errored_values=[1.0])
        with pytest.raises(DataSelectionError):
            plot_time(report)

    def test_trellis_rejects_axes(self):
        fig, ax = plt.subplots()
        with pytest.raises(ValueError):
            plot_time([make_run(), make_run()],
                      PlotRequest(layout=LayoutMode.TRELLIS), ax=ax)

    def test_draw_into_given_axes(self):
        fig, (ax1, ax2) = plt.subplots(1, 2)
        result = plot_time(make_run(), ax=ax2)
        assert result.axes[0] is ax2
        assert len(ax1.lines) == 0

    def test_named_series_request(self):
        request = PlotRequest(series=NamedSeries(['Plasma']))
        result = plot_time([make_run(), make_run(scale=2.0)], request)
        assert result.series == ['Plasma']
        assert result.handles.shape == (1, 2)


class TestSaveFigure:
    """Tests for figure export."""

    def test_save(self, tmp_path):
        result = plot_time(make_run())
        paths = save_figure(result.figure, 'run', output_dir=str(tmp_path),
                            formats=('png',))
        assert paths == [os.path.join(str(tmp_path), 'run.png')]
        assert os.path.exists(paths[0])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
