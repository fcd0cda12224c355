"""
Time-course plotting for single runs and scans.

plot_time() picks a layout from the number of runs and the requested
layout mode:
    - one run: the selected series on one axes, with a legend
    - several runs, overlay: every run on one shared axes
    - several runs, trellis: one axes per run
"""

import math
import os
import numpy as np
import matplotlib.pyplot as plt
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Tuple, Dict, Any, Sequence

from .errors import DataSelectionError
from .selection import ALL, as_selection, as_trajectories, resolve_series
from .simulator import Trajectory


DEFAULT_TITLE = 'States versus Time'
DEFAULT_YLABEL = 'States'


class LayoutMode(Enum):
    """How several runs share a figure."""
    OVERLAY = 'one axes'
    TRELLIS = 'trellis'


@dataclass
class AxesLabels:
    """Label overrides; None keeps the computed default."""
    title: Optional[str] = None
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None


@dataclass
class AxesStyle:
    """
    Plot styling.

    Attributes:
        labels: Title / axis label overrides
        properties: Axes properties passed to Axes.set(), e.g.
            {'xlim': (0, 100), 'yscale': 'log'}
    """
    labels: AxesLabels = field(default_factory=AxesLabels)
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PlotRequest:
    """
    What to plot and how.

    Attributes:
        series: ALL, NamedSeries, a name or a list of names
        layout: LayoutMode (or its value, 'one axes' / 'trellis')
        style: Labels and axes properties
        palette: Line colors (defaults to the matplotlib color cycle)
    """
    series: Any = ALL
    layout: LayoutMode = LayoutMode.OVERLAY
    style: AxesStyle = field(default_factory=AxesStyle)
    palette: Optional[Sequence] = None

    def __post_init__(self):
        self.series = as_selection(self.series)
        self.layout = LayoutMode(self.layout)


@dataclass(frozen=True)
class Labels:
    """Resolved plot labels."""
    title: str
    xlabel: str
    ylabel: str


@dataclass
class PlotResult:
    """
    Output of plot_time().

    Attributes:
        figure: Matplotlib figure
        axes: Every axes drawn into
        handles: Line handles. Single run: list of lines. Overlay: object
            array (n_series x n_runs). Trellis: one list of lines per run.
        labels: Labels applied to the plot
        series: Series names that were drawn, in order
        legend: Legend (single run only)
    """
    figure: plt.Figure
    axes: List[plt.Axes]
    handles: Any
    labels: Labels
    series: List[str]
    legend: Any = None

    @property
    def legend_entries(self) -> List[str]:
        return list(self.series) if self.legend is not None else []


def default_palette() -> List:
    """Colors of the active matplotlib property cycle."""
    return list(plt.rcParams['axes.prop_cycle'].by_key()['color'])


def literal_text(text: str) -> str:
    """Escape text so matplotlib draws it as-is (no mathtext)."""
    return text.replace('$', r'\$')


def infer_time_label(trajectories: Sequence[Trajectory]) -> str:
    """
    X-axis label for a set of runs.

    'Time (<unit>)' when unit conversion was on and every run declares the
    same non-empty time unit; 'Time' otherwise.
    """
    first = trajectories[0]
    config = first.run_info.config
    units = first.time_units

    if (config is not None and config.unit_conversion and units
            and all(t.time_units == units for t in trajectories)):
        return f'Time ({units})'
    return 'Time'


def resolve_labels(overrides: Optional[AxesLabels], default_title: str,
                   default_xlabel: str, default_ylabel: str) -> Labels:
    """
    Combine default labels with per-field overrides.

    Args:
        overrides: User labels (any field may be None)
        default_title: Title if not overridden
        default_xlabel: X label if not overridden
        default_ylabel: Y label if not overridden

    Returns:
        Labels
    """
    overrides = overrides or AxesLabels()
    return Labels(
        title=default_title if overrides.title is None else overrides.title,
        xlabel=default_xlabel if overrides.xlabel is None else overrides.xlabel,
        ylabel=default_ylabel if overrides.ylabel is None else overrides.ylabel,
    )


def plot_series(ax: plt.Axes, trajectory: Trajectory, names: Sequence[str],
                colors: Optional[Sequence] = None) -> List:
    """
    Plot named series of one run against time.

    Args:
        ax: Matplotlib axes
        trajectory: Run to plot
        names: Series names
        colors: Per-series colors, cycled (default: axes color cycle)

    Returns:
        One line handle per series

    Raises:
        DataSelectionError: If no series resolve or a name is missing
    """
    time, data, names = trajectory.select_by_name(names)

    if data.shape[1] == 0:
        raise DataSelectionError('Species specified do not exist.')

    handles = []
    for j, name in enumerate(names):
        kwargs = {}
        if colors is not None:
            kwargs['color'] = colors[j % len(colors)]
        line, = ax.plot(time, data[:, j], label=literal_text(name), **kwargs)
        handles.append(line)
    return handles


class Renderer(ABC):
    """Draws several runs into a figure."""

    def __init__(self, palette: Optional[Sequence] = None):
        self.palette = list(palette) if palette else default_palette()

    @abstractmethod
    def render(self, trajectories: Sequence[Trajectory], names: Sequence[str],
               fig: Optional[plt.Figure] = None) -> Tuple[List[plt.Axes], Any]:
        """
        Draw the named series of every run.

        Returns:
            (axes, handles)
        """
        pass

    @abstractmethod
    def apply_labels(self, fig: plt.Figure, axes: List[plt.Axes],
                     labels: Labels) -> None:
        pass

    @staticmethod
    def _check(trajectories, names) -> None:
        # Validate every run up front so nothing is drawn on failure
        if not names:
            raise DataSelectionError('Data specified do not exist.')
        for traj in trajectories:
            traj.select_by_name(names)


class OverlayRenderer(Renderer):
    """
    All runs on one axes.

    Each run starts again from the first palette color. With a single
    series, run i is drawn in palette[i mod len(palette)] instead so runs
    can be told apart.
    """

    def colors_for_run(self, run_index: int, n_series: int) -> List:
        n = len(self.palette)
        if n_series == 1:
            return [self.palette[run_index % n]]
        return [self.palette[j % n] for j in range(n_series)]

    def render(self, trajectories, names, fig=None):
        self._check(trajectories, names)
        if fig is None:
            fig = plt.figure(figsize=(10, 6))
        ax = fig.gca()

        handles = np.empty((len(names), len(trajectories)), dtype=object)
        for i, traj in enumerate(trajectories):
            lines = plot_series(ax, traj, names,
                                self.colors_for_run(i, len(names)))
            for j, line in enumerate(lines):
                line.set_label(f'{literal_text(names[j])} (run {i + 1})')
                handles[j, i] = line

        return [ax], handles

    def apply_labels(self, fig, axes, labels):
        axes[0].set_title(labels.title)
        axes[0].set_xlabel(labels.xlabel)
        axes[0].set_ylabel(labels.ylabel)


class TrellisRenderer(Renderer):
    """One axes per run, laid out on a near-square grid."""

    def render(self, trajectories, names, fig=None):
        self._check(trajectories, names)
        n_runs = len(trajectories)
        n_cols = math.ceil(math.sqrt(n_runs))
        n_rows = math.ceil(n_runs / n_cols)

        if fig is None:
            fig = plt.figure(figsize=(4 * n_cols, 3 * n_rows))
        grid = fig.subplots(n_rows, n_cols, sharex=True, squeeze=False)

        axes = list(grid.flat)
        for ax in axes[n_runs:]:
            ax.remove()
        axes = axes[:n_runs]

        handles = []
        for i, (ax, traj) in enumerate(zip(axes, trajectories)):
            handles.append(plot_series(ax, traj, names, self.palette))
            ax.set_title(f'Run {i + 1}')
            ax.grid(True, alpha=0.3)

        return axes, handles

    def apply_labels(self, fig, axes, labels):
        fig.suptitle(labels.title)
        fig.supxlabel(labels.xlabel)
        fig.supylabel(labels.ylabel)


RENDERERS = {
    LayoutMode.OVERLAY: OverlayRenderer,
    LayoutMode.TRELLIS: TrellisRenderer,
}


def plot_time(data, request: Optional[PlotRequest] = None,
              fig: Optional[plt.Figure] = None,
              ax: Optional[plt.Axes] = None) -> PlotResult:
    """
    Plot simulation states versus time.

    Args:
        data: ScanReport, Trajectory, or list of trajectories
        request: Series, layout and style (default: all series, overlay)
        fig: Figure to draw into (created if None)
        ax: Axes to draw into (single run or overlay only)

    Returns:
        PlotResult

    Raises:
        DataSelectionError: If there is no data or a requested series does
            not exist. Nothing is drawn in that case.
    """
    request = request or PlotRequest()
    trajectories = as_trajectories(data)
    if not trajectories:
        raise DataSelectionError('No simulation data to plot')

    # Resolve before drawing anything
    names = resolve_series(trajectories, request.series)
    labels = resolve_labels(request.style.labels, DEFAULT_TITLE,
                            infer_time_label(trajectories), DEFAULT_YLABEL)
    properties = request.style.properties

    if ax is not None:
        if len(trajectories) > 1 and request.layout is LayoutMode.TRELLIS:
            raise ValueError('Trellis layout draws its own axes; pass fig instead of ax')
        fig = ax.figure
        fig.sca(ax)
    elif fig is None:
        fig = plt.figure(figsize=(10, 6))

    if len(trajectories) > 1:
        renderer = RENDERERS[request.layout](palette=request.palette)
        axes, handles = renderer.render(trajectories, names, fig)
        renderer.apply_labels(fig, axes, labels)

        if properties:
            for a in axes:
                a.set(**properties)

        return PlotResult(fig, axes, handles, labels, names)

    # Single run
    ax = fig.gca()
    handles = plot_series(ax, trajectories[0], names, request.palette)

    if properties and handles:
        handles[0].axes.set(**properties)

    ax.set_title(labels.title)
    ax.set_xlabel(labels.xlabel)
    ax.set_ylabel(labels.ylabel)
    ax.grid(True, alpha=0.3)

    legend = ax.legend(handles, [literal_text(n) for n in names],
                       loc='upper left', bbox_to_anchor=(1.02, 1.0),
                       borderaxespad=0.0)

    return PlotResult(fig, [ax], handles, labels, names, legend)


def save_figure(fig: plt.Figure, filename: str,
                output_dir: str = 'report/figures',
                formats: Sequence[str] = ('png', 'pdf')) -> List[str]:
    """
    Save figure to multiple formats.

    Args:
        fig: Matplotlib figure
        filename: Base filename (without extension)
        output_dir: Output directory
        formats: File formats

    Returns:
        Paths written
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = []
    for fmt in formats:
        path = os.path.join(output_dir, f'{filename}.{fmt}')
        fig.savefig(path, dpi=150, bbox_inches='tight')
        paths.append(path)
    return paths
