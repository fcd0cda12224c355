"""
Simulation engine, parameter scans and plotting utilities.

Provides ODE simulation of reaction models with variants, scans over one
model quantity with per-iteration failure isolation, and time-course plots.
"""

from .config import ConfigSet, ConfigSnapshot, scoped_config
from .errors import (
    SimulationToolsError,
    SimulationInterrupt,
    SimulationError,
    DataSelectionError,
    ConfigRestoreError,
    ScanIterationWarning
)
from .variants import Variant, VariantEntry
from .simulator import Simulator, Trajectory, RunInfo, simulate
from .scan import SweepSpecification, ScanReport, run_scan, run_simulation
from .selection import ALL, NamedSeries, resolve_series
from .plotting import (
    LayoutMode,
    AxesLabels,
    AxesStyle,
    PlotRequest,
    plot_time,
    save_figure
)

__all__ = [
    'ConfigSet',
    'ConfigSnapshot',
    'scoped_config',
    'SimulationToolsError',
    'SimulationInterrupt',
    'SimulationError',
    'DataSelectionError',
    'ConfigRestoreError',
    'ScanIterationWarning',
    'Variant',
    'VariantEntry',
    'Simulator',
    'Trajectory',
    'RunInfo',
    'simulate',
    'SweepSpecification',
    'ScanReport',
    'run_scan',
    'run_simulation',
    'ALL',
    'NamedSeries',
    'resolve_series',
    'LayoutMode',
    'AxesLabels',
    'AxesStyle',
    'PlotRequest',
    'plot_time',
    'save_figure'
]
