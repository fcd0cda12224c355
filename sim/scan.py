"""
Parameter scans and single-run tasks.

run_scan() simulates a model once per candidate value of one quantity.
Failed iterations are recorded and skipped; interrupts abort the scan.
"""

import logging
import warnings
import numpy as np
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from tqdm.auto import tqdm

from .config import ConfigSet, scoped_config
from .errors import SimulationInterrupt, ScanIterationWarning
from .simulator import Trajectory, simulate
from .variants import Variant, VariantEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepSpecification:
    """
    Candidate values for one model quantity.

    Attributes:
        target: Species name or 'compartment.species' path, or parameter name
        values: Candidate values, in scan order
        attribute: Overridden attribute ('initial_amount' or 'value')
        entry_type: 'species' or 'parameter'
    """
    target: str
    values: Tuple[float, ...]
    attribute: str = 'initial_amount'
    entry_type: str = 'species'

    def __post_init__(self):
        values = tuple(float(v) for v in np.atleast_1d(self.values))
        if not values:
            raise ValueError('A sweep needs at least one value')
        object.__setattr__(self, 'values', values)
        # Fail on a bad type/attribute pair now rather than on every iteration
        self.entry(values[0])

    @classmethod
    def linspace(cls, target: str, start: float, stop: float, num: int,
                 **kwargs) -> 'SweepSpecification':
        """Evenly spaced values from start to stop (inclusive)."""
        return cls(target, tuple(np.linspace(start, stop, num)), **kwargs)

    def entry(self, value: float) -> VariantEntry:
        return VariantEntry(self.entry_type, self.target, self.attribute, value)

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class ScanReport:
    """
    Aggregated scan output.

    Attributes:
        target: Scanned quantity
        values: Successfully scanned values, in scan order
        trajectories: One trajectory per entry of values
        errored_values: Values whose simulation failed, in scan order
    """
    target: str
    values: List[float] = field(default_factory=list)
    trajectories: List[Trajectory] = field(default_factory=list)
    errored_values: List[float] = field(default_factory=list)

    @property
    def scan_names(self) -> List[str]:
        return [self.target]

    @property
    def n_runs(self) -> int:
        return len(self.trajectories)

    def __len__(self) -> int:
        return len(self.trajectories)

    def __iter__(self):
        return iter(zip(self.values, self.trajectories))


def run_scan(model, config: ConfigSet, sweep: SweepSpecification,
             simulate: Callable = simulate,
             overrides: Optional[Dict[str, Any]] = None,
             show_progress: bool = False) -> ScanReport:
    """
    Simulate the model once per sweep value.

    The configuration overrides hold for the whole scan and are undone
    afterwards, also when the scan is interrupted.

    Args:
        model: Model to simulate (not modified)
        config: Configuration shared by all runs
        sweep: Quantity and candidate values
        simulate: Callable (model, config, variant) -> Trajectory
        overrides: Temporary configuration values, e.g. {'stop_time': 200.0}
        show_progress: Show a progress bar

    Returns:
        ScanReport. Failed values are listed in errored_values and a single
        ScanIterationWarning is issued.

    Raises:
        SimulationInterrupt: Aborts the scan; no report is returned
    """
    report = ScanReport(target=sweep.target)

    with scoped_config(config, **(overrides or {})):
        for value in tqdm(sweep.values, desc='Scan', disable=not show_progress):
            # New variant per iteration; simulators may keep the one they get
            variant = Variant('scanVariant', tag='scanVariant',
                              content=[sweep.entry(value)])
            try:
                trajectory = simulate(model, config, variant)
            except SimulationInterrupt:
                raise
            except Exception as exc:
                logger.info("Scan iteration %s=%g failed: %s", sweep.target, value, exc)
                report.errored_values.append(value)
                continue

            report.trajectories.append(trajectory)
            report.values.append(value)
            logger.debug("Scan iteration %s=%g done", sweep.target, value)

    if report.errored_values:
        warnings.warn(
            'At least one scan iteration errored. '
            'The data for that iteration was not generated.',
            ScanIterationWarning,
            stacklevel=2
        )

    return report


def run_simulation(model, config: ConfigSet,
                   simulate: Callable = simulate,
                   overrides: Optional[Dict[str, Any]] = None) -> Trajectory:
    """
    Simulate the model once under temporary configuration overrides.

    Args:
        model: Model to simulate
        config: Configuration (restored afterwards)
        simulate: Callable (model, config, variant) -> Trajectory
        overrides: Temporary configuration values

    Returns:
        Trajectory
    """
    with scoped_config(config, **(overrides or {})):
        return simulate(model, config, None)
