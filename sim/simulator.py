"""
Continuous-time simulation engine.

Integrates a ReactionModel under a ConfigSet and an optional Variant,
returning an immutable Trajectory.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Tuple, Sequence
from scipy.integrate import solve_ivp

from .config import ConfigSet, convert_time
from .errors import SimulationError, SimulationInterrupt, DataSelectionError
from .variants import VariantEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunInfo:
    """
    Provenance of one simulation.

    Attributes:
        model_name: Name of the simulated model
        config: Copy of the configuration at run time (None if unknown)
        variant: Variant entries applied to the run
    """
    model_name: str = ''
    config: Optional[ConfigSet] = None
    variant: Tuple[VariantEntry, ...] = ()


@dataclass(frozen=True, eq=False)
class Trajectory:
    """
    Result of one simulation.

    Attributes:
        time: Time vector (T,)
        data: Series values (T x n_series)
        names: Series names, column order of data
        time_units: Declared unit of the time vector
        run_info: Provenance (configuration, variant)
    """
    time: np.ndarray
    data: np.ndarray
    names: Tuple[str, ...]
    time_units: str = ''
    run_info: RunInfo = field(default_factory=RunInfo)

    def __post_init__(self):
        time = np.array(self.time, dtype=float)
        data = np.array(self.data, dtype=float)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        names = tuple(self.names)
        if data.shape != (len(time), len(names)):
            raise ValueError(
                f"data shape {data.shape} does not match "
                f"{len(time)} samples x {len(names)} series")
        time.flags.writeable = False
        data.flags.writeable = False
        object.__setattr__(self, 'time', time)
        object.__setattr__(self, 'data', data)
        object.__setattr__(self, 'names', names)

    def select_by_name(self, names: Sequence[str]) -> Tuple[np.ndarray, np.ndarray, List[str]]:
        """
        Series with the given names, in the given order.

        Args:
            names: Series names

        Returns:
            (time, data, names) with one data column per requested name

        Raises:
            DataSelectionError: If any name is not a series of this trajectory
        """
        missing = [n for n in names if n not in self.names]
        if missing:
            raise DataSelectionError(
                f"Series {missing} do not exist. Available: {list(self.names)}")
        idx = [self.names.index(n) for n in names]
        return self.time, self.data[:, idx], list(names)

    def compute_metrics(self) -> Dict[str, Dict[str, float]]:
        """
        Per-series summary.

        Returns:
            {name: {'max', 'time_of_max', 'final'}}
        """
        metrics = {}
        for j, name in enumerate(self.names):
            column = self.data[:, j]
            k = int(np.argmax(column))
            metrics[name] = {
                'max': float(column[k]),
                'time_of_max': float(self.time[k]),
                'final': float(column[-1]),
            }
        return metrics


class Simulator:
    """
    ODE simulation engine.

    Integrates model.rates with scipy.integrate.solve_ivp. Variants are
    applied to copies of the initial state and parameters; the model is
    never modified.
    """

    def __init__(self, n_points: Optional[int] = None,
                 max_step: float = np.inf):
        """
        Initialize simulator.

        Args:
            n_points: Number of evenly spaced output samples (None: report
                the solver's own steps)
            max_step: Largest solver step, in model time units
        """
        self.n_points = n_points
        self.max_step = max_step
        self._cancelled = False

    def cancel(self) -> None:
        """
        Request that the simulation stop at its next solver step.

        A request made between runs stops the next run. The request is
        consumed once it has interrupted a run.
        """
        self._cancelled = True

    def run(self, model, config: ConfigSet, variant=None) -> Trajectory:
        """
        Simulate the model.

        Args:
            model: ReactionModel instance
            config: Configuration (stop time, units, solver)
            variant: Variant with species/parameter overrides (optional)

        Returns:
            Trajectory with one series per species

        Raises:
            SimulationInterrupt: If cancelled or interrupted from the keyboard
            SimulationError: For any other failure
        """
        try:
            x0 = model.initial_state(variant)
            params = model.parameter_values(variant)
        except KeyError as exc:
            raise SimulationError(exc.args[0]) from exc

        # Stop time in the model's units
        if config.unit_conversion:
            t_stop = convert_time(config.stop_time, config.time_units, model.time_units)
        else:
            t_stop = config.stop_time

        t_eval = None
        if self.n_points is not None:
            t_eval = np.linspace(0.0, t_stop, self.n_points)

        def rhs(t, x):
            if self._cancelled:
                self._cancelled = False
                raise SimulationInterrupt(f"Simulation of '{model.name}' cancelled")
            return model.rates(t, x, params)

        logger.debug("Simulating %s to t=%g %s", model.name, t_stop, model.time_units)
        try:
            sol = solve_ivp(rhs, (0.0, t_stop), x0, method=config.solver,
                            t_eval=t_eval, rtol=config.rel_tol,
                            atol=config.abs_tol, max_step=self.max_step)
        except KeyboardInterrupt as exc:
            raise SimulationInterrupt(f"Simulation of '{model.name}' interrupted") from exc
        except (ValueError, ArithmeticError) as exc:
            raise SimulationError(f"Simulation of '{model.name}' failed: {exc}") from exc

        if not sol.success:
            raise SimulationError(f"Solver failed: {sol.message}")
        if not np.all(np.isfinite(sol.y)):
            raise SimulationError("Solution contains non-finite values")

        time = sol.t
        if config.unit_conversion:
            time = convert_time(sol.t, model.time_units, config.time_units)

        return Trajectory(
            time=time,
            data=sol.y.T,
            names=tuple(model.species_names),
            time_units=config.time_units,
            run_info=RunInfo(
                model_name=model.name,
                config=config.copy(),
                variant=variant.content if variant is not None else ()
            )
        )


def simulate(model, config: ConfigSet, variant=None) -> Trajectory:
    """Run one simulation with a default Simulator."""
    return Simulator().run(model, config, variant)
