"""
Simulation configuration and scoped overrides.

A ConfigSet is shared by every run of a task. Tasks that need a different
stop time or time unit override those fields temporarily with
scoped_config(), which restores the original values on every exit path.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterator

from .errors import ConfigRestoreError

logger = logging.getLogger(__name__)


# Seconds per time unit
TIME_UNITS: Dict[str, float] = {
    'second': 1.0,
    'minute': 60.0,
    'hour': 3600.0,
    'day': 86400.0,
}

SOLVERS = ('RK45', 'RK23', 'DOP853', 'Radau', 'BDF', 'LSODA')


def convert_time(value, from_units: str, to_units: str):
    """
    Convert a time value (scalar or array) between units.

    Args:
        value: Time value(s) in from_units
        from_units: Source unit name
        to_units: Target unit name

    Returns:
        Time value(s) in to_units
    """
    for units in (from_units, to_units):
        if units not in TIME_UNITS:
            raise ValueError(f"Unknown time unit: {units!r}")
    return value * (TIME_UNITS[from_units] / TIME_UNITS[to_units])


@dataclass
class ConfigSet:
    """
    Simulation configuration.

    Attributes:
        stop_time: Simulation end time, in time_units
        time_units: Unit of stop_time and of the returned time vector
        unit_conversion: Convert between model and configuration time units.
            When off, stop_time is taken in the model's own units and the
            declared time_units are reported unchecked.
        solver: scipy.integrate.solve_ivp method
        rel_tol: Relative solver tolerance
        abs_tol: Absolute solver tolerance
    """
    stop_time: float = 10.0
    time_units: str = 'second'
    unit_conversion: bool = True
    solver: str = 'LSODA'
    rel_tol: float = 1e-6
    abs_tol: float = 1e-9

    def __post_init__(self):
        for f in fields(self):
            self._validate(f.name, getattr(self, f.name))

    @staticmethod
    def _validate(name: str, value: Any) -> None:
        if name == 'stop_time' and not value > 0:
            raise ValueError(f"stop_time must be positive, got {value!r}")
        if name == 'time_units' and value not in TIME_UNITS:
            raise ValueError(f"Unknown time unit: {value!r}")
        if name == 'solver' and value not in SOLVERS:
            raise ValueError(f"Unknown solver: {value!r}")
        if name in ('rel_tol', 'abs_tol') and not value > 0:
            raise ValueError(f"{name} must be positive, got {value!r}")

    @classmethod
    def field_names(cls):
        return tuple(f.name for f in fields(cls))

    def get(self, name: str) -> Any:
        """Read a configuration field by name."""
        if name not in self.field_names():
            raise AttributeError(f"ConfigSet has no field {name!r}")
        return getattr(self, name)

    def set(self, name: str, value: Any) -> None:
        """Write a configuration field by name, validating the value."""
        if name not in self.field_names():
            raise AttributeError(f"ConfigSet has no field {name!r}")
        self._validate(name, value)
        setattr(self, name, value)

    def copy(self) -> 'ConfigSet':
        return replace(self)


class ConfigSnapshot:
    """Prior values of a set of configuration fields."""

    def __init__(self, values: Dict[str, Any]):
        self.values = dict(values)

    @classmethod
    def capture(cls, config: ConfigSet, names) -> 'ConfigSnapshot':
        """
        Record the current value of each named field.

        Raises:
            AttributeError: If any name is not a configuration field.
                Nothing is captured in that case.
        """
        return cls({name: config.get(name) for name in names})

    def restore(self, config: ConfigSet) -> Dict[str, ConfigRestoreError]:
        """
        Write every captured value back.

        Each field is restored independently, so one failure does not
        stop the rest.

        Returns:
            Mapping of field name to the error for fields that could not
            be restored (empty on success)
        """
        failures = {}
        for name, value in self.values.items():
            try:
                config.set(name, value)
            except Exception as exc:
                err = ConfigRestoreError(f"Could not restore {name}={value!r}: {exc}")
                err.__cause__ = exc
                failures[name] = err
        return failures


@contextmanager
def scoped_config(config: ConfigSet, **overrides) -> Iterator[ConfigSet]:
    """
    Temporarily override configuration fields.

    The original values are restored when the block exits, whether it
    returns normally or raises. Restore failures are logged and never
    replace the block's own result or exception.

    Example:
        with scoped_config(cs, stop_time=200.0, time_units='second'):
            report = run_scan(model, cs, sweep)

    Args:
        config: Configuration to modify in place
        **overrides: Field name -> temporary value
    """
    snapshot = ConfigSnapshot.capture(config, overrides)
    try:
        for name, value in overrides.items():
            config.set(name, value)
        yield config
    finally:
        for name, err in snapshot.restore(config).items():
            logger.error("Failed to restore configuration field %s", name,
                         exc_info=err)
