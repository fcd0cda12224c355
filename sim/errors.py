"""
Exception and warning types for simulation, scanning and plotting.

Interrupts always propagate. Any other simulation failure is recoverable
by the scan loop, which records the offending value and moves on.
"""


class SimulationToolsError(Exception):
    """Base class for all errors raised by this package."""


class SimulationInterrupt(SimulationToolsError):
    """Simulation was cancelled. Aborts any scan in progress."""


class SimulationError(SimulationToolsError):
    """A single simulation failed (solver failure, bad variant target, ...)."""


class DataSelectionError(SimulationToolsError, KeyError):
    """Requested series do not exist on the trajectory, or nothing to plot."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable
        return str(self.args[0]) if self.args else ''


class ConfigRestoreError(SimulationToolsError):
    """A configuration field could not be restored after a scoped override."""


class ScanIterationWarning(UserWarning):
    """At least one scan iteration errored and produced no data."""
