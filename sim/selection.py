"""
Series selection.

A selection is either ALL (every series of the trajectory, in its own
order) or NamedSeries (exactly the given names, in the given order).
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .errors import DataSelectionError
from .scan import ScanReport
from .simulator import Trajectory


class AllSeries:
    """Every series of the trajectory. Use the ALL singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ALL'


ALL = AllSeries()


@dataclass(frozen=True)
class NamedSeries:
    """Explicit list of series names."""
    names: Tuple[str, ...]

    def __init__(self, names: Sequence[str]):
        if isinstance(names, str):
            names = [names]
        object.__setattr__(self, 'names', tuple(names))


SeriesSelection = Union[AllSeries, NamedSeries]


def as_selection(value) -> SeriesSelection:
    """
    Coerce None, ALL, a name or a list of names to a selection.

    None means ALL.
    """
    if value is None or isinstance(value, AllSeries):
        return ALL
    if isinstance(value, NamedSeries):
        return value
    return NamedSeries(value)


def as_trajectories(data) -> List[Trajectory]:
    """
    Coerce a ScanReport, a Trajectory or an iterable of trajectories to a list.
    """
    if isinstance(data, ScanReport):
        return list(data.trajectories)
    if isinstance(data, Trajectory):
        return [data]
    return list(data)


def resolve_series(trajectories, selection) -> List[str]:
    """
    Resolve a selection to an ordered list of series names.

    Args:
        trajectories: ScanReport, Trajectory or list of trajectories
        selection: ALL, NamedSeries, or anything as_selection() accepts

    Returns:
        For ALL, the series names of the first trajectory in native order.
        For NamedSeries, exactly the requested names in the requested order.

    Raises:
        DataSelectionError: If a requested name is missing from any
            trajectory, or the result is empty
    """
    trajectories = as_trajectories(trajectories)
    if not trajectories:
        raise DataSelectionError('No simulation data to select from')

    selection = as_selection(selection)

    if isinstance(selection, AllSeries):
        names = list(trajectories[0].names)
    else:
        names = list(selection.names)
        for i, traj in enumerate(trajectories):
            missing = [n for n in names if n not in traj.names]
            if missing:
                raise DataSelectionError(
                    f"Series {missing} do not exist in run {i + 1}. "
                    f"Available: {list(traj.names)}")

    if not names:
        raise DataSelectionError('Data specified do not exist: no series selected')
    return names
