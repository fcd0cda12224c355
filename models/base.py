"""
Base class for reaction-network models.

Provides a standard interface for the models simulated by sim.Simulator:
named species with initial amounts, named parameters, and a rate function.
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Species:
    """
    A species (state variable) in a compartment.

    Attributes:
        name: Species name, used as the series name in results
        compartment: Name of the containing compartment
        initial_amount: Amount at t = 0
        units: Amount units (display only)
    """
    name: str
    compartment: str
    initial_amount: float
    units: str = ''

    @property
    def path(self) -> str:
        """Qualified 'compartment.species' name."""
        return f"{self.compartment}.{self.name}"


class ReactionModel(ABC):
    """
    Abstract base class for continuous-time reaction models.

    All models implement the ODE system:
        dx/dt = f(t, x, p)

    where:
        x: species amounts, in the order of self.species
        p: parameter values keyed by name

    Attributes:
        name: Model name
        time_units: Time unit the rate constants are expressed in
        species: Species list (state order)
        parameters: Default parameter values
    """

    def __init__(self, name: str, time_units: str = 'second'):
        """
        Initialize model.

        Args:
            name: Model name
            time_units: Time unit of the rate constants
        """
        self.name = name
        self.time_units = time_units
        self.species: List[Species] = []
        self.parameters: Dict[str, float] = {}
        self._setup_species()

    @abstractmethod
    def _setup_species(self) -> None:
        """Populate self.species and self.parameters."""
        pass

    @abstractmethod
    def rates(self, t: float, x: np.ndarray,
              params: Dict[str, float]) -> np.ndarray:
        """
        Compute the time derivative of all species amounts.

        Args:
            t: Time, in self.time_units
            x: Current amounts
            params: Parameter values

        Returns:
            dx/dt
        """
        pass

    @property
    def species_names(self) -> List[str]:
        return [s.name for s in self.species]

    def find_species(self, target: str) -> int:
        """
        Locate a species by name or by 'compartment.species' path.

        Brackets around names ('system.[GI Tract]') are accepted.

        Raises:
            KeyError: If no species matches
        """
        key = target.replace('[', '').replace(']', '')
        for i, s in enumerate(self.species):
            if key in (s.name, s.path):
                return i
        raise KeyError(f"No species {target!r} in model '{self.name}'")

    def initial_state(self, variant=None) -> np.ndarray:
        """
        Initial amounts with any species overrides from a variant applied.

        Args:
            variant: Variant (optional)

        Returns:
            x0: Initial amounts (a new array; the model is not modified)
        """
        x0 = np.array([s.initial_amount for s in self.species], dtype=float)
        if variant is not None:
            for entry in variant.entries('species'):
                x0[self.find_species(entry.target)] = entry.value
        return x0

    def parameter_values(self, variant=None) -> Dict[str, float]:
        """
        Parameter values with any parameter overrides from a variant applied.

        Raises:
            KeyError: If a variant names an unknown parameter
        """
        params = dict(self.parameters)
        if variant is not None:
            for entry in variant.entries('parameter'):
                if entry.target not in params:
                    raise KeyError(
                        f"No parameter {entry.target!r} in model '{self.name}'")
                params[entry.target] = float(entry.value)
        return params

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', species={self.species_names})"
