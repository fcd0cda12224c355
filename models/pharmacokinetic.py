"""
Two-compartment L-DOPA absorption model.

Oral dose absorbed from the GI tract into plasma, then eliminated:
    dG/dt = -ka * G
    dP/dt =  ka * G - ke * P

G: amount in the GI tract, P: amount in plasma (molarity).
Rate constants are per second.
"""

import numpy as np
from typing import Dict, Optional
from .base import ReactionModel, Species


class LDopaModel(ReactionModel):
    """
    First-order absorption / first-order elimination model.

    Species (in compartment 'system'):
        GI_Tract: unabsorbed dose
        Plasma: circulating drug

    The system is linear, so a closed-form solution is available for
    checking numerical results.
    """

    def __init__(self, ka: float = 0.03, ke: float = 0.01,
                 dose: float = 1.0, name: str = 'system'):
        """
        Initialize model.

        Args:
            ka: Absorption rate constant (1/s)
            ke: Elimination rate constant (1/s)
            dose: Initial amount in the GI tract
            name: Model name
        """
        self._defaults = {'ka': ka, 'ke': ke}
        self.dose = dose
        super().__init__(name, time_units='second')

    def _setup_species(self) -> None:
        """Species and rate constants."""
        self.species = [
            Species('GI_Tract', 'system', self.dose, 'molarity'),
            Species('Plasma', 'system', 0.0, 'molarity'),
        ]
        self.parameters = dict(self._defaults)

    def rates(self, t: float, x: np.ndarray,
              params: Dict[str, float]) -> np.ndarray:
        ka, ke = params['ka'], params['ke']
        g, p = x
        return np.array([-ka * g, ka * g - ke * p])

    def analytic_solution(self, t: np.ndarray, g0: Optional[float] = None,
                          p0: float = 0.0,
                          params: Optional[Dict[str, float]] = None) -> np.ndarray:
        """
        Closed-form amounts at times t (seconds).

        Args:
            t: Time points
            g0: Initial GI amount (defaults to the dose)
            p0: Initial plasma amount
            params: Parameter values (defaults to the model's)

        Returns:
            Array (len(t) x 2) of [GI_Tract, Plasma]
        """
        params = params or self.parameters
        ka, ke = params['ka'], params['ke']
        g0 = self.dose if g0 is None else g0
        t = np.asarray(t, dtype=float)

        g = g0 * np.exp(-ka * t)
        if np.isclose(ka, ke):
            p = (g0 * ka * t + p0) * np.exp(-ke * t)
        else:
            p = (g0 * ka / (ka - ke) * (np.exp(-ke * t) - np.exp(-ka * t))
                 + p0 * np.exp(-ke * t))
        return np.column_stack([g, p])
