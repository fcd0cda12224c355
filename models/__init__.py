"""
Reaction-network model definitions for simulation and parameter scans.
"""

from .base import ReactionModel, Species
from .pharmacokinetic import LDopaModel

__all__ = ['ReactionModel', 'Species', 'LDopaModel']
