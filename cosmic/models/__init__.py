"""Cosmology engine and its parameter set."""

from .cosmology import Cosmology, RedshiftState, compute_redshift_state, critical_density
from .parameters import CosmologyParameters, expansion_rate, snap_curvature

__all__ = [
    "Cosmology",
    "CosmologyParameters",
    "RedshiftState",
    "compute_redshift_state",
    "critical_density",
    "expansion_rate",
    "snap_curvature",
]
