"""Matter + vacuum energy + curvature parameter set."""
from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np

from cosmic.utils.constants import C_LIGHT, EPSILON, KM_PER_MPC, seconds_to_gyr
from cosmic.utils.integration import romberg


def snap_curvature(omega_matter: float, omega_lambda: float) -> float:
    """Return Ω_k, forced to exactly zero when within machine epsilon."""
    omega_k = 1.0 - omega_matter - omega_lambda
    if abs(omega_k) <= EPSILON:
        return 0.0
    return omega_k


def expansion_rate(z, omega_matter, omega_curvature, omega_lambda):
    """Dimensionless expansion rate E(z) = H(z) / H0."""
    zp1 = 1.0 + np.asarray(z, dtype=float)
    return np.sqrt(omega_matter * zp1 ** 3 + omega_curvature * zp1 ** 2 + omega_lambda)


def _age_integral(omega_matter: float, omega_curvature: float, omega_lambda: float) -> float:
    # z = x / (1 - x) maps z in [0, inf) onto x in [0, 1)
    def integrand(x):
        z = x / (1.0 - x)
        e_val = expansion_rate(z, omega_matter, omega_curvature, omega_lambda)
        return 1.0 / ((1.0 + z) * e_val) / (1.0 - x) ** 2

    return romberg(integrand, 0.0, 1.0 - EPSILON, vectorized=True)


@dataclass(frozen=True)
class CosmologyParameters:
    """Immutable FLRW parameter set and the quantities derived from it.

    Build instances with :meth:`create`; the derived fields are not meant to
    be supplied by hand.  No range checks are applied, so non-physical inputs
    (``H0 <= 0``, negative densities) give non-physical numbers or NaN.
    """

    H0: float
    omega_matter: float
    omega_lambda: float
    omega_curvature: float
    deceleration_parameter: float
    hubble_distance: float
    universe_age: float

    @classmethod
    def create(cls, H0: float, omega_matter: float, omega_lambda: float) -> "CosmologyParameters":
        H0 = np.float64(H0)
        omega_matter = float(omega_matter)
        omega_lambda = float(omega_lambda)
        omega_k = snap_curvature(omega_matter, omega_lambda)
        with np.errstate(all="ignore"):
            hubble_distance = C_LIGHT / H0
            age = _age_integral(omega_matter, omega_k, omega_lambda) / H0 * KM_PER_MPC
        return cls(
            H0=float(H0),
            omega_matter=omega_matter,
            omega_lambda=omega_lambda,
            omega_curvature=omega_k,
            deceleration_parameter=0.5 * omega_matter - omega_lambda,
            hubble_distance=float(hubble_distance),
            universe_age=float(age),
        )

    @property
    def q0(self) -> float:
        return self.deceleration_parameter

    @property
    def is_flat(self) -> bool:
        return self.omega_curvature == 0.0

    @property
    def universe_age_gyr(self) -> float:
        return seconds_to_gyr(self.universe_age)

    def E(self, z):
        """Hubble parameter normalised by H0."""
        return expansion_rate(z, self.omega_matter, self.omega_curvature, self.omega_lambda)

    def Hz(self, z):
        """Hubble parameter at redshift z in km/s/Mpc."""
        return self.H0 * self.E(z)

    def inverse_E(self, z):
        """Comoving-distance integrand 1 / E(z)."""
        return 1.0 / self.E(z)

    def lookback_integrand(self, z):
        """Lookback-time integrand 1 / ((1 + z) E(z))."""
        return 1.0 / ((1.0 + np.asarray(z, dtype=float)) * self.E(z))

    def as_dict(self):
        return asdict(self)


__all__ = ["CosmologyParameters", "expansion_rate", "snap_curvature"]
