"""Distance and time measures in a matter + Λ + curvature FLRW cosmology."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np

from cosmic.models.parameters import CosmologyParameters
from cosmic.utils.constants import (
    ARCSEC_SCALE_DIVISOR,
    DEFAULT_H0,
    DEFAULT_OMEGA_LAMBDA,
    DEFAULT_OMEGA_MATTER,
    G_NEWTON,
    KM_PER_MPC,
    PI,
    seconds_to_gyr,
)
from cosmic.utils.integration import romberg


@dataclass(frozen=True)
class RedshiftState:
    """Quantities derived for one source redshift.

    Distances are in Mpc, the comoving volume in Gpc^3, the lookback time in
    seconds, the angular scale in kpc per arcsecond and the critical density
    in g cm^-3.
    """

    z: float = 0.0
    comoving_distance: float = 0.0
    transverse_distance: float = 0.0
    angular_diameter_distance: float = 0.0
    luminosity_distance: float = 0.0
    comoving_volume: float = 0.0
    lookback_time: float = 0.0
    angular_scale: float = 0.0
    critical_density: float = 0.0

    @classmethod
    def zero(cls) -> "RedshiftState":
        return cls()


def critical_density(params: CosmologyParameters, z) -> float:
    """Critical density at redshift ``z`` in g cm^-3."""
    zp1 = 1.0 + np.float64(z)
    return (
        3.0 / (8.0 * PI) * (np.float64(params.H0) / KM_PER_MPC) ** 2 / G_NEWTON
        * (params.omega_lambda + params.omega_matter * zp1 ** 3)
    )


def _curved_volume(d_m, d_h, omega_k, inverse) -> float:
    """Comoving volume in Gpc^3 for a non-flat geometry."""
    ratio = d_m / d_h
    root = np.sqrt(abs(omega_k))
    return (
        2.0 * PI * d_h ** 3 / omega_k
        * (ratio * np.sqrt(1.0 + omega_k * ratio ** 2) - inverse(root * ratio) / root)
        / 1e9
    )


def compute_redshift_state(params: CosmologyParameters, z: float) -> RedshiftState:
    """Evaluate every redshift-dependent quantity for ``params`` at ``z``."""
    z = np.float64(z)
    with np.errstate(all="ignore"):
        rho_crit = critical_density(params, z)
        if z == 0:
            return RedshiftState(z=float(z), critical_density=float(rho_crit))

        d_h = np.float64(params.hubble_distance)
        omega_k = params.omega_curvature
        d_c = d_h * romberg(params.inverse_E, 0.0, z, vectorized=True)

        if omega_k > 0:
            root = np.sqrt(omega_k)
            d_m = d_h / root * np.sinh(root * d_c / d_h)
            volume = _curved_volume(d_m, d_h, omega_k, np.arcsinh)
        elif omega_k < 0:
            root = np.sqrt(abs(omega_k))
            d_m = d_h / root * np.sin(root * d_c / d_h)
            volume = _curved_volume(d_m, d_h, omega_k, np.arcsin)
        else:
            d_m = d_c
            volume = 4.0 * PI * d_m ** 3 / 3.0 / 1e9

        zp1 = 1.0 + z
        d_a = d_m / zp1
        d_l = d_m * zp1
        lookback = (
            romberg(params.lookback_integrand, 0.0, z, vectorized=True)
            / np.float64(params.H0) * KM_PER_MPC
        )
        scale = d_a / ARCSEC_SCALE_DIVISOR * PI

    return RedshiftState(
        z=float(z),
        comoving_distance=float(d_c),
        transverse_distance=float(d_m),
        angular_diameter_distance=float(d_a),
        luminosity_distance=float(d_l),
        comoving_volume=float(volume),
        lookback_time=float(lookback),
        angular_scale=float(scale),
        critical_density=float(rho_crit),
    )


class Cosmology:
    """Cosmology engine holding one parameter set and one source redshift.

    A fresh or reconfigured engine has every redshift-dependent quantity set
    to zero.  :meth:`set_redshift` recomputes all of them at once; nothing is
    cached across redshifts.  Instances are not thread-safe.
    """

    def __init__(
        self,
        H0: float = DEFAULT_H0,
        omega_matter: float = DEFAULT_OMEGA_MATTER,
        omega_lambda: float = DEFAULT_OMEGA_LAMBDA,
    ) -> None:
        self.set_cosmology(H0, omega_matter, omega_lambda)

    def __repr__(self) -> str:
        p = self._parameters
        return (
            f"Cosmology(H0={p.H0!r}, omega_matter={p.omega_matter!r}, "
            f"omega_lambda={p.omega_lambda!r}, z={self._state.z!r})"
        )

    def set_cosmology(self, H0: float, omega_matter: float, omega_lambda: float) -> None:
        """Replace the parameter set and reset the redshift-dependent state."""
        self._parameters = CosmologyParameters.create(H0, omega_matter, omega_lambda)
        self._state = RedshiftState.zero()

    def set_redshift(self, z: float) -> None:
        """Recompute every redshift-dependent quantity for source redshift ``z``."""
        self._state = compute_redshift_state(self._parameters, z)

    def copy(self) -> "Cosmology":
        clone = self.__class__.__new__(self.__class__)
        clone._parameters = self._parameters
        clone._state = self._state
        return clone

    def __copy__(self) -> "Cosmology":
        return self.copy()

    def __deepcopy__(self, memo) -> "Cosmology":
        return self.copy()

    @property
    def parameters(self) -> CosmologyParameters:
        return self._parameters

    @property
    def state(self) -> RedshiftState:
        return self._state

    # Parameter accessors -------------------------------------------------
    @property
    def H0(self) -> float:
        return self._parameters.H0

    @property
    def omega_m(self) -> float:
        return self._parameters.omega_matter

    @property
    def omega_l(self) -> float:
        return self._parameters.omega_lambda

    @property
    def omega_k(self) -> float:
        return self._parameters.omega_curvature

    @property
    def q0(self) -> float:
        return self._parameters.deceleration_parameter

    @property
    def dH(self) -> float:
        return self._parameters.hubble_distance

    @property
    def age(self) -> float:
        """Current age of the universe in seconds."""
        return self._parameters.universe_age

    # Redshift accessors --------------------------------------------------
    @property
    def z(self) -> float:
        return self._state.z

    @property
    def dC(self) -> float:
        return self._state.comoving_distance

    @property
    def dM(self) -> float:
        return self._state.transverse_distance

    @property
    def dA(self) -> float:
        return self._state.angular_diameter_distance

    @property
    def dL(self) -> float:
        return self._state.luminosity_distance

    @property
    def VC(self) -> float:
        return self._state.comoving_volume

    @property
    def lookback(self) -> float:
        """Lookback time to the source in seconds."""
        return self._state.lookback_time

    @property
    def scale(self) -> float:
        """kpc per arcsecond at the source."""
        return self._state.angular_scale

    @property
    def inverse_scale(self) -> float:
        """Arcseconds per kpc; infinite when the scale is zero."""
        if self._state.angular_scale == 0:
            return float("inf")
        return 1.0 / self._state.angular_scale

    @property
    def rho_crit(self) -> float:
        return self._state.critical_density

    @property
    def age_at_z(self) -> float:
        """Age of the universe at the source redshift in seconds."""
        return self._parameters.universe_age - self._state.lookback_time

    @property
    def age_gyr(self) -> float:
        return seconds_to_gyr(self.age)

    @property
    def lookback_gyr(self) -> float:
        return seconds_to_gyr(self.lookback)

    @property
    def age_at_z_gyr(self) -> float:
        return seconds_to_gyr(self.age_at_z)

    def as_dict(self) -> Dict[str, Any]:
        """Snapshot of the parameters and the current redshift state."""
        snapshot: Dict[str, Any] = {"parameters": self._parameters.as_dict()}
        snapshot["state"] = asdict(self._state)
        snapshot["state"]["inverse_scale"] = self.inverse_scale
        snapshot["state"]["age_at_z"] = self.age_at_z
        return snapshot


__all__ = ["Cosmology", "RedshiftState", "compute_redshift_state", "critical_density"]
