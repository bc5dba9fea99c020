"""Physical constants and numerical defaults shared by the cosmology engine.

Every value here is a process-wide constant rather than configuration.  The
``COSMO_CONSTANTS_VERSION`` flag should be bumped whenever any of the numbers
below change so that saved batch reports can be traced back to them.
"""
from __future__ import annotations

import math
import sys

COSMO_CONSTANTS_VERSION = "2021-cosmic-2.1"
C_LIGHT = 2.99792458e5  # km/s
G_NEWTON = 6.67259e-8  # cm^3 g^-1 s^-2
PI = math.pi
KM_PER_MPC = 3.08567758e19
TROPICAL_YEAR = 3.1556926e7  # s
EPSILON = sys.float_info.epsilon

# Planck 2013 + WMAP polarisation (Planck XVI, Table 2)
DEFAULT_H0 = 67.04
DEFAULT_OMEGA_MATTER = 0.3183
DEFAULT_OMEGA_LAMBDA = 0.6817

# Defaults offered by the command-line tool
CLI_DEFAULT_H0 = 71.0
CLI_DEFAULT_OMEGA_MATTER = 0.27
CLI_DEFAULT_OMEGA_LAMBDA = 0.73

ROMBERG_TOLERANCE = 1e-8
ROMBERG_MAX_LEVELS = 25

SECONDS_PER_GYR = TROPICAL_YEAR * 1e9
# Mpc -> kpc per arcsecond: 1e3 kpc/Mpc * pi / (180 * 3600)
ARCSEC_SCALE_DIVISOR = 648.0


def seconds_to_gyr(seconds: float) -> float:
    """Convert a time in seconds to billions of tropical years."""
    return seconds / SECONDS_PER_GYR


__all__ = [
    "ARCSEC_SCALE_DIVISOR",
    "CLI_DEFAULT_H0",
    "CLI_DEFAULT_OMEGA_LAMBDA",
    "CLI_DEFAULT_OMEGA_MATTER",
    "COSMO_CONSTANTS_VERSION",
    "C_LIGHT",
    "DEFAULT_H0",
    "DEFAULT_OMEGA_LAMBDA",
    "DEFAULT_OMEGA_MATTER",
    "EPSILON",
    "G_NEWTON",
    "KM_PER_MPC",
    "PI",
    "ROMBERG_MAX_LEVELS",
    "ROMBERG_TOLERANCE",
    "SECONDS_PER_GYR",
    "TROPICAL_YEAR",
    "seconds_to_gyr",
]
