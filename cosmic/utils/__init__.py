"""Utility exports for constants, quadrature, validation and logging."""
from .constants import (
    C_LIGHT,
    COSMO_CONSTANTS_VERSION,
    EPSILON,
    G_NEWTON,
    KM_PER_MPC,
    PI,
    TROPICAL_YEAR,
    seconds_to_gyr,
)
from .integration import RombergDiagnostics, romberg
from .logging_config import (
    StructuredLogger,
    collect_environment_metadata,
    compute_sha256,
    to_jsonable,
)
from .validation import (
    BatchInputError,
    ConfigValidationError,
    is_numeric,
    parse_number,
    require_existing_file,
    validate_cosmology,
    validate_redshift,
)

__all__ = [
    'BatchInputError',
    'C_LIGHT',
    'COSMO_CONSTANTS_VERSION',
    'ConfigValidationError',
    'EPSILON',
    'G_NEWTON',
    'KM_PER_MPC',
    'PI',
    'RombergDiagnostics',
    'StructuredLogger',
    'TROPICAL_YEAR',
    'collect_environment_metadata',
    'compute_sha256',
    'is_numeric',
    'parse_number',
    'require_existing_file',
    'romberg',
    'seconds_to_gyr',
    'to_jsonable',
    'validate_cosmology',
    'validate_redshift',
]
