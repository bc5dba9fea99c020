"""Validation helpers for user-supplied parameters, redshifts and files."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional

_NUMERIC_CHARS = frozenset("-0123456789.")


class ConfigValidationError(RuntimeError):
    """Raised when configuration-provided values or resources are invalid."""


class BatchInputError(ConfigValidationError):
    """Raised when a redshift input file contains an unusable entry."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.line = line


def resolve_path(path: str | Path, base_dir: Optional[str | Path] = None) -> Path:
    """Absolute path for ``path``, relative paths taken from ``base_dir`` or the cwd."""
    if path is None:
        raise ConfigValidationError("No path given")
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = Path(base_dir or Path.cwd()) / candidate
    return candidate.resolve()


def require_existing_file(path: str | Path,
                          base_dir: Optional[str | Path] = None,
                          description: str | None = None) -> str:
    """Resolved path string of an existing file, else :class:`ConfigValidationError`."""
    label = description or "file"
    resolved = resolve_path(path, base_dir=base_dir)
    if not resolved.exists():
        raise ConfigValidationError(f"Configured {label} not found: {resolved}")
    if not resolved.is_file():
        raise ConfigValidationError(f"Configured {label} is not a file: {resolved}")
    return str(resolved)


def is_numeric(text: str) -> bool:
    """Return ``True`` when ``text`` uses the plain decimal syntax.

    Only digits, a leading minus sign and at most one decimal point are
    accepted; exponents, whitespace and ``+`` are rejected.
    """
    if any(ch not in _NUMERIC_CHARS for ch in text):
        return False
    if "-" in text[1:]:
        return False
    return text.count(".") <= 1


def parse_number(text: str) -> Optional[float]:
    """Parse ``text`` with :func:`is_numeric` rules, returning ``None`` if invalid."""
    text = text.strip()
    if not text or not is_numeric(text):
        return None
    try:
        return float(text)
    except ValueError:
        # "-", "." and "-." pass the character checks but carry no digits
        return None


def validate_cosmology(H0: float, omega_matter: float, omega_lambda: float) -> None:
    """Reject parameter sets the command-line layer refuses to run."""
    if not H0 > 0:
        raise ConfigValidationError("The Hubble constant must be > 0")
    if not omega_matter >= 0:
        raise ConfigValidationError("Omega matter must be >= 0")
    if math.isnan(omega_lambda):
        raise ConfigValidationError("Omega lambda must be a number")


def validate_redshift(z: float) -> None:
    if not z >= 0:
        raise ConfigValidationError("The redshift must be a number > 0.")


__all__ = [
    "BatchInputError",
    "ConfigValidationError",
    "is_numeric",
    "parse_number",
    "require_existing_file",
    "resolve_path",
    "validate_cosmology",
    "validate_redshift",
]
