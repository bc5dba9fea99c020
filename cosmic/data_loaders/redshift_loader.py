"""Loaders for batch redshift lists and parameter tables."""
from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from cosmic.models.cosmology import Cosmology
from cosmic.utils.validation import BatchInputError, require_existing_file


def _parse_float(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class RedshiftBatch:
    """Redshifts read from a file holding one value per line.

    Blank lines are skipped.  Any other line must hold a single finite,
    non-negative number; the first offending line aborts the load so that no
    partial report is produced.
    """

    def __init__(self, filename=None, config=None):
        self.config = config or {}
        self._config_base = Path(self.config.get('base_dir', '.'))
        self.redshifts = np.array([])
        self.source_file = filename
        data_file = filename or self.config.get('file')
        if data_file:
            self.load_from_file(data_file)

    def load_from_file(self, filename):
        resolved = require_existing_file(
            filename,
            base_dir=self._config_base,
            description='batch redshift file'
        )
        self.source_file = resolved
        values: List[float] = []
        with open(resolved, 'r', encoding='utf-8') as handle:
            for line_number, raw in enumerate(handle, start=1):
                text = raw.strip()
                if not text:
                    continue
                z = _parse_float(text)
                if z is None:
                    raise BatchInputError(
                        f"Non-numeric redshift found in batch file on line {line_number}",
                        line=line_number,
                    )
                if z < 0:
                    raise BatchInputError(
                        f"Negative redshift found in batch file on line {line_number}",
                        line=line_number,
                    )
                values.append(z)
        self.redshifts = np.array(values, dtype=float)

    def count(self) -> int:
        return int(self.redshifts.size)

    def summary(self):
        return {
            'file': self.source_file,
            'count': self.count(),
            'z_min': float(self.redshifts.min()) if self.redshifts.size else None,
            'z_max': float(self.redshifts.max()) if self.redshifts.size else None,
        }


class ParameterTable:
    """Parameters plus a redshift list in one whitespace-separated file.

    The first three values are H0, Omega_m and Omega_lambda, the fourth is the
    number of redshifts N, followed by N redshifts.
    """

    CSV_HEADER = (
        "Angular Diameter Distance (Mpc), Luminosity Distance (Mpc), "
        "Comoving Radial Distance (Mpc), Comoving Transverse Distance (Mpc)"
    )
    DISTANCE_COLUMNS = ['dA', 'dL', 'dC', 'dM']

    def __init__(self, filename=None, config=None):
        self.config = config or {}
        self._config_base = Path(self.config.get('base_dir', '.'))
        self.H0 = None
        self.omega_matter = None
        self.omega_lambda = None
        self.redshifts = np.array([])
        self.source_file = filename
        data_file = filename or self.config.get('file')
        if data_file:
            self.load_from_file(data_file)

    def load_from_file(self, filename):
        resolved = require_existing_file(
            filename,
            base_dir=self._config_base,
            description='parameter table'
        )
        self.source_file = resolved
        tokens = Path(resolved).read_text(encoding='utf-8').split()
        if len(tokens) < 4:
            raise BatchInputError(
                "Parameter table must start with H0, Omega_m, Omega_lambda and a redshift count"
            )

        header = [_parse_float(token) for token in tokens[:4]]
        for position, value in enumerate(header, start=1):
            if value is None:
                raise BatchInputError(f"Parameter table entry {position} is not a number")
        count = header[3]
        if count < 0 or count != int(count):
            raise BatchInputError("Parameter table redshift count must be a non-negative integer")
        count = int(count)

        z_tokens = tokens[4:4 + count]
        if len(z_tokens) < count:
            raise BatchInputError(
                f"Parameter table declares {count} redshifts but holds {len(z_tokens)}"
            )
        redshifts = []
        for offset, token in enumerate(z_tokens, start=5):
            z = _parse_float(token)
            if z is None or z < 0:
                raise BatchInputError(f"Parameter table entry {offset} is not a valid redshift")
            redshifts.append(z)

        self.H0, self.omega_matter, self.omega_lambda = header[:3]
        self.redshifts = np.array(redshifts, dtype=float)

    def count(self) -> int:
        return int(self.redshifts.size)

    def cosmology(self) -> Cosmology:
        return Cosmology(self.H0, self.omega_matter, self.omega_lambda)

    def evaluate(self, cosmology: Optional[Cosmology] = None) -> pd.DataFrame:
        """Distances for every redshift, one row per redshift."""
        cosmo = cosmology if cosmology is not None else self.cosmology()
        rows = []
        for z in self.redshifts:
            cosmo.set_redshift(z)
            rows.append({'z': cosmo.z, 'dA': cosmo.dA, 'dL': cosmo.dL, 'dC': cosmo.dC, 'dM': cosmo.dM})
        return pd.DataFrame(rows, columns=['z'] + self.DISTANCE_COLUMNS)

    def write_csv(self, path, frame: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        """Write the distance columns to ``path`` and return the evaluated frame."""
        if frame is None:
            frame = self.evaluate()
        with open(path, 'w', encoding='utf-8') as handle:
            handle.write(self.CSV_HEADER + "\n")
            frame[self.DISTANCE_COLUMNS].to_csv(
                handle,
                header=False,
                index=False,
                float_format='%.6g',
                lineterminator="\n",
            )
        return frame

    def summary(self):
        return {
            'file': self.source_file,
            'H0': self.H0,
            'omega_matter': self.omega_matter,
            'omega_lambda': self.omega_lambda,
            'count': self.count(),
        }
