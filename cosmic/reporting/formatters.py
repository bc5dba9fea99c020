"""Plain-text, HTML and tabular renderings of a :class:`Cosmology`."""

from __future__ import annotations

from typing import Iterable, List, TextIO

import pandas as pd

from cosmic.models.cosmology import Cosmology
from cosmic.models.parameters import CosmologyParameters
from cosmic.utils.constants import EPSILON

BATCH_COLUMNS = ("z", "dA", "dL", "dC", "scale", "1/scale", "tL")
BATCH_FLOAT_FORMAT = "%.6g"


def _g(value: float) -> str:
    return format(value, ".6g")


def format_parameters(params: CosmologyParameters, leader: str = "") -> str:
    """One-line summary of the parameters, e.g. ``H_0 = 71, Omega_m = 0.27, ...``."""
    text = (
        f"{leader}H_0 = {_g(params.H0)}, Omega_m = {_g(params.omega_matter)}, "
        f"Omega_L = {_g(params.omega_lambda)}"
    )
    if abs(params.omega_curvature) > EPSILON:
        text += f", Omega_k = {_g(params.omega_curvature)}"
    return text + f"  (q_0 = {_g(params.deceleration_parameter)})\n"


def format_parameters_html(params: CosmologyParameters, leader: str = "") -> str:
    text = (
        f"{leader}H<sub>0</sub> = {_g(params.H0)}"
        f", &#x03A9;<sub>m</sub> = {_g(params.omega_matter)}"
        f", &#x03A9;<sub>&#x039B;</sub> = {_g(params.omega_lambda)}"
    )
    if abs(params.omega_curvature) > EPSILON:
        text += f", &#x03A9;<sub>k</sub> = {_g(params.omega_curvature)}"
    return text + f"  (q<sub>0</sub> = {_g(params.deceleration_parameter)})"


def format_long(cosmo: Cosmology) -> str:
    """Verbose multi-line report for the current redshift."""
    lines: List[str] = [
        format_parameters(cosmo.parameters).rstrip("\n"),
        f"At z = {_g(cosmo.z)}",
        f"  age of the Universe at z      = {_g(cosmo.age_at_z_gyr)} Gyr",
        f"  lookback time to z            = {_g(cosmo.lookback_gyr)} Gyr",
        f"  angular diameter distance d_A = {_g(cosmo.dA)} Mpc",
        f"  luminosity distance d_L       = {_g(cosmo.dL)} Mpc",
        f"  comoving radial distance d_C  = {_g(cosmo.dC)} Mpc",
    ]
    if cosmo.dM != cosmo.dC:
        lines.append(f"  comoving transverse distance  = {_g(cosmo.dM)} Mpc")
    lines.extend([
        f"  comoving volume out to z      = {_g(cosmo.VC)} Gpc**3",
        f"  critical density at z         = {cosmo.rho_crit:.4e} g cm**-3",
        f'  1" = {cosmo.scale:.6f} kpc',
    ])
    if cosmo.scale:
        lines.append(f'  1 kpc = {cosmo.inverse_scale:.6f}"')
    return "\n".join(lines) + "\n"


def _html_row(label: str, value: str) -> str:
    return f"<tr><td>&nbsp;&nbsp;{label}</td><td>&nbsp;=&nbsp;{value}</td></tr>"


def format_html(cosmo: Cosmology) -> str:
    """Same content as :func:`format_long` as an HTML paragraph and table."""
    rows: List[str] = [
        _html_row("age of the Universe at z", f"{_g(cosmo.age_at_z_gyr)} Gyr"),
        _html_row("lookback time to z", f"{_g(cosmo.lookback_gyr)} Gyr"),
        _html_row("angular diameter distance d<sub>A</sub>", f"{_g(cosmo.dA)} Mpc"),
        _html_row("luminosity distance d<sub>L</sub>", f"{_g(cosmo.dL)} Mpc"),
        _html_row("comoving radial distance d<sub>C</sub>", f"{_g(cosmo.dC)} Mpc"),
    ]
    if cosmo.dM != cosmo.dC:
        rows.append(_html_row("comoving transverse distance", f"{_g(cosmo.dM)} Mpc"))
    rows.extend([
        _html_row("comoving volume out to z", f"{_g(cosmo.VC)} Gpc<sup>3</sup>"),
        _html_row("critical density at z", f"{cosmo.rho_crit:.4e} g cm<sup>-3</sup>"),
        _html_row('1"', f"{cosmo.scale:.6f} kpc"),
    ])
    if cosmo.scale:
        rows.append(_html_row("1 kpc", f'{cosmo.inverse_scale:.6f}"'))
    return (
        f"<p>{format_parameters_html(cosmo.parameters)}<br />At z = {_g(cosmo.z)}</p>\n"
        '<table cellpadding="0" cellspacing="">\n'
        + "\n".join(rows)
        + "\n</table>\n"
    )


def format_short_header(params: CosmologyParameters) -> str:
    """Comment lines preceding the tab-separated batch columns."""
    return format_parameters(params, "# ") + "# z \td_A \td_L \td_C \tscale \t1/scale \ttL\n"


def batch_row(cosmo: Cosmology) -> tuple:
    """Batch column values for the current redshift (lookback time in Gyr)."""
    return (
        cosmo.z,
        cosmo.dA,
        cosmo.dL,
        cosmo.dC,
        cosmo.scale,
        cosmo.inverse_scale,
        cosmo.lookback_gyr,
    )


def format_short(cosmo: Cosmology) -> str:
    """Single tab-separated line of batch columns."""
    return "\t".join(_g(value) for value in batch_row(cosmo)) + "\n"


def build_batch_frame(cosmo: Cosmology, redshifts: Iterable[float]) -> pd.DataFrame:
    """Evaluate ``cosmo`` at each redshift, reusing the one engine instance."""
    rows = []
    for z in redshifts:
        cosmo.set_redshift(z)
        rows.append(batch_row(cosmo))
    return pd.DataFrame(rows, columns=list(BATCH_COLUMNS), dtype=float)


def write_batch_report(handle: TextIO, cosmo: Cosmology, redshifts: Iterable[float]) -> pd.DataFrame:
    """Write the batch header and one line per redshift to ``handle``."""
    frame = build_batch_frame(cosmo, redshifts)
    handle.write(format_short_header(cosmo.parameters))
    frame.to_csv(
        handle,
        sep="\t",
        header=False,
        index=False,
        float_format=BATCH_FLOAT_FORMAT,
        lineterminator="\n",
    )
    return frame


__all__ = [
    "BATCH_COLUMNS",
    "batch_row",
    "build_batch_frame",
    "format_html",
    "format_long",
    "format_parameters",
    "format_parameters_html",
    "format_short",
    "format_short_header",
    "write_batch_report",
]
