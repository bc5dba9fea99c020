import io

import pytest

from cosmic.models.cosmology import Cosmology
from cosmic.reporting.formatters import (
    BATCH_COLUMNS,
    build_batch_frame,
    format_html,
    format_long,
    format_parameters,
    format_short,
    format_short_header,
    write_batch_report,
)


@pytest.fixture
def concordance():
    return Cosmology(71.0, 0.27, 0.73)


def test_flat_parameter_line_omits_curvature(concordance):
    assert format_parameters(concordance.parameters) == (
        "H_0 = 71, Omega_m = 0.27, Omega_L = 0.73  (q_0 = -0.595)\n"
    )


def test_curved_parameter_line_reports_curvature():
    cosmo = Cosmology(70.0, 0.3, 0.0)

    assert format_parameters(cosmo.parameters) == (
        "H_0 = 70, Omega_m = 0.3, Omega_L = 0, Omega_k = 0.7  (q_0 = 0.15)\n"
    )


def test_short_header(concordance):
    header = format_short_header(concordance.parameters)

    assert header.splitlines() == [
        "# H_0 = 71, Omega_m = 0.27, Omega_L = 0.73  (q_0 = -0.595)",
        "# z \td_A \td_L \td_C \tscale \t1/scale \ttL",
    ]


def test_short_line_at_zero_redshift(concordance):
    concordance.set_redshift(0.0)

    assert format_short(concordance) == "0\t0\t0\t0\t0\tinf\t0\n"


def test_short_line_fields(concordance):
    concordance.set_redshift(1.0)
    fields = format_short(concordance).rstrip("\n").split("\t")

    assert len(fields) == len(BATCH_COLUMNS)
    assert fields[0] == "1"
    assert float(fields[3]) == pytest.approx(concordance.dC, rel=1e-5)
    assert float(fields[6]) == pytest.approx(concordance.lookback_gyr, rel=1e-5)


def test_long_report_for_flat_universe(concordance):
    concordance.set_redshift(1.0)
    report = format_long(concordance)

    assert report.startswith("H_0 = 71, Omega_m = 0.27, Omega_L = 0.73  (q_0 = -0.595)\nAt z = 1\n")
    assert "angular diameter distance d_A" in report
    assert "comoving transverse distance" not in report
    assert "g cm**-3" in report
    assert '1 kpc = ' in report


def test_long_report_for_curved_universe_lists_transverse_distance():
    cosmo = Cosmology(70.0, 0.3, 0.0)
    cosmo.set_redshift(1.0)

    assert "comoving transverse distance" in format_long(cosmo)


def test_long_report_at_zero_redshift_skips_inverse_scale(concordance):
    concordance.set_redshift(0.0)
    report = format_long(concordance)

    assert '1" = 0.000000 kpc' in report
    assert "1 kpc" not in report


def test_html_report_uses_entities(concordance):
    concordance.set_redshift(0.5)
    report = format_html(concordance)

    assert report.startswith("<p>H<sub>0</sub> = 71, &#x03A9;<sub>m</sub> = 0.27")
    assert "&#x03A9;<sub>&#x039B;</sub> = 0.73" in report
    assert "At z = 0.5</p>" in report
    assert report.rstrip().endswith("</table>")


def test_batch_frame_columns(concordance):
    frame = build_batch_frame(concordance, [0.5, 1.0, 2.0])

    assert list(frame.columns) == list(BATCH_COLUMNS)
    assert frame["z"].tolist() == [0.5, 1.0, 2.0]
    assert frame["dC"].is_monotonic_increasing
    assert concordance.z == 2.0


def test_batch_report_matches_short_lines(concordance):
    redshifts = [0.1, 1.0, 3.0]
    handle = io.StringIO()
    write_batch_report(handle, concordance, redshifts)

    expected = [format_short_header(concordance.parameters)]
    for z in redshifts:
        concordance.set_redshift(z)
        expected.append(format_short(concordance))

    assert handle.getvalue() == "".join(expected)
