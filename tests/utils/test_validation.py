import math

import pytest

from cosmic.utils.validation import (
    BatchInputError,
    ConfigValidationError,
    is_numeric,
    parse_number,
    require_existing_file,
    resolve_path,
    validate_cosmology,
    validate_redshift,
)


@pytest.mark.parametrize("text", ["0", "1.5", "-2", "-0.25", ".5", "71."])
def test_plain_decimals_are_numeric(text):
    assert is_numeric(text)


@pytest.mark.parametrize("text", ["1e5", "+3", "1-2", "1.2.3", "abc", " 1", "0x10", "nan"])
def test_other_syntax_is_not_numeric(text):
    assert not is_numeric(text)


@pytest.mark.parametrize("text, expected", [("2", 2.0), (" 0.5\n", 0.5), ("-1", -1.0)])
def test_parse_number_accepts_decimals(text, expected):
    assert parse_number(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "-", ".", "-.", "1e3", "z=1"])
def test_parse_number_rejects_everything_else(text):
    assert parse_number(text) is None


def test_validate_cosmology_accepts_physical_parameters():
    validate_cosmology(71.0, 0.27, 0.73)
    validate_cosmology(70.0, 0.0, -0.5)


@pytest.mark.parametrize(
    "params, message",
    [
        ((0.0, 0.3, 0.7), "Hubble constant"),
        ((-70.0, 0.3, 0.7), "Hubble constant"),
        ((70.0, -0.1, 0.7), "Omega matter"),
        ((70.0, 0.3, math.nan), "Omega lambda"),
    ],
)
def test_validate_cosmology_rejects(params, message):
    with pytest.raises(ConfigValidationError, match=message):
        validate_cosmology(*params)


def test_validate_redshift():
    validate_redshift(0.0)
    validate_redshift(1100.0)
    with pytest.raises(ConfigValidationError, match="must be a number > 0"):
        validate_redshift(-0.1)


def test_batch_error_carries_line_number():
    error = BatchInputError("bad", line=7)

    assert isinstance(error, ConfigValidationError)
    assert error.line == 7


def test_resolve_path_uses_base_dir(tmp_path):
    assert resolve_path("data/z.txt", base_dir=tmp_path) == (tmp_path / "data" / "z.txt").resolve()


def test_require_existing_file(tmp_path):
    target = tmp_path / "z.txt"
    target.write_text("1\n")

    assert require_existing_file("z.txt", base_dir=tmp_path) == str(target.resolve())
    with pytest.raises(ConfigValidationError, match="not found"):
        require_existing_file("missing.txt", base_dir=tmp_path, description="batch file")
    with pytest.raises(ConfigValidationError, match="not a file"):
        require_existing_file(tmp_path)


def test_resolve_path_keeps_absolute_paths(tmp_path):
    target = tmp_path / "z.txt"

    assert resolve_path(str(target), base_dir="/elsewhere") == target.resolve()
    with pytest.raises(ConfigValidationError, match="No path given"):
        resolve_path(None)
