import hashlib
import io
import json
import logging
import math

import numpy as np
import pandas as pd
import pytest

from cosmic.models.cosmology import Cosmology
from cosmic.utils.logging_config import (
    StructuredLogger,
    collect_environment_metadata,
    compute_sha256,
    to_jsonable,
)


def _read_events(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_persisted_events_are_strict_json(tmp_path):
    logger = StructuredLogger(run_id="unit", base_dir=tmp_path, persist=True)
    logger.log_event(
        "redshift",
        {"z": np.float64(1.0), "inverse_scale": math.inf, "values": np.array([1.0, 2.0])},
    )

    events = _read_events(logger.events_path)

    assert logger.events_path == tmp_path / "unit" / "events.jsonl"
    assert events[0]["event"] == "redshift"
    assert events[0]["level"] == "INFO"
    assert events[0]["payload"] == {"z": 1.0, "inverse_scale": None, "values": [1.0, 2.0]}


def test_events_are_not_written_without_persist(tmp_path):
    logger = StructuredLogger(run_id="quiet", base_dir=tmp_path)
    logger.log_event("run_start", {"mode": "quick"})

    assert not (tmp_path / "quiet").exists()


def test_console_messages_respect_level(tmp_path, capsys):
    logger = StructuredLogger(run_id="console", base_dir=tmp_path, console_level=logging.WARNING)
    logger.log_event("note", message="hidden detail")
    logger.log_event("problem", level=logging.WARNING, message="visible problem")

    captured = capsys.readouterr()
    assert "visible problem" in captured.err
    assert "hidden detail" not in captured.err
    assert captured.out == ""


def test_cosmology_snapshot_is_serialised(tmp_path):
    cosmo = Cosmology(71.0, 0.27, 0.73)
    logger = StructuredLogger(run_id="snap", base_dir=tmp_path, persist=True)
    path = logger.save_json("cosmology.json", cosmo)

    data = json.loads(path.read_text())
    assert data["parameters"]["H0"] == 71.0
    assert data["state"]["inverse_scale"] is None


def test_dataframe_artifacts_land_in_run_directory(tmp_path):
    logger = StructuredLogger(run_id="artifacts", base_dir=tmp_path, persist=True)
    path = logger.save_dataframe("tables/distances.csv", pd.DataFrame({"z": [0.5], "dC": [1888.6]}))

    assert path == tmp_path / "artifacts" / "tables" / "distances.csv"
    assert pd.read_csv(path)["dC"].tolist() == [1888.6]


def test_log_state_records_engine_snapshot(tmp_path):
    cosmo = Cosmology(71.0, 0.27, 0.73)
    cosmo.set_redshift(1.0)
    logger = StructuredLogger(run_id="state", base_dir=tmp_path, persist=True)
    logger.log_state("quick.complete", cosmo)

    payload = _read_events(logger.events_path)[0]["payload"]
    assert payload["state"]["z"] == 1.0
    assert payload["state"]["comoving_distance"] == pytest.approx(cosmo.dC)


def test_to_jsonable_handles_numpy_and_dataclasses():
    state = Cosmology(71.0, 0.27, 0.73).state

    assert to_jsonable({"flag": np.bool_(True), "n": np.int64(3), "nan": math.nan}) == {
        "flag": True, "n": 3, "nan": None,
    }
    assert to_jsonable(state)["angular_scale"] == 0.0


def test_compute_sha256(tmp_path):
    target = tmp_path / "z.txt"
    target.write_bytes(b"0.5\n1.0\n")

    assert compute_sha256(target) == hashlib.sha256(b"0.5\n1.0\n").hexdigest()
    assert compute_sha256(tmp_path / "missing") is None


def test_environment_metadata_lists_stack():
    metadata = collect_environment_metadata()

    assert metadata["numpy_version"] == np.__version__
    assert metadata["pandas_version"] == pd.__version__
    assert "yaml_version" in metadata


def test_console_messages_go_to_given_stream(tmp_path, capsys):
    stream = io.StringIO()
    logger = StructuredLogger(run_id="stream", base_dir=tmp_path, stream=stream)
    logger.log_event("batch.error", level=logging.ERROR, message="bad batch file")

    assert stream.getvalue() == "bad batch file\n"
    assert capsys.readouterr().err == ""
