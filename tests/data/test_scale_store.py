from __future__ import annotations

import json

import numpy as np
import pytest

from multitrend.core.types import ScaleParams
from multitrend.data.scale_store import ScaleParamsStore


def _params():
    return ScaleParams(
        entities=("AAPL", "MSFT"),
        mins=np.array([[1.0, 1.5], [10.0, 11.0]]),
        maxs=np.array([[5.0, 5.5], [10.0, 20.0]]),
    )


def test_save_and_load(tmp_path):
    path = tmp_path / "run" / "scale_params.json"

    ScaleParamsStore.save(path, _params())
    loaded = ScaleParamsStore.load(path)

    assert loaded.entities == ("AAPL", "MSFT")
    assert loaded.get("MSFT", "close") == (11.0, 20.0)
    assert not (tmp_path / "run" / "scale_params.json.tmp").exists()


def test_record_layout(tmp_path):
    path = tmp_path / "scale_params.json"
    ScaleParamsStore.save(path, _params())

    record = json.loads(path.read_text(encoding="utf-8"))

    assert record["schema_version"] == 1
    assert record["entities"] == ["AAPL", "MSFT"]
    assert record["scale_params"]["AAPL"]["open"] == {"min": 1.0, "max": 5.0}


def test_unknown_schema_version(tmp_path):
    path = tmp_path / "scale_params.json"
    record = _params().to_record()
    record["schema_version"] = 2
    path.write_text(json.dumps(record), encoding="utf-8")

    with pytest.raises(ValueError):
        ScaleParamsStore.load(path)


def test_params_are_read_only():
    params = _params()

    with pytest.raises(ValueError):
        params.mins[0, 0] = 0.0
