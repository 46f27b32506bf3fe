import numpy as np
import pytest
from pydantic import ValidationError

from api.requests import AnalysisOptions, AnalyzeRequest, MatcherSpec
from api.responses import CycleClassification
from engine.enums import MatcherKind, Mode


def test_options_defaults():
    opts = AnalysisOptions()
    assert opts.mode == Mode.single_target
    assert opts.secondary.kind == MatcherKind.none
    assert opts.secondary_is_closer is None


def test_mode_and_kind_use_wire_values():
    req = AnalyzeRequest(mode="dual-correlation", primary={"kind": "regex", "value": "x"})
    assert req.mode == Mode.dual_correlation
    assert req.primary == MatcherSpec(kind=MatcherKind.regex, value="x")
    with pytest.raises(ValidationError):
        AnalyzeRequest(mode="triple")
    with pytest.raises(ValidationError):
        AnalyzeRequest(records=[{"timestamp": "10:00:00"}])


def test_numpy_values_serialize_as_plain_numbers():
    model = CycleClassification(
        cycles=1,
        attempts_per_cycle=2,
        intra_median_seconds=np.float64(1.5),
        intra_max_seconds=2.0,
        inter_max_seconds=4.5,
        intra_deltas=[np.float64(1.5)],
    )
    dumped = model.model_dump()
    assert type(dumped["intra_median_seconds"]) is float
    assert type(dumped["intra_deltas"][0]) is float
