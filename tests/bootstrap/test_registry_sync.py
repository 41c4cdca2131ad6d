import pytest

import kernsplit  # noqa: F401
from kernsplit.framework import Artifact, registry, run_step
from kernsplit.pipeline import SPLIT_STEPS


def test_registry_is_mapping():
    reg = registry()
    assert isinstance(reg, dict)


def test_split_steps_are_registered():
    assert set(SPLIT_STEPS) <= registry().keys()


def test_registered_passes_declare_types():
    for name in SPLIT_STEPS:
        p = registry()[name]
        assert p.name == name
        assert isinstance(p.input_type, type) and isinstance(p.output_type, type)


def test_run_step_rejects_wrong_payload():
    with pytest.raises(TypeError, match="build_spans expects list"):
        run_step("build_spans", Artifact(payload="text", meta={}))
