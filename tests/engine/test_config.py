import json

import pytest
from pydantic import ValidationError

from plotscript.config import EngineConfig


def test_defaults():
    config = EngineConfig()
    assert config.max_call_depth == 256
    assert config.default_step_budget == 10_000
    assert config.strict_variables is True
    assert config.random_seed is None


def test_from_file(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"max_call_depth": 64, "default_step_budget": None, "strict_variables": False}), encoding="utf-8")

    config = EngineConfig.from_file(str(path))

    assert config.max_call_depth == 64
    assert config.default_step_budget is None
    assert config.strict_variables is False


@pytest.mark.parametrize(
    "settings",
    [
        pytest.param({"max_call_depth": 0}, id="zero_depth"),
        pytest.param({"default_step_budget": 0}, id="zero_budget"),
    ],
)
def test_invalid_settings_are_rejected(settings):
    with pytest.raises(ValidationError):
        EngineConfig(**settings)
