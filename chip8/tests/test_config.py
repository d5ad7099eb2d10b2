from __future__ import annotations

import json

import pytest

from chip8.config import DEBUG_ENV_VAR, SEED_ENV_VAR, MachineConfig


def test_defaults() -> None:
    config = MachineConfig()

    assert config.timer_divider == 8
    assert config.cycles_per_second == 500
    assert config.debug is False
    assert config.seed is None
    assert config.step_interval == pytest.approx(0.002)


@pytest.mark.parametrize(
    "kwargs",
    [{"timer_divider": 0}, {"cycles_per_second": 0}, {"trace_history": -1}],
)
def test_invalid_values_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        MachineConfig(**kwargs)


def test_json_save_and_load(tmp_path) -> None:
    path = tmp_path / "machine.json"
    MachineConfig(debug=True, seed=42, timer_divider=4).save(path)

    assert json.loads(path.read_text())["seed"] == 42
    loaded = MachineConfig.load(path)
    assert loaded == MachineConfig(debug=True, seed=42, timer_divider=4)


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValueError, match="turbo"):
        MachineConfig.from_dict({"turbo": True})


def test_env_overlay(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DEBUG_ENV_VAR, "1")
    monkeypatch.setenv(SEED_ENV_VAR, "0x10")

    config = MachineConfig.from_env(MachineConfig(timer_divider=2))

    assert config.debug is True
    assert config.seed == 16
    assert config.timer_divider == 2


@pytest.mark.parametrize("raw", ["0", "false", "OFF", ""])
def test_env_debug_disabled_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv(DEBUG_ENV_VAR, raw)

    assert MachineConfig.from_env(MachineConfig(debug=True)).debug is False


def test_env_absent_keeps_base(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)

    base = MachineConfig(debug=True, seed=3)
    assert MachineConfig.from_env(base) == base


def test_env_bad_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(SEED_ENV_VAR, "abc")

    with pytest.raises(ValueError, match=SEED_ENV_VAR):
        MachineConfig.from_env()
