"""
Constants: defaults and JSON overrides.
"""
import json
import logging

import pytest

from qedx.constants import CONSTANTS_ENV_VAR, PhysicalConstants, load_constants


def test_defaults():
    c = PhysicalConstants()
    assert c.alpha_qed == pytest.approx(1 / 137.036, rel=1e-6)
    assert c.electron_mass == pytest.approx(0.511e-3, rel=1e-3)
    assert c.debug_checks is True


def test_constants_are_frozen():
    c = PhysicalConstants()
    with pytest.raises(AttributeError):
        c.alpha_qed = 0.1


def test_no_env_gives_defaults(monkeypatch):
    monkeypatch.delenv(CONSTANTS_ENV_VAR, raising=False)
    assert load_constants() == PhysicalConstants()


def test_json_override(tmp_path, caplog):
    path = tmp_path / "constants.json"
    path.write_text(json.dumps({"debug_checks": False, "resolution": 1e-10, "bogus": 1}))
    with caplog.at_level(logging.WARNING, logger="qedx.constants"):
        c = load_constants(path)
    assert c.debug_checks is False
    assert c.resolution == 1e-10
    assert c.alpha_qed == PhysicalConstants().alpha_qed
    assert any("bogus" in r.message for r in caplog.records)


def test_override_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "constants.json"
    path.write_text(json.dumps({"imag_tolerance": 1e-6}))
    monkeypatch.setenv(CONSTANTS_ENV_VAR, str(path))
    assert load_constants().imag_tolerance == 1e-6


def test_unreadable_file_falls_back(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="qedx.constants"):
        c = load_constants(path)
    assert c == PhysicalConstants()
    assert caplog.records
