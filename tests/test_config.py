import pytest

from protopeek import config


def test_defaults():
    assert config.GROUP_MODE in config.GROUP_MODES
    assert config.MAX_DEPTH > 0


@pytest.mark.parametrize("mode", ["skip", "nest"])
def test_check_group_mode(mode):
    assert config.check_group_mode(mode) == mode


def test_check_group_mode_rejects_unknown():
    with pytest.raises(ValueError):
        config.check_group_mode("flatten")


def test_int_setting_records_bad_values(monkeypatch):
    monkeypatch.setattr(config, "_problems", [])
    monkeypatch.setenv("PROTOPEEK_MAX_DEPTH", "deep")
    assert config._int_setting("PROTOPEEK_MAX_DEPTH", 100) == 100
    monkeypatch.setenv("PROTOPEEK_PORT", "-1")
    assert config._int_setting("PROTOPEEK_PORT", 8000) == 8000

    with pytest.raises(config.ConfigError) as e:
        config.validate()
    assert "PROTOPEEK_MAX_DEPTH" in str(e.value)
    assert "PROTOPEEK_PORT" in str(e.value)


def test_validate_group_mode(monkeypatch):
    monkeypatch.setattr(config, "_problems", [])
    monkeypatch.setattr(config, "GROUP_MODE", "flatten")
    with pytest.raises(config.ConfigError, match="PROTOPEEK_GROUPS"):
        config.validate()


def test_validate_log_level(monkeypatch):
    monkeypatch.setattr(config, "_problems", [])
    monkeypatch.setattr(config, "LOG_LEVEL", "LOUD")
    with pytest.raises(config.ConfigError, match="PROTOPEEK_LOG_LEVEL"):
        config.validate()
