import pytest

from kti.config import (
    DEFAULTS,
    build_settings,
    interactive_update,
    load_persistent_config,
    merge_settings,
    save_persistent_config,
    validate_settings,
)
from kti.errors import ConfigError


def test_persistent_config_roundtrip(tmp_path):
    config_name = "test.json"
    data = {"SILENT": True, "MAX_DEPTH": 3, "LOG_FORMAT": "jsonl"}

    ok = save_persistent_config(data, config_name=config_name, config_dir=tmp_path)
    assert ok is True

    loaded = load_persistent_config(config_name=config_name, config_dir=tmp_path)
    assert loaded == data


def test_run_only_and_foreign_keys_are_not_persisted(tmp_path):
    save_persistent_config(
        {"TARGET_PATH": "/x", "SINGLE_FILE": "/x/y", "DRY_RUN": True, "COLOR": True, "SOMETHING_ELSE": 1},
        config_name="cfg.json",
        config_dir=tmp_path,
    )
    assert load_persistent_config(config_name="cfg.json", config_dir=tmp_path) == {"COLOR": True}


def test_corrupt_or_missing_config_loads_empty(tmp_path):
    assert load_persistent_config(config_name="missing.json", config_dir=tmp_path) == {}
    (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
    assert load_persistent_config(config_name="bad.json", config_dir=tmp_path) == {}
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
    assert load_persistent_config(config_name="list.json", config_dir=tmp_path) == {}


def test_merge_settings_respects_override_precedence():
    merged = merge_settings(
        defaults={"a": 1, "b": 2},
        persistent={"b": 3, "c": 4},
        overrides={"b": 5, "d": 6, "a": None},
    )
    assert merged == {"a": 1, "b": 5, "c": 4, "d": 6}


def test_build_settings_combines_defaults_persistent_and_cli(tmp_path):
    # persistent wins over defaults, cli wins over persistent
    save_persistent_config({"MAX_DEPTH": 4, "COLOR": True}, config_name="cfg.json", config_dir=tmp_path)

    result = build_settings(
        {"MAX_DEPTH": 1, "TARGET_PATH": str(tmp_path)},
        config_name="cfg.json",
        config_dir=tmp_path,
    )

    assert result["MAX_DEPTH"] == 1
    assert result["COLOR"] is True
    assert result["DRY_RUN"] is DEFAULTS["DRY_RUN"]
    assert result["TARGET_PATH"] == str(tmp_path)


def test_single_file_overrides_target(tmp_path):
    f = tmp_path / "one.bin"
    f.write_bytes(b"x")
    settings = validate_settings(dict(DEFAULTS, SINGLE_FILE=str(f)))
    assert settings["TARGET_PATH"] == str(f)


def test_single_file_must_be_a_file(tmp_path):
    with pytest.raises(ConfigError):
        validate_settings(dict(DEFAULTS, SINGLE_FILE=str(tmp_path)))


@pytest.mark.parametrize(
    "key, value",
    [
        ("MAX_DEPTH", -1),
        ("MAX_DEPTH", "deep"),
        ("DIAGNOSTIC_LEVEL", 7),
        ("LOG_FORMAT", "xml"),
    ],
)
def test_invalid_values_raise_config_error(key, value):
    with pytest.raises(ConfigError):
        validate_settings(dict(DEFAULTS, **{key: value}))


def test_max_depth_string_is_coerced():
    assert validate_settings(dict(DEFAULTS, MAX_DEPTH="2"))["MAX_DEPTH"] == 2


def test_interactive_update_is_noop_when_disabled():
    settings = dict(DEFAULTS)
    assert interactive_update(settings) == DEFAULTS


def test_saved_dry_run_does_not_leak_into_later_runs(tmp_path):
    save_persistent_config(dict(DEFAULTS, DRY_RUN=True, SILENT=True), config_name="cfg.json", config_dir=tmp_path)

    result = build_settings({"TARGET_PATH": str(tmp_path)}, config_name="cfg.json", config_dir=tmp_path)

    assert result["DRY_RUN"] is False
    assert result["SILENT"] is True
