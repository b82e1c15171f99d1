"""
Tests for YAML configuration loading.
"""

from loguru import logger

from statusboard.core.config import Config, home_dir
from statusboard.core.constants import DEFAULT_STATUS_NAMES, PRECISION_EPSILON, RENORMALIZE_SPACING


def test_missing_file_gives_defaults(tmp_path):
    cfg = Config.load(tmp_path / "nope.yaml")

    assert cfg == Config()
    assert cfg.precision_epsilon == PRECISION_EPSILON
    assert cfg.default_statuses == list(DEFAULT_STATUS_NAMES)


def test_load_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "precision_epsilon: 0.001\n"
        "renormalize_spacing: 10\n"
        "default_statuses: [Backlog, Doing, Shipped]\n"
        "done_status_name: Shipped\n"
        "log_level: DEBUG\n"
    )

    cfg = Config.load(path)

    assert cfg.precision_epsilon == 0.001
    assert cfg.renormalize_spacing == 10.0
    assert isinstance(cfg.renormalize_spacing, float)
    assert cfg.default_statuses == ["Backlog", "Doing", "Shipped"]
    assert cfg.done_status_name == "Shipped"
    assert cfg.log_level == "DEBUG"


def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("theme: dark\nlog_level: INFO\n")

    cfg = Config.load(path)

    assert cfg.log_level == "INFO"
    assert not hasattr(cfg, "theme")


def test_invalid_yaml_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: [unclosed\n")

    assert Config.load(path) == Config()


def test_non_mapping_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    assert Config.load(path) == Config()


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert Config.load(path) == Config()


def test_home_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv("STATUSBOARD_HOME", str(tmp_path))
    assert home_dir() == tmp_path

    monkeypatch.delenv("STATUSBOARD_HOME")
    assert home_dir().name == ".statusboard"


def test_load_uses_home_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("STATUSBOARD_HOME", str(tmp_path))
    (tmp_path / "config.yaml").write_text("done_status_name: Closed\n")

    assert Config.load().done_status_name == "Closed"


def test_bad_number_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("precision_epsilon: tiny\nrenormalize_spacing: -5\nlog_level: INFO\n")

    cfg = Config.load(path)

    assert cfg.precision_epsilon == PRECISION_EPSILON
    assert cfg.renormalize_spacing == RENORMALIZE_SPACING
    # Good values next to bad ones still load
    assert cfg.log_level == "INFO"


def test_unknown_log_level_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: verbose\n")

    assert Config.load(path).log_level == "WARNING"


def test_log_level_is_case_insensitive(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: debug\n")

    assert Config.load(path).log_level == "DEBUG"


def test_scalar_default_statuses_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("default_statuses: Todo\n")

    assert Config.load(path).default_statuses == list(DEFAULT_STATUS_NAMES)


def test_non_string_status_names_fall_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("default_statuses: [Backlog, {nested: map}]\ndone_status_name: [Done]\n")

    cfg = Config.load(path)

    assert cfg.default_statuses == list(DEFAULT_STATUS_NAMES)
    assert cfg.done_status_name == "Done"


def test_bad_value_logs_warning(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("precision_epsilon: tiny\n")
    warnings = []
    sink_id = logger.add(lambda message: warnings.append(message.record["message"]), level="WARNING")
    try:
        Config.load(path)
    finally:
        logger.remove(sink_id)

    assert len(warnings) == 1
    assert "precision_epsilon" in warnings[0]
