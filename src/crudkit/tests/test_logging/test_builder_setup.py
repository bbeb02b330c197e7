import logging

from crudkit.config.settings import Settings
from crudkit.core.logging.builder import make_dict_config, setup_logging


def make_settings(**overrides) -> Settings:
    values = {
        "ENV": "testing",
        "LOG_FORMAT": "json",
        "LOG_LEVEL": "INFO",
        "LOG_TO_STDOUT": True,
        "LOG_MAX_BYTES": 1000,
        "LOG_BACKUP_COUNT": 1,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_stdout_mode_has_console_handler_only(tmp_path):
    cfg = make_dict_config(make_settings(LOG_DIR=tmp_path))

    assert set(cfg["handlers"]) == {"console"}
    assert cfg["loggers"][""]["handlers"] == ["console"]
    assert cfg["handlers"]["console"]["formatter"] == "json"
    assert set(cfg["filters"]) == {"request_id", "redact"}


def test_file_mode_adds_rotating_handlers(tmp_path):
    cfg = make_dict_config(make_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path))

    assert {"console", "file", "error_file"} <= set(cfg["handlers"])
    assert cfg["handlers"]["file"]["filename"] == str(tmp_path / "app.log")
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"


def test_text_format_uses_standard_formatter():
    cfg = make_dict_config(make_settings(LOG_FORMAT="TEXT", LOG_LEVEL="debug"))

    assert cfg["handlers"]["console"]["formatter"] == "standard"
    assert cfg["loggers"][""]["level"] == "DEBUG"


def test_driver_logging_toggle():
    quiet = make_dict_config(make_settings())
    verbose = make_dict_config(make_settings(ENABLE_DRIVER_LOGGING=True))

    assert quiet["loggers"]["pymongo"]["level"] == "WARNING"
    assert verbose["loggers"]["pymongo"]["level"] == "DEBUG"


def test_setup_logging_creates_log_dir(tmp_path):
    settings = make_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path / "logs")
    assert not settings.LOG_DIR.exists()

    try:
        setup_logging(settings)

        assert settings.LOG_DIR.exists()
        assert logging.getLogger().handlers
    finally:
        # put the session configuration back (file handlers point into tmp_path)
        setup_logging(make_settings(LOG_FORMAT="text", LOG_LEVEL="DEBUG"))
