import pytest
from pydantic import ValidationError as SettingsValidationError

from crudkit.config.settings import Settings


def test_database_name_switches_in_testing():
    assert Settings(_env_file=None, MONGO_DB="prod", TESTING=False, TEST_MONGO_DB="t").DATABASE_NAME == "prod"
    assert Settings(_env_file=None, MONGO_DB="prod", TESTING=True, TEST_MONGO_DB="t").DATABASE_NAME == "t"
    assert Settings(_env_file=None, MONGO_DB="prod", TESTING=True, TEST_MONGO_DB=None).DATABASE_NAME == "prod"


def test_log_values_are_normalized():
    settings = Settings(_env_file=None, LOG_LEVEL="warning", LOG_FORMAT="JSON")

    assert settings.LOG_LEVEL == "WARNING"
    assert settings.LOG_FORMAT == "json"


def test_default_limit_cannot_exceed_ceiling():
    with pytest.raises(SettingsValidationError):
        Settings(_env_file=None, PAGINATION_DEFAULT_LIMIT=50, PAGINATION_MAX_LIMIT=20)


def test_limits_must_be_positive():
    with pytest.raises(SettingsValidationError):
        Settings(_env_file=None, PAGINATION_MAX_LIMIT=0)


@pytest.mark.parametrize(
    "env, expose, expected",
    [("development", True, True), ("development", False, False), ("production", True, False)],
)
def test_stack_exposure_is_development_only(env, expose, expected):
    assert Settings(_env_file=None, ENV=env, EXPOSE_ERROR_STACK=expose).show_error_stack is expected


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db.internal:27017")
    monkeypatch.setenv("PAGINATION_MAX_LIMIT", "250")

    settings = Settings(_env_file=None)

    assert settings.MONGO_URI == "mongodb://db.internal:27017"
    assert settings.PAGINATION_MAX_LIMIT == 250
