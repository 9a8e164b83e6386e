import pytest

from app.config.logging import build_logging_config
from app.config.settings import Settings
from app.core.exceptions import AuthorizationError, ErrorCode, StaleWriteConflictError
from app.services.common.permissions import is_owner_or_admin, require_owner_or_admin


def test_settings_normalization() -> None:
    config = Settings(LOG_LEVEL="debug", AMOUNT_TEXT_LOCALE="vi-VN", ENVIRONMENT="production")

    assert config.LOG_LEVEL == "DEBUG"
    assert config.AMOUNT_TEXT_LOCALE == "vi"
    assert config.is_production()
    assert not config.is_development()


def test_sqlite_detection() -> None:
    assert Settings(DATABASE_URL="sqlite:///:memory:").is_sqlite()
    assert not Settings(DATABASE_URL="postgresql://user@localhost/billing").is_sqlite()


def test_file_handlers_only_when_enabled(tmp_path) -> None:
    without_files = build_logging_config(Settings(LOG_TO_FILE=False))
    with_files = build_logging_config(Settings(LOG_TO_FILE=True, LOG_DIR=str(tmp_path)))

    assert list(without_files["handlers"]) == ["console"]
    assert set(with_files["handlers"]) == {"console", "file", "json_file"}
    assert with_files["loggers"]["app"]["handlers"] == ["console", "file", "json_file"]


def test_console_formatter_follows_environment() -> None:
    development = build_logging_config(Settings(ENVIRONMENT="development"))
    production = build_logging_config(Settings(ENVIRONMENT="production"))

    assert development["handlers"]["console"]["formatter"] == "colored"
    assert production["handlers"]["console"]["formatter"] == "standard"


def test_owner_and_admin_access() -> None:
    assert is_owner_or_admin("owner-1", "owner-1")
    assert is_owner_or_admin("someone", "owner-1", is_admin=True)
    assert not is_owner_or_admin("owner-2", "owner-1")
    assert not is_owner_or_admin(None, None)
    assert is_owner_or_admin(None, None, is_admin=True)


def test_require_owner_raises_authorization_error() -> None:
    with pytest.raises(AuthorizationError) as exc_info:
        require_owner_or_admin("owner-2", "owner-1", resource="bill", resource_id="bill-1")

    assert exc_info.value.status_code == 403
    assert exc_info.value.details["resource_id"] == "bill-1"


def test_error_payload() -> None:
    error = StaleWriteConflictError("bill-1", attempts=2)

    payload = error.to_dict()["error"]

    assert payload["code"] == ErrorCode.STALE_WRITE_CONFLICT.value
    assert payload["details"] == {"entity_id": "bill-1", "attempts": 2}
    assert payload["type"] == "StaleWriteConflictError"
