import pytest
from pydantic import ValidationError

from reminder_service.core.config import MAX_ID, Settings


def test_defaults() -> None:
    settings = Settings()

    assert settings.max_id == MAX_ID
    assert settings.api_tokens == {}
    assert settings.strict_query_type is False
    assert settings.async_database_url == "sqlite+aiosqlite:///./reminders.db"


def test_api_tokens_are_parsed_from_pairs() -> None:
    settings = Settings(api_tokens="alpha:1, beta:22")

    assert settings.api_tokens == {"alpha": 1, "beta": 22}


def test_malformed_api_token_entry_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(api_tokens="alpha")


def test_cors_origins_and_log_level_are_normalized() -> None:
    settings = Settings(cors_origins="http://a.test, http://b.test", log_level="debug")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.log_level == "DEBUG"


def test_non_sqlite_urls_are_left_untouched() -> None:
    url = "mysql+aiomysql://user:secret@db/reminders"

    assert Settings(database_url=url).async_database_url == url
