import pytest

from reminder_service.core.db import DatabaseRegistry


@pytest.mark.anyio
async def test_registry_reuses_pool_per_url(tmp_path):
    registry = DatabaseRegistry()
    url = f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}"

    first = registry.open(url)
    assert registry.open(url) is first
    assert registry.get(url) is first
    assert url in registry
    assert len(registry) == 1

    await first.create_all()
    await registry.close_all()

    assert len(registry) == 0
    with pytest.raises(LookupError):
        registry.get(url)


def test_registry_redacts_credentials_in_errors():
    registry = DatabaseRegistry()

    with pytest.raises(LookupError) as exc_info:
        registry.get("mysql+aiomysql://user:secret@db/reminders")

    assert "secret" not in str(exc_info.value)
