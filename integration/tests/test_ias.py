import pytest


@pytest.mark.asyncio
async def test_create_and_delete_application(client, app_name):
    """Create an application twice, then delete it twice."""
    try:
        first = await client.create_application(app_name)
        assert first.client_id
        assert first.client_secret
        assert first.token_url
        assert first.jwks_uri

        second = await client.create_application(app_name)
        assert second.id != first.id
        assert second.client_secret != first.client_secret

        existing = await client.get_application_by_name(app_name)
        assert str(existing.id) == second.id
    finally:
        await client.delete_application(app_name)

    assert await client.get_application_by_name(app_name) is None
    await client.delete_application(app_name)


@pytest.mark.asyncio
async def test_delete_unknown_application(client, app_name):
    """Deleting an application that never existed succeeds."""
    await client.delete_application(app_name)
