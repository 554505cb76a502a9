"""Test configuration for totalum-auth-adapter."""

import pytest

from totalum_auth_adapter import (
    InMemoryTotalumCrud,
    TotalumAdapter,
    TotalumAdapterConfig,
)

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def crud():
    """In-memory Totalum record API."""
    return InMemoryTotalumCrud()


@pytest.fixture
def adapter(crud):
    """Adapter wired to the in-memory record API."""
    return TotalumAdapter(crud, TotalumAdapterConfig(debug_logs=True))


@pytest.fixture
def seeded_users(crud):
    """Three users stored the way Totalum stores them (snake_case)."""
    return crud.seed(
        "user",
        {
            "_id": "u1",
            "name": "Alice",
            "email": "alice@example.com",
            "email_verified": True,
            "age": 30,
            "role": "admin",
            "createdAt": "2024-01-01T10:00:00.000Z",
        },
        {
            "_id": "u2",
            "name": "Bob",
            "email": "bob@example.com",
            "email_verified": False,
            "age": 25,
            "role": "member",
            "createdAt": "2024-02-01T10:00:00.000Z",
        },
        {
            "_id": "u3",
            "name": "Carol",
            "email": "carol@example.org",
            "email_verified": False,
            "age": 41,
            "role": "member",
            "createdAt": "2024-03-01T10:00:00.000Z",
        },
    )
