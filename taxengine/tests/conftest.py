"""
Test configuration for the tax engine tests.

sys.path is configured so 'from taxengine...' resolves whether or not the
project is pip-installed, and whether pytest runs from the project root or
from taxengine/tests/.
"""
import sys
from pathlib import Path

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

_tests_dir = Path(__file__).parent                 # .../taxengine/tests/
_project_root = _tests_dir.parent.parent           # .../

for _path in (_project_root, _tests_dir):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from taxengine.config import settings  # noqa: E402


def make_token(sub: str = "user-123", **claims) -> str:
    """HS256 token signed the way the auth collaborator signs them."""
    payload = {"sub": sub, **claims}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token(email='priya@example.com', name='Priya')}"}


@pytest_asyncio.fixture
async def client():
    """Async httpx client using ASGI transport — no live server needed."""
    from taxengine.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
