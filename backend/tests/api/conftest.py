"""API test fixtures — app built by create_app with a stub provider.

Invariants:
    - No network: the provider is a recording stub
    - terminate() records instead of exiting the test process
    - Settings built explicitly (no .env, no ambient environment)
"""

import pytest
from httpx import ASGITransport, AsyncClient

from geogate.main import create_app
from tests.api.stub_provider import StubProvider, make_settings


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def terminated():
    return []


@pytest.fixture
def build_client(terminated):
    """Factory: AsyncClient over an app wired with the given provider/mode."""
    def _build(provider, environment: str = "development") -> AsyncClient:
        app = create_app(
            make_settings(environment=environment),
            provider=provider,
            terminate=terminated.append,
        )
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _build


@pytest.fixture
async def client(build_client, stub_provider):
    async with build_client(stub_provider) as c:
        yield c
