# tests/conftest.py
import pytest
from httpx import ASGITransport, AsyncClient

from pharmacare.config.settings import Settings
from pharmacare.core.auth import TokenService
from pharmacare.db.base import create_all, get_engine, get_session_factory
from pharmacare.main import create_app

class FakeSms:
    """Records outgoing messages instead of calling the gateway."""

    def __init__(self):
        self.sent = []
        self.ok = True

    async def send(self, message, phone_number, test=None):
        self.sent.append((phone_number, message))
        return self.ok

@pytest.fixture
def settings(tmp_path):
    return Settings(
        app_env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'pharmacare.db'}",
        jwt_secret="test-access-secret",
        refresh_token_secret="test-refresh-secret",
        appointment_timezone="UTC",
        appointment_window_days=7,
        log_file=None,
    )

@pytest.fixture
def tokens(settings):
    return TokenService.from_settings(settings)

@pytest.fixture
def sms():
    return FakeSms()

@pytest.fixture
async def engine(settings):
    engine = await get_engine(settings.database_url)
    await create_all(engine)
    yield engine
    await engine.dispose()

@pytest.fixture
async def session_factory(engine):
    return await get_session_factory(engine)

@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session

@pytest.fixture
def app(settings, engine, session_factory, tokens, sms):
    # ASGITransport does not run the lifespan, so wire state by hand
    app = create_app(settings)
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.token_service = tokens
    app.state.sms_gateway = sms
    return app

@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

