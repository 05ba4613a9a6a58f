"""
Shared fixtures for the central storage client tests.

HTTP traffic goes through httpx.MockTransport; asset rows through an
in-memory SQLite database.
"""
from typing import Callable, List

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from centralstorage.client import CentralStorageClient
from centralstorage.core.assets.models import Base
from centralstorage.core.signing import RequestSigner


CONSUMER_KEY = "abcdef"
CONSUMER_SECRET = "bcdefhijklmn"
SERVER = "https://storage.example.com"


@pytest.fixture
def key():
    return CONSUMER_KEY


@pytest.fixture
def secret():
    return CONSUMER_SECRET


@pytest.fixture
def signer():
    """Signer configured with the test consumer."""
    return RequestSigner(CONSUMER_KEY, CONSUMER_SECRET)


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(recorded_requests):
    """
    Build a CentralStorageClient whose HTTP calls are answered by `handler`.

    Every request that reaches the transport is appended to recorded_requests.
    """
    clients = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> CentralStorageClient:
        def _record(request: httpx.Request) -> httpx.Response:
            request.read()
            recorded_requests.append(request)
            return handler(request)

        http_client = httpx.Client(transport=httpx.MockTransport(_record))
        clients.append(http_client)
        options = {
            "server": SERVER,
            "consumer_key": CONSUMER_KEY,
            "consumer_secret": CONSUMER_SECRET,
        }
        options.update(kwargs)
        return CentralStorageClient(http_client=http_client, **options)

    yield _make

    for http_client in clients:
        http_client.close()


@pytest.fixture
def upload_response():
    """Server reply for a successful image upload."""
    return {
        "assets": [
            {
                "key": "a1b2c3",
                "name": "photo.jpg",
                "type": "image",
                "mimetype": "image/jpeg",
                "size": 2048,
                "width": 640,
                "height": 480,
            }
        ]
    }


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0 not really a jpeg")
    return path


@pytest.fixture
def test_db():
    """Create in-memory SQLite database for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()
    engine.dispose()

