import json, pytest, requests
from fastapi.testclient import TestClient
from text_analytics.client import TextAnalyticsClient
from text_analytics.config import KEY_ENV, ENDPOINT_ENV

from text_analytics.main import app
from text_analytics.deps import get_client, get_settings


def make_response(body, status: int = 200) -> requests.Response:
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    resp = requests.Response()
    resp.status_code = status
    resp.headers['Content-Type'] = 'application/json'
    resp._content = body
    resp._content_consumed = True
    return resp


class BrokenRaw:
    def read(self, *a, **k):
        raise requests.exceptions.ChunkedEncodingError('connection broken mid-body')

    def close(self):
        pass


class FakeSession(requests.Session):
    """Real request preparation, canned replies instead of the network."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.reply = make_response({'documents': [], 'errors': []})

    def send(self, request, **kwargs):
        self.sent.append((request, kwargs))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture(autouse=True)
def no_env_credentials(monkeypatch):
    monkeypatch.delenv(KEY_ENV, raising=False)
    monkeypatch.delenv(ENDPOINT_ENV, raising=False)

@pytest.fixture
def fake_session():
    return FakeSession()

@pytest.fixture
def ta_client(fake_session):
    return TextAnalyticsClient('testkey', 'myresource', session=fake_session)

@pytest.fixture()
def client(ta_client):
    app.dependency_overrides[get_client] = lambda: ta_client
    yield TestClient(app)
    app.dependency_overrides.clear()
    get_settings.cache_clear()
