import json, requests
from text_analytics.deps import get_client, get_settings
from text_analytics.main import app
from text_analytics.schemas import SAMPLE_DOCUMENTS
from conftest import make_response

def test_health(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json()['status'] == 'ok'

def test_security_header(client):
    r = client.get('/health')
    assert r.headers['X-Frame-Options'] == 'DENY'

def test_analyze_happy_path(client, fake_session):
    reply = {'documents': [{'id': '1', 'detectedLanguages': [{'iso6391Name': 'en', 'score': 1.0}]}], 'errors': []}
    fake_session.reply = make_response(reply)
    r = client.post('/analyze/languages', json={'documents': [{'id': '1', 'text': 'Hello world'}]})
    assert r.status_code == 200
    assert r.json() == reply
    request, _ = fake_session.sent[0]
    assert request.url.endswith('/text/analytics/v2.1/languages')
    assert '\n  "documents"' in r.text

def test_analyze_unknown_operation(client, fake_session):
    r = client.post('/analyze/summaries', json={'documents': []})
    assert r.status_code == 422
    assert fake_session.sent == []

def test_analyze_rejects_extra_fields(client, fake_session):
    r = client.post('/analyze/sentiment', json={'documents': [], 'model': 'latest'})
    assert r.status_code == 422
    assert fake_session.sent == []

def test_analyze_upstream_timeout(client, fake_session):
    fake_session.reply = requests.exceptions.ConnectTimeout('connect timed out')
    r = client.post('/analyze/sentiment', json={'documents': SAMPLE_DOCUMENTS})
    assert r.status_code == 504
    body = r.json()
    assert body['code'] == 'transport_failed'
    assert body['stage'] == 'transport'
    assert body['operation'] == 'sentiment'

def test_analyze_non_json_upstream(client, fake_session):
    fake_session.reply = make_response(b'upstream exploded', status=500)
    r = client.post('/analyze/entities', json={'documents': SAMPLE_DOCUMENTS})
    assert r.status_code == 502
    assert r.json()['code'] == 'response_decode_failed'

def test_sentiment_page_renders_escaped_json(client, fake_session):
    fake_session.reply = make_response({'documents': [{'id': '1', 'score': 0.9, 'note': '<b>x</b>'}]})
    r = client.get('/sentiment')
    assert r.status_code == 200
    assert r.headers['content-type'].startswith('text/html')
    assert '<h1>Analyze</h1>' in r.text
    assert '&lt;b&gt;x&lt;/b&gt;' in r.text and '<b>x</b>' not in r.text
    request, _ = fake_session.sent[0]
    assert json.loads(request.body) == {'documents': SAMPLE_DOCUMENTS}

def test_each_page_uses_its_operation(client, fake_session):
    for path, segment in [('/entities', 'entities'), ('/phrases', 'keyPhrases'), ('/language', 'languages'), ('/sentiment', 'sentiment')]:
        assert client.get(path).status_code == 200
        request, _ = fake_session.sent[-1]
        assert request.url.endswith('/v2.1/' + segment)
    assert len(fake_session.sent) == 4

def test_missing_config_is_503(client, monkeypatch):
    app.dependency_overrides.pop(get_client)
    get_settings.cache_clear()
    r = client.get('/entities')
    assert r.status_code == 503
    assert r.json()['code'] == 'missing_credential'

def test_missing_endpoint_is_503(client, monkeypatch):
    app.dependency_overrides.pop(get_client)
    monkeypatch.setenv('TEXT_ANALYTICS_SUBSCRIPTION_KEY', 'envkey')
    get_settings.cache_clear()
    r = client.post('/analyze/sentiment', json={'documents': SAMPLE_DOCUMENTS})
    assert r.status_code == 503
    assert r.json()['code'] == 'missing_endpoint'

def test_metrics_count_calls(client, fake_session):
    client.get('/phrases')
    snap = client.get('/metrics').json()
    assert snap['counters'].get('analytics_keyPhrases_ok_total', 0) >= 1
    assert snap['timings_ms']['analytics_call_ms']['count'] >= 1

def test_metrics_prom(client, fake_session):
    client.get('/language')
    r = client.get('/metrics.prom')
    assert r.status_code == 200
    assert 'text_analytics_calls_total' in r.text

def test_invalid_timeout_setting_is_503(client, monkeypatch):
    app.dependency_overrides.pop(get_client)
    monkeypatch.setenv('TEXT_ANALYTICS_SUBSCRIPTION_KEY', 'envkey')
    monkeypatch.setenv('TEXT_ANALYTICS_ENDPOINT', 'envres')
    monkeypatch.setenv('TEXT_ANALYTICS_TIMEOUT_S', 'abc')
    get_settings.cache_clear()
    r = client.get('/sentiment')
    assert r.status_code == 503
    assert r.json()['code'] == 'invalid_config'
