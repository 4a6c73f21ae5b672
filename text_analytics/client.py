"""
Client for the Text Analytics v2.1 REST API.

Every call is a single blocking POST: the batch is wrapped as
``{"documents": [...]}``, sent with the subscription key header, and the JSON
reply is handed back re-encoded with 2-space indentation. Nothing is retried.

Example:
    >>> with TextAnalyticsClient(key, 'my-resource') as client:
    ...     print(client.sentiment([{'id': '1', 'language': 'en', 'text': 'Good'}]))
"""
import json, threading, time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Mapping, Optional, Union
import requests
from urllib3.exceptions import ReadTimeoutError
from text_analytics.config import DEFAULT_DOMAIN, DEFAULT_TIMEOUT_S, ENDPOINT_ENV, KEY_ENV, Settings, load_settings
from text_analytics.errors import (
    MissingCredentialError,
    MissingEndpointError,
    RequestConstructionError,
    ResponseDecodeError,
    ResponseReadError,
    ResponseReencodeError,
    SerializationError,
    TextAnalyticsError,
    TimeoutTransportError,
    TransportError,
)
from text_analytics.metrics import record_call
from text_analytics.obs import log
from text_analytics.schemas import Batch, Operation

API_PATH = 'text/analytics/v2.1'
KEY_HEADER = 'Ocp-Apim-Subscription-Key'
CHUNK_BYTES = 16 * 1024
OPERATION_VALUES = frozenset(o.value for o in Operation)

def as_operation(operation: Union[Operation, str]) -> Operation:
    try:
        return Operation(operation)
    except ValueError as e:
        valid = ', '.join(o.value for o in Operation)
        raise RequestConstructionError(f'unknown operation {operation!r}; expected one of: {valid}') from e

def format_response(content: bytes, operation: Optional[str] = None) -> str:
    try:
        value = json.loads(content)
    except ValueError as e:
        raise ResponseDecodeError(f'response body is not valid JSON: {e}', operation) from e
    try:
        return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise ResponseReencodeError(f'could not re-encode response: {e}', operation) from e


class TextAnalyticsClient:
    """
    Holds the resolved key, endpoint base and timeout for a resource.

    Fallback to environment values is the caller's job (see ``load_settings``);
    a blank key or endpoint here is an error.
    """

    def __init__(
        self,
        key: str,
        endpoint: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        domain: str = DEFAULT_DOMAIN,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not key:
            raise MissingCredentialError(f'API key is empty; pass one or set {KEY_ENV}.')
        if not endpoint:
            raise MissingEndpointError(f'resource name is empty; pass one or set {ENDPOINT_ENV}.')
        self._key = key
        self.endpoint = endpoint
        self.domain = domain
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> 'TextAnalyticsClient':
        return cls(settings.key, settings.endpoint, timeout=settings.timeout_s, domain=settings.domain, session=session)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> 'TextAnalyticsClient':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def build_url(self, operation: Union[Operation, str]) -> str:
        op = as_operation(operation)
        return f'https://{self.endpoint}.{self.domain}/{API_PATH}/{op.value}'

    def build_body(self, documents: Batch) -> bytes:
        try:
            payload = {'documents': list(documents)}
            return json.dumps(payload, separators=(',', ':'), ensure_ascii=False, allow_nan=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise SerializationError(f'documents could not be encoded as JSON: {e}') from e

    def _post(self, url: str, body: bytes) -> tuple[bytes, int]:
        headers = {'Content-Type': 'application/json', KEY_HEADER: self._key}
        try:
            prepared = self._session.prepare_request(requests.Request('POST', url, data=body, headers=headers))
        except (requests.exceptions.RequestException, ValueError) as e:
            raise RequestConstructionError(f'could not build POST {url}: {e}') from e
        # requests only bounds connect and each socket read; the whole exchange gets one deadline here.
        cancelled = threading.Event()
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix='text-analytics')
        future = pool.submit(self._exchange, prepared, url, cancelled)
        pool.shutdown(wait=False)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as e:
            cancelled.set()
            raise TimeoutTransportError(f'no complete response from {url} within {self.timeout}s') from e

    def _exchange(self, prepared: requests.PreparedRequest, url: str, cancelled: threading.Event) -> tuple[bytes, int]:
        try:
            response = self._session.send(prepared, timeout=self.timeout, stream=True)
        except requests.exceptions.Timeout as e:
            raise TimeoutTransportError(f'no response from {url} within {self.timeout}s') from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f'POST {url} failed: {e}') from e
        with response:
            chunks = []
            try:
                for chunk in response.iter_content(CHUNK_BYTES):
                    if cancelled.is_set():
                        raise TimeoutTransportError(f'response body from {url} still arriving after {self.timeout}s')
                    chunks.append(chunk)
            except requests.exceptions.ConnectionError as e:
                if e.args and isinstance(e.args[0], ReadTimeoutError):
                    raise TimeoutTransportError(f'response body from {url} stalled for {self.timeout}s') from e
                raise ResponseReadError(f'could not read response body from {url}: {e}') from e
            except requests.exceptions.RequestException as e:
                raise ResponseReadError(f'could not read response body from {url}: {e}') from e
            return b''.join(chunks), response.status_code

    def analyze(self, operation: Union[Operation, str], documents: Batch) -> str:
        start = time.time()
        op_name = str(getattr(operation, 'value', operation))
        try:
            op = as_operation(operation)
            url = self.build_url(op)
            body = self.build_body(documents)
            content, status = self._post(url, body)
            if status >= 400:
                log.warning('analytics_non_2xx', operation=op.value, url=url, status=status)
            result = format_response(content, op.value)
        except TextAnalyticsError as e:
            dt = int((time.time() - start) * 1000)
            e.operation = e.operation or op_name
            record_call(op_name if op_name in OPERATION_VALUES else 'unknown', e.code, dt)
            log.warning('analytics_error', operation=op_name, stage=e.stage, code=e.code, error=str(e), ms=dt)
            raise
        dt = int((time.time() - start) * 1000)
        record_call(op.value, 'ok', dt)
        log.info('analytics_request', operation=op.value, url=url, status=status, bytes_out=len(body), bytes_in=len(content), ms=dt)
        return result

    def entities(self, documents: Batch) -> str:
        return self.analyze(Operation.ENTITIES, documents)

    def phrases(self, documents: Batch) -> str:
        return self.analyze(Operation.KEY_PHRASES, documents)

    def language(self, documents: Batch) -> str:
        return self.analyze(Operation.LANGUAGES, documents)

    def sentiment(self, documents: Batch) -> str:
        return self.analyze(Operation.SENTIMENT, documents)


def analyze(
    key: str,
    endpoint: str,
    operation: Union[Operation, str],
    documents: Batch,
    *,
    env: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """One-shot call; blank ``key``/``endpoint`` fall back to the environment."""
    settings = load_settings(key, endpoint, env)
    with TextAnalyticsClient.from_settings(settings, session=session) as client:
        return client.analyze(operation, documents)

def entities(key: str, endpoint: str, documents: Batch, **kwargs) -> str:
    return analyze(key, endpoint, Operation.ENTITIES, documents, **kwargs)

def phrases(key: str, endpoint: str, documents: Batch, **kwargs) -> str:
    return analyze(key, endpoint, Operation.KEY_PHRASES, documents, **kwargs)

def language(key: str, endpoint: str, documents: Batch, **kwargs) -> str:
    return analyze(key, endpoint, Operation.LANGUAGES, documents, **kwargs)

def sentiment(key: str, endpoint: str, documents: Batch, **kwargs) -> str:
    return analyze(key, endpoint, Operation.SENTIMENT, documents, **kwargs)
