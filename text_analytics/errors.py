from typing import Optional


class TextAnalyticsError(Exception):
    code = 'text_analytics_error'
    stage = 'unknown'
    status_code = 500

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation

    def to_dict(self) -> dict:
        return {'code': self.code, 'message': str(self), 'stage': self.stage, 'operation': self.operation}


class MissingCredentialError(TextAnalyticsError):
    code = 'missing_credential'
    stage = 'config'
    status_code = 503


class MissingEndpointError(TextAnalyticsError):
    code = 'missing_endpoint'
    stage = 'config'
    status_code = 503


class SerializationError(TextAnalyticsError):
    code = 'serialization_failed'
    stage = 'serialize'
    status_code = 400


class RequestConstructionError(TextAnalyticsError):
    code = 'request_construction_failed'
    stage = 'build_request'


class TransportError(TextAnalyticsError):
    code = 'transport_failed'
    stage = 'transport'
    status_code = 502


class TimeoutTransportError(TransportError):
    status_code = 504


class ResponseReadError(TextAnalyticsError):
    code = 'response_read_failed'
    stage = 'read_response'
    status_code = 502


class ResponseDecodeError(TextAnalyticsError):
    code = 'response_decode_failed'
    stage = 'decode_response'
    status_code = 502


class ResponseReencodeError(TextAnalyticsError):
    code = 'response_reencode_failed'
    stage = 'reencode_response'
    status_code = 502


class InvalidConfigError(TextAnalyticsError):
    code = 'invalid_config'
    stage = 'config'
    status_code = 503
