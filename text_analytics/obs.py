import logging, os, uuid
import structlog

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
SAMPLE_RATE = float(os.getenv('SAMPLE_RATE', '1.0'))

def setup_logging():
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
    )
    return structlog.get_logger()

log = setup_logging()

def new_request_id() -> str:
    return uuid.uuid4().hex

def should_sample() -> bool:
    return SAMPLE_RATE >= 1.0 or (os.urandom(1)[0] / 255.0 < SAMPLE_RATE)

def redact_key(key: str) -> str:
    if not key:
        return ''
    return '***' + key[-4:] if len(key) > 8 else '***'
