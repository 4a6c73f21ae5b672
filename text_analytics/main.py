import logging, time, traceback
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from text_analytics.deps import get_settings
from text_analytics.errors import TextAnalyticsError
from text_analytics.metrics import observe_ms
from text_analytics.obs import log, new_request_id, should_sample, redact_key
from text_analytics.routers.analyze import router as analyze_router
from text_analytics.routers.ops import router as ops_router


logging.basicConfig(level=logging.INFO)

app = FastAPI(title='Text Analytics Example')

@app.on_event('startup')
def resolve_config():
    try:
        settings = get_settings()
    except TextAnalyticsError as e:
        # Not cached; each request re-raises it and the handler below maps it to 503.
        log.error('startup_config_invalid', code=e.code, error=str(e))
        return
    log.info('startup_config', configured=settings.configured, endpoint=settings.endpoint,
             domain=settings.domain, key=redact_key(settings.key), timeout_s=settings.timeout_s)

@app.middleware('http')
async def add_request_context(request: Request, call_next):
    rid = new_request_id()
    request.state.request_id = rid
    start = time.time()
    try:
        response = await call_next(request)
        return response
    finally:
        dt = int((time.time() - start) * 1000)
        observe_ms('http_request_ms', dt)
        if should_sample():
            log.info('http_request', rid=rid, path=request.url.path, ms=dt, method=request.method)

@app.middleware('http')
async def security_headers(request: Request, call_next):
    resp = await call_next(request)
    resp.headers['X-Frame-Options'] = 'DENY'
    return resp

@app.exception_handler(TextAnalyticsError)
async def analytics_errors(request: Request, exc: TextAnalyticsError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(Exception)
async def all_errors(request: Request, exc: Exception):
    tb = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    log.error('unhandled_error', rid=getattr(request.state, 'request_id', None), path=request.url.path, traceback=tb)
    return JSONResponse(status_code=500, content={'code': 'internal_error', 'message': str(exc)})

app.include_router(analyze_router)
app.include_router(ops_router)
