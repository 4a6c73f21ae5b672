from fastapi import APIRouter, Response
from text_analytics.metrics import snapshot_metrics, prometheus_payload

router = APIRouter(prefix='', tags=['ops'])

@router.get('/health')
def health():
    return {'status': 'ok'}

@router.get('/metrics')
def metrics():
    return snapshot_metrics()

@router.get('/metrics.prom')
def metrics_prom():
    payload, content_type = prometheus_payload()
    return Response(payload, media_type=content_type)
