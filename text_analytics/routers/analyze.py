from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse
from text_analytics.client import TextAnalyticsClient
from text_analytics.deps import get_client
from text_analytics.pages import render_result
from text_analytics.schemas import AnalyzeRequest, Operation, SAMPLE_DOCUMENTS

router = APIRouter(tags=['analyze'])

@router.post('/analyze/{operation}')
def analyze(operation: Operation, req: AnalyzeRequest, client: TextAnalyticsClient = Depends(get_client)):
    out = client.analyze(operation, req.documents)
    return Response(content=out, media_type='application/json')

@router.get('/entities', response_class=HTMLResponse)
def entities_page(client: TextAnalyticsClient = Depends(get_client)):
    return render_result('Entities', client.entities(SAMPLE_DOCUMENTS))

@router.get('/phrases', response_class=HTMLResponse)
def phrases_page(client: TextAnalyticsClient = Depends(get_client)):
    return render_result('Key Phrases', client.phrases(SAMPLE_DOCUMENTS))

@router.get('/language', response_class=HTMLResponse)
def language_page(client: TextAnalyticsClient = Depends(get_client)):
    return render_result('Language', client.language(SAMPLE_DOCUMENTS))

@router.get('/sentiment', response_class=HTMLResponse)
def sentiment_page(client: TextAnalyticsClient = Depends(get_client)):
    return render_result('Sentiment', client.sentiment(SAMPLE_DOCUMENTS))
