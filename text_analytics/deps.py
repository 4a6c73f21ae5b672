from functools import lru_cache
from typing import Iterator
from fastapi import Depends
from text_analytics.client import TextAnalyticsClient
from text_analytics.config import Settings, load_settings

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

def get_client(settings: Settings = Depends(get_settings)) -> Iterator[TextAnalyticsClient]:
    # One client (and session) per request; sessions are not shared across worker threads.
    client = TextAnalyticsClient.from_settings(settings)
    try:
        yield client
    finally:
        client.close()
