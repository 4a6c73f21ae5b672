from enum import Enum
from typing import Mapping, Sequence
from pydantic import BaseModel, Field

Document = Mapping[str, str]
Batch = Sequence[Document]


class Operation(str, Enum):
    ENTITIES = 'entities'
    KEY_PHRASES = 'keyPhrases'
    LANGUAGES = 'languages'
    SENTIMENT = 'sentiment'


class AnalyzeRequest(BaseModel):
    documents: list[dict[str, str]] = Field(default_factory=list)
    class Config: extra = 'forbid'


SAMPLE_DOCUMENTS = [
    {'id': '1', 'language': 'en', 'text': 'This is a super cool test for my super cool package.'},
    {'id': '2', 'language': 'en', 'text': 'This is a stupid test for my stupid package.'},
    {'id': '3', 'language': 'en', 'text': 'The DoD is a very big operation compared to Banner Health.'},
    {'id': '4', 'language': 'en', 'text': 'I really like CostCo chicken nuggets and German beer.'},
]
