import os
from typing import Mapping, Optional
from pydantic import BaseModel, Field, ValidationError
from text_analytics.errors import InvalidConfigError

KEY_ENV = 'TEXT_ANALYTICS_SUBSCRIPTION_KEY'
ENDPOINT_ENV = 'TEXT_ANALYTICS_ENDPOINT'
DOMAIN_ENV = 'TEXT_ANALYTICS_DOMAIN'
TIMEOUT_ENV = 'TEXT_ANALYTICS_TIMEOUT_S'

DEFAULT_DOMAIN = 'cognitiveservices.azure.com'
DEFAULT_TIMEOUT_S = 2.0


class Settings(BaseModel):
    key: str = ''
    endpoint: str = ''
    domain: str = DEFAULT_DOMAIN
    timeout_s: float = Field(DEFAULT_TIMEOUT_S, gt=0, allow_inf_nan=False)

    @property
    def configured(self) -> bool:
        return bool(self.key and self.endpoint)


def load_settings(key: str = '', endpoint: str = '', env: Optional[Mapping[str, str]] = None) -> Settings:
    # Explicit values win; blank ones fall back to the environment. Presence is checked by the client.
    env = os.environ if env is None else env
    try:
        return Settings(
            key=key or env.get(KEY_ENV, ''),
            endpoint=endpoint or env.get(ENDPOINT_ENV, ''),
            domain=env.get(DOMAIN_ENV) or DEFAULT_DOMAIN,
            timeout_s=env.get(TIMEOUT_ENV) or DEFAULT_TIMEOUT_S,
        )
    except ValidationError as e:
        fields = ', '.join(str(err['loc'][0]) for err in e.errors())
        raise InvalidConfigError(f'invalid text analytics settings ({fields}); check {TIMEOUT_ENV}') from e
