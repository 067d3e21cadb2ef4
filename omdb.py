# omdb.py
import logging
from functools import lru_cache
from typing import Dict, Optional

import requests
from fastapi import Depends

from config import Settings, get_settings

logger = logging.getLogger(__name__)


class UpstreamSearchError(Exception):
    """OMDb answered but reported a failure (including "Movie not found!")."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class OMDbClient:
    """Thin client for the OMDb search endpoint."""

    def __init__(self, base_url: str, api_key: str, timeout: float):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"accept": "application/json"})

    def search(self, name: Optional[str]) -> Dict:
        params = {"apikey": self.api_key, "s": name}
        logger.info("Searching OMDb for %r", name)
        # OMDb reports bad keys and empty results in the JSON body, whatever the status code
        response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        data = response.json()

        if data.get("Response") == "True":
            return data
        logger.warning("OMDb search for %r failed: %s", name, data.get("Error"))
        raise UpstreamSearchError(data.get("Error") or "Unknown upstream error")


@lru_cache
def _client_for(base_url: str, api_key: str, timeout: float) -> OMDbClient:
    return OMDbClient(base_url, api_key, timeout)


def get_omdb_client(settings: Settings = Depends(get_settings)) -> OMDbClient:
    return _client_for(settings.omdb_base_url, settings.omdb_api_key, settings.omdb_timeout_seconds)
