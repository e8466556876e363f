"""LightAPIAppInfoStore - app metadata from the CF Light API.

The Light API returns every app it knows about in one call; the GUID list is
not sent to the server, results are filtered client side by the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

import requests
from pydantic import BaseModel, ValidationError

from ..domain.contracts import AppInfoStore
from ..domain.models import AppInfo, LookupResult
from ..errors import MetadataLookupError

logger = logging.getLogger(__name__)


class CFLightApp(BaseModel):
    """One entry of ``GET /v2/apps``."""

    guid: str = ""
    name: str = ""
    space: str = ""
    org: str = ""


class LightAPIAppInfoStore(AppInfoStore):
    """Reads AppInfo from the Light API on every lookup (no caching)."""

    def __init__(self, api_addr: str, session: requests.Session):
        self._api_addr = api_addr.rstrip("/")
        self._session = session

    def lookup(self, guids: Sequence[str]) -> LookupResult:
        if not guids:
            return LookupResult()

        logger.debug("Looking up apps... guids=%d", len(guids))
        try:
            apps = self._lookup_apps()
        except MetadataLookupError as e:
            return LookupResult(error=e)

        res: Dict[str, AppInfo] = {}
        for app in apps:
            if app.guid:
                res[app.guid] = AppInfo(name=app.name, space=app.space, org=app.org)
        return LookupResult(apps=res)

    def _lookup_apps(self) -> List[CFLightApp]:
        url = f"{self._api_addr}/v2/apps"
        try:
            resp = self._session.get(url)
        except requests.RequestException as e:
            raise MetadataLookupError(f"failed to get apps: {e}") from e

        if resp.status_code != 200:
            raise MetadataLookupError(
                f"failed to get apps, expected 200, got {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise MetadataLookupError(f"invalid JSON from {url}: {e}") from e

        if not isinstance(body, list):
            raise MetadataLookupError(f"expected a list of apps from {url}, got {type(body).__name__}")

        try:
            return [CFLightApp.model_validate(item) for item in body]
        except ValidationError as e:
            raise MetadataLookupError(f"invalid app entry from {url}: {e}") from e
