"""Opsgenie alert API transport."""

from __future__ import annotations

import abc
import json
from typing import Any

import aiohttp
import structlog
from pydantic import BaseModel, ConfigDict, Field

from notifier.core.types import Responder
from notifier.services.exceptions import BackendError

logger = structlog.get_logger(__name__)

# Opsgenie answers alert creation with 202; accept the other success codes too.
_ACCEPTED_STATUSES = frozenset({200, 201, 202})


class AlertRequest(BaseModel):
    """Body of a create-alert call."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    alias: str = ""
    description: str = ""
    responders: list[Responder] = Field(default_factory=list)
    visible_to: list[Responder] | None = Field(default=None, alias="visibleTo")
    actions: list[str] | None = None
    tags: list[str] | None = None
    details: dict[str, str] | None = None
    entity: str = ""
    source: str = ""
    priority: str = ""
    user: str = ""
    note: str = ""

    def to_payload(self) -> dict[str, Any]:
        """JSON body in the API's camelCase shape, empty fields omitted."""
        payload: dict[str, Any] = {"message": self.message}
        for key in ("alias", "description", "entity", "source", "priority", "user", "note"):
            value = getattr(self, key)
            if value:
                payload[key] = value
        if self.responders:
            payload["responders"] = [r.to_payload() for r in self.responders]
        if self.visible_to:
            payload["visibleTo"] = [r.to_payload() for r in self.visible_to]
        if self.actions:
            payload["actions"] = list(self.actions)
        if self.tags:
            payload["tags"] = list(self.tags)
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class AlertResult(BaseModel):
    """Parsed create-alert response."""

    request_id: str = ""
    result: str = ""
    took: float = 0.0
    raw: dict[str, Any] = Field(default_factory=dict)


def _parse_result(body: str) -> AlertResult:
    try:
        raw = json.loads(body) if body else {}
    except ValueError:
        return AlertResult(raw={"response": body})
    if not isinstance(raw, dict):
        return AlertResult(raw={"response": raw})
    return AlertResult(
        request_id=str(raw.get("requestId") or ""),
        result=str(raw.get("result") or ""),
        took=float(raw.get("took") or 0.0),
        raw=raw,
    )


class AlertBackend(abc.ABC):
    """Alert-creation capability used by the Opsgenie service."""

    @abc.abstractmethod
    async def create_alert(self, request: AlertRequest, api_key: str) -> AlertResult:
        """Create one alert using *api_key*. Raises on any failure."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the transport."""


class OpsgenieAlertBackend(AlertBackend):
    """Creates alerts through the Opsgenie REST API.

    One ``aiohttp.ClientSession`` is shared by every call; the API key is
    supplied per request so a single backend serves all recipients.
    """

    def __init__(self, api_url: str = "https://api.opsgenie.com", timeout_secs: float = 10.0) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_secs)
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(service="opsgenie")

    @property
    def alerts_url(self) -> str:
        return f"{self._api_url}/v2/alerts"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def create_alert(self, request: AlertRequest, api_key: str) -> AlertResult:
        url = self.alerts_url
        headers = {"Authorization": f"GenieKey {api_key}"}
        self._log.debug("opsgenie_request", method="POST", url=url, alias=request.alias)

        session = self._get_session()
        async with session.post(url, json=request.to_payload(), headers=headers) as resp:
            body = await resp.text()
            self._log.debug("opsgenie_response", status=resp.status, body=body[:200])
            if resp.status not in _ACCEPTED_STATUSES:
                raise BackendError(resp.status, body)
        return _parse_result(body)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
