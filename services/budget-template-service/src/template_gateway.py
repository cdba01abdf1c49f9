"""
Client for the template persistence gateway.

Each call is a single request/response: no retries, no client-side timeout and
no cancellation once issued. Any transport or HTTP failure is surfaced as a
``PersistenceError`` carrying the gateway's message; the caller decides whether
to call again.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from budget_document import BudgetDocument
from errors import DocumentFormatError, PersistenceError, TemplateNotFoundError
from serialization import document_from_wire, document_to_wire
from shared.observability.privacy import describe_document
from shared.observability.telemetry import CORRELATION_ID_HEADER, current_request_id
from shared.settings import GatewaySettings, load_gateway_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateSummary:
    id: str
    name: str
    description: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class TemplateRecord:
    id: str
    name: str
    description: str
    document: BudgetDocument


class TemplateGateway(Protocol):
    """Operations the editing session needs from template storage."""

    async def create(self, name: str, description: str, document: BudgetDocument) -> str: ...

    async def update(
        self,
        template_id: str,
        name: Optional[str],
        description: Optional[str],
        document: Optional[BudgetDocument],
    ) -> bool: ...

    async def get(self, template_id: str) -> TemplateRecord: ...

    async def list(self) -> list[TemplateSummary]: ...

    async def delete(self, template_id: str) -> bool: ...


class HttpTemplateGateway:
    """httpx-backed gateway talking to the template service's REST endpoints."""

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        correlation_header: str = CORRELATION_ID_HEADER,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or load_gateway_settings()
        self._correlation_header = correlation_header
        self._transport = transport

    @property
    def templates_url(self) -> str:
        return self._settings.templates_url

    async def create(self, name: str, description: str, document: BudgetDocument) -> str:
        wire = document_to_wire(document)
        payload = await self._request(
            "POST",
            self.templates_url,
            operation="create",
            json={"name": name, "description": description, "data": wire},
            log_fields=describe_document(wire),
        )
        record = self._data(payload, "create")
        template_id = record.get("id") if isinstance(record, Mapping) else None
        if not isinstance(template_id, str) or not template_id:
            raise PersistenceError("Gateway response did not include a template id")
        return template_id

    async def update(
        self,
        template_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        document: Optional[BudgetDocument] = None,
    ) -> bool:
        body: dict[str, Any] = {}
        log_fields: dict[str, Any] = {"template_id": template_id}
        if name is not None:
            body["name"] = name
        if description is not None:
            body["description"] = description
        if document is not None:
            body["data"] = document_to_wire(document)
            log_fields.update(describe_document(body["data"]))

        await self._request(
            "PUT",
            f"{self.templates_url}/{template_id}",
            operation="update",
            json=body,
            log_fields=log_fields,
        )
        return True

    async def get(self, template_id: str) -> TemplateRecord:
        payload = await self._request(
            "GET",
            f"{self.templates_url}/{template_id}",
            operation="get",
            log_fields={"template_id": template_id},
        )
        record = self._data(payload, "get")
        if not isinstance(record, Mapping):
            raise PersistenceError("Gateway returned a malformed template record")
        try:
            document = document_from_wire(record.get("data"))
        except DocumentFormatError as exc:
            raise PersistenceError(f"Stored template is not a valid budget document: {exc}") from exc
        return TemplateRecord(
            id=str(record.get("id") or template_id),
            name=str(record.get("name") or ""),
            description=str(record.get("description") or ""),
            document=document,
        )

    async def list(self) -> list[TemplateSummary]:
        payload = await self._request("GET", self.templates_url, operation="list")
        items = self._data(payload, "list") or []
        if not isinstance(items, list):
            raise PersistenceError("Gateway returned a malformed template list")
        return [
            TemplateSummary(
                id=str(item.get("id")),
                name=str(item.get("name") or ""),
                description=str(item.get("description") or ""),
                created_at=item.get("created_at"),
                updated_at=item.get("updated_at"),
            )
            for item in items
            if isinstance(item, Mapping) and item.get("id")
        ]

    async def delete(self, template_id: str) -> bool:
        await self._request(
            "DELETE",
            f"{self.templates_url}/{template_id}",
            operation="delete",
            log_fields={"template_id": template_id},
        )
        return True

    async def _request(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        json: Any = None,
        log_fields: Mapping[str, Any] | None = None,
    ) -> Any:
        start_time = time.perf_counter()
        headers = self._build_headers()
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.request(method, url, json=json, headers=headers)
        except httpx.RequestError as exc:
            self._log_failure(operation, method, url, start_time, str(exc), None, log_fields)
            raise PersistenceError(f"Template gateway is unavailable: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            self._log_failure(operation, method, url, start_time, message, response.status_code, log_fields)
            if response.status_code == 404:
                raise TemplateNotFoundError(message, status_code=404)
            raise PersistenceError(message, status_code=response.status_code)

        self._log_success(operation, method, url, start_time, response.status_code, log_fields)
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError("Gateway returned a non-JSON response", status_code=response.status_code) from exc

    def _data(self, payload: Any, operation: str) -> Any:
        if not isinstance(payload, Mapping):
            raise PersistenceError(f"Gateway returned a malformed {operation} response")
        return payload.get("data")

    def _build_headers(self) -> MutableMapping[str, str]:
        headers: MutableMapping[str, str] = {}
        request_id = current_request_id()
        if request_id:
            headers[self._correlation_header] = request_id
        return headers

    def _log_success(
        self,
        operation: str,
        method: str,
        url: str,
        start_time: float,
        status_code: int,
        log_fields: Mapping[str, Any] | None,
    ) -> None:
        logger.info(
            {
                "event": "template_gateway_request",
                "outcome": "success",
                "operation": operation,
                "method": method,
                "url": url,
                "status_code": status_code,
                "latency_ms": _latency_ms(start_time),
                **(log_fields or {}),
            }
        )

    def _log_failure(
        self,
        operation: str,
        method: str,
        url: str,
        start_time: float,
        error: str,
        status_code: int | None,
        log_fields: Mapping[str, Any] | None,
    ) -> None:
        logger.error(
            {
                "event": "template_gateway_request",
                "outcome": "failure",
                "operation": operation,
                "method": method,
                "url": url,
                "status_code": status_code,
                "latency_ms": _latency_ms(start_time),
                "error": error,
                **(log_fields or {}),
            }
        )


def _latency_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, Mapping):
        for key in ("details", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Template gateway returned HTTP {response.status_code}"
