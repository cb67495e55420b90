from __future__ import annotations
from typing import Any, AsyncIterator
from json import dumps, loads, JSONDecodeError
from logging import getLogger
from contextlib import asynccontextmanager
import httpx
from pydantic import ValidationError
from persist_query.config.onegraph import OneGraph
from persist_query.exceptions import (
    InvalidResponseError,
    NetworkError,
    RemoteMutationError,
)
from persist_query.interfaces.schemas import (
    PersistQueryRequest,
    PersistQueryResponse,
    PersistQueryVariables,
    TransformedQuery,
)
from persist_query.middleware.requestlogger import request_logger

logger = getLogger(__name__)


# -------------------------------------------------------------------------------------------
# BASE ADAPTER
# -------------------------------------------------------------------------------------------
class OneGraphAdapter:
    settings: OneGraph
    transport: httpx.AsyncBaseTransport | None

    def __init__(
        self,
        settings: OneGraph,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs,
    ):
        self.settings = settings
        self.transport = transport
        self.client_kwargs = kwargs

    @property
    def endpoint(self) -> str:
        return str(self.settings.ONEGRAPH_URI)

    @property
    def params(self) -> dict[str, str]:
        return {"app_id": self.settings.RAZZLE_ONEGRAPH_APP_ID}

    def headers(self, body: bytes) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            "Authorization": f"Bearer {self.settings.OG_DASHBOARD_ACCESS_TOKEN}",
        }

    def build_request(self, transformed: TransformedQuery) -> PersistQueryRequest:
        return PersistQueryRequest(
            variables=PersistQueryVariables(
                query=transformed.query,
                appId=self.settings.RAZZLE_ONEGRAPH_APP_ID,
                accessToken=transformed.access_token,
                freeVariables=sorted(transformed.free_variables),
            )
        )

    def encode(self, request: PersistQueryRequest) -> bytes:
        # accessToken must be sent as null rather than dropped
        return request.model_dump_json(exclude_none=False).encode("utf-8")

    @asynccontextmanager
    async def getClient(self) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.settings.ONEGRAPH_TIMEOUT,
            event_hooks=request_logger.event_hooks,
            **self.client_kwargs,
        ) as client:
            yield client

    async def persist(self, transformed: TransformedQuery) -> str:
        body = self.encode(self.build_request(transformed))
        async with self.getClient() as client:
            try:
                response = await client.post(
                    self.endpoint,
                    params=self.params,
                    content=body,
                    headers=self.headers(body),
                )
            except httpx.TransportError as e:
                raise NetworkError(
                    f"Could not reach {self.endpoint}: {e.__class__.__name__}: {e}"
                ) from e
        return self.parse_response(response)

    def parse_response(self, response: httpx.Response) -> str:
        try:
            payload: Any = loads(response.content)
        except (JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidResponseError(
                "Persisted query service returned a non JSON body",
                response.status_code,
            ) from e
        if not isinstance(payload, dict):
            raise InvalidResponseError(
                "Persisted query service returned an unexpected body",
                response.status_code,
            )

        if payload.get("errors") is not None:
            errors = payload["errors"]
            raise RemoteMutationError(errors, dumps(errors, separators=(",", ":")))

        try:
            result = PersistQueryResponse.model_validate(payload)
        except ValidationError as e:
            raise InvalidResponseError(
                "Persisted query id missing from response", response.status_code
            ) from e
        if result.data is None:
            raise InvalidResponseError(
                "Persisted query id missing from response", response.status_code
            )

        persisted_query_id = result.data.oneGraph.createPersistedQuery.persistedQuery.id
        logger.info("persisted query id=%s", persisted_query_id)
        return persisted_query_id
