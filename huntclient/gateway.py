from __future__ import annotations
import time
import uuid
from typing import Any, Literal, TypeVar
import httpx
import structlog
from pydantic import BaseModel, ValidationError
from huntclient.config import Settings, settings as default_settings
from huntclient.errors import ApiError, TransportError, Unauthorized
from huntclient.session_store import SessionStore

log = structlog.get_logger()

AuthScope = Literal["team", "admin", "none"]
M = TypeVar("M", bound=BaseModel)

def parse_body(model: type[M], data: Any) -> M:
    """Validate a 2xx body; a shape the client does not understand is an ApiError like any other."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        log.warning("api_invalid_body", model=model.__name__, errors=e.error_count())
        raise ApiError(200, "Invalid response from server") from e

def error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("msg", "detail", "error", "message"):
            val = body.get(key)
            if isinstance(val, str) and val:
                return val
    return f"HTTP error! status: {resp.status_code}"

class ApiGateway:
    """
    Thin JSON-over-HTTP wrapper around the hunt backend.

    Adds the bearer token for the requested scope, a request id, explicit
    timeouts, and turns every failure into a HuntError subclass. A 401 clears
    the matching credential in the session store before raising.
    """

    def __init__(
        self,
        store: SessionStore,
        cfg: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.store = store
        self.settings = cfg or default_settings
        timeout = httpx.Timeout(self.settings.request_timeout_seconds, connect=self.settings.connect_timeout_seconds)
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def __aenter__(self) -> ApiGateway:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _token(self, auth: AuthScope) -> str | None:
        if auth == "team":
            return self.store.team_token()
        if auth == "admin":
            return self.store.admin_token()
        return None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        auth: AuthScope = "team",
    ) -> Any:
        rid = str(uuid.uuid4())
        headers = {"X-Request-ID": rid}
        token = self._token(auth)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        with structlog.contextvars.bound_contextvars(request_id=rid):
            t0 = time.perf_counter()
            try:
                resp = await self._client.request(method, path, json=json, params=params, headers=headers)
            except httpx.TimeoutException as e:
                log.warning("api_timeout", method=method, path=path)
                raise TransportError("Request timed out. Please try again.") from e
            except httpx.HTTPError as e:
                log.warning("api_transport_error", method=method, path=path, error=type(e).__name__)
                raise TransportError() from e
            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)
            log.info("api_request", method=method, path=path, status=resp.status_code, elapsed_ms=elapsed_ms)

            if resp.status_code == 401:
                if auth == "team":
                    self.store.clear()
                elif auth == "admin":
                    self.store.clear_admin()
                raise Unauthorized(401, error_message(resp))
            if not resp.is_success:
                raise ApiError(resp.status_code, error_message(resp))
            if not resp.content:
                return {}
            try:
                return resp.json()
            except ValueError as e:
                raise ApiError(resp.status_code, "Invalid response from server") from e

    async def get(self, path: str, **kw) -> Any:
        return await self.request("GET", path, **kw)

    async def post(self, path: str, **kw) -> Any:
        return await self.request("POST", path, **kw)

    async def put(self, path: str, **kw) -> Any:
        return await self.request("PUT", path, **kw)

    async def delete(self, path: str, **kw) -> Any:
        return await self.request("DELETE", path, **kw)
