"""HTTP client for the execution backend."""

from typing import Optional

import httpx
import structlog

from ..config import Settings
from ..exceptions import ConfigurationError
from ..stores import ExecutionBackend
from .errors import BackendDispatchError
from .schemas import ExecutionAck, StartRunData

logger = structlog.get_logger()


class HttpExecutionBackend(ExecutionBackend):
    """Execution backend reached over its REST API."""

    RUN_PATH = "/workflows/run"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self.logger = logger.bind(component="execution_backend")

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpExecutionBackend":
        """Create a backend client from application settings."""
        if not settings.execution_backend_url:
            raise ConfigurationError("execution_backend_url is not configured")
        return cls(settings.execution_backend_url, timeout=settings.execution_backend_timeout)

    async def run(self, payload: StartRunData) -> ExecutionAck:
        """POST the run payload and parse the acknowledgement."""
        body = payload.model_dump(mode="json", exclude_none=True)

        try:
            if self._client is not None:
                response = await self._client.post(self.RUN_PATH, json=body)
            else:
                async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
                    response = await client.post(self.RUN_PATH, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.logger.error("Backend rejected run", status_code=e.response.status_code)
            raise BackendDispatchError(
                f"Execution backend rejected run: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            self.logger.error("Backend unreachable", error=str(e))
            raise BackendDispatchError(f"Execution backend unreachable: {e}") from e

        try:
            return ExecutionAck.model_validate(response.json())
        except ValueError as e:
            # Covers undecodable bodies and acks of the wrong shape
            self.logger.error("Backend returned malformed ack", error=str(e))
            raise BackendDispatchError(
                f"Execution backend returned a malformed acknowledgement: {e}",
                status_code=response.status_code,
            ) from e
