"""FastAPI application entrypoint for HTTP service mode."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..errors import ProtocolMisuseError
from ..gateway import ToolGateway, build_gateway
from ..logging import get_logger

logger = get_logger("service")


class ToolCallRequest(BaseModel):
    name: str
    arguments: Any = None


class TextContentModel(BaseModel):
    type: str = "text"
    text: str


class ToolCallResponse(BaseModel):
    content: List[TextContentModel]
    isError: bool = False


class ToolModel(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class ToolListResponse(BaseModel):
    tools: List[ToolModel]


class ResourceListResponse(BaseModel):
    resources: List[Any]


class HealthResponse(BaseModel):
    status: str


def create_app(
    gateway_factory: Callable[[], ToolGateway] = build_gateway,
) -> FastAPI:
    """Create the FastAPI application exposing the gateway's tool."""

    app = FastAPI(title="Project Content Service", version=__version__)

    async def get_gateway() -> ToolGateway:
        # Per request, matching the stateless stdio server.
        return gateway_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/tools", response_model=ToolListResponse)
    async def list_tools(gateway: ToolGateway = Depends(get_gateway)) -> ToolListResponse:
        return ToolListResponse(
            tools=[
                ToolModel(
                    name=tool.name,
                    description=tool.description,
                    inputSchema=tool.input_schema,
                )
                for tool in gateway.list_tools()
            ]
        )

    @app.get("/resources", response_model=ResourceListResponse)
    async def list_resources(
        gateway: ToolGateway = Depends(get_gateway),
    ) -> ResourceListResponse:
        return ResourceListResponse(resources=gateway.list_resources())

    @app.post("/tools/call", response_model=ToolCallResponse)
    async def call_tool(
        payload: ToolCallRequest,
        gateway: ToolGateway = Depends(get_gateway),
    ) -> Dict[str, object]:
        response = await gateway.call(payload.name, payload.arguments)
        return response.to_payload()

    @app.exception_handler(ProtocolMisuseError)
    async def protocol_misuse_handler(
        _: Any, exc: ProtocolMisuseError
    ) -> JSONResponse:
        logger.error("%s", exc)
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return app


def run_service(
    gateway_factory: Callable[[], ToolGateway] = build_gateway,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(gateway_factory)
    uvicorn.run(app, host=host, port=port)
