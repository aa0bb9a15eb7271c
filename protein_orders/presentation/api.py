import json
import logging
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from mcp.types import PARSE_ERROR
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, Mcp-Session-Id, Mcp-Protocol-Version",
}


def replay_body(body: bytes, receive: Receive) -> Receive:
    """receive, который сначала отдает уже прочитанное тело"""
    pending = [{"type": "http.request", "body": body, "more_body": False}]

    async def replay() -> Message:
        if pending:
            return pending.pop()
        return await receive()

    return replay


class McpEndpoint:
    """ASGI-обертка над streamable HTTP приложением MCP SDK.

    Логирует каждый POST и сама отвечает -32700 на тело, которое не
    разбирается как JSON. Остальное SDK получает без изменений.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        body = await request.body()
        logger.info(
            f"Получен MCP-запрос: {dict(request.headers)} "
            f"{body[:200].decode('utf-8', errors='replace')}..."
        )

        try:
            json.loads(body)
        except (ValueError, RecursionError) as e:
            response = JSONResponse(
                {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": PARSE_ERROR, "message": "Parse error", "data": str(e)},
                },
                status_code=status.HTTP_400_BAD_REQUEST
            )
            await response(scope, receive, send)
            return

        await self.app(scope, replay_body(body, receive), send)


@router.options("/mcp")
async def mcp_preflight():
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.get("/mcp")
@router.delete("/mcp")
async def mcp_method_not_allowed():
    return JSONResponse({"error": "Method not allowed"}, status_code=status.HTTP_405_METHOD_NOT_ALLOWED)


@router.get("/health")
async def health():
    return {"status": "ok"}
