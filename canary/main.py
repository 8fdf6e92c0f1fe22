import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect

from .auth import Authenticator, require_operator
from .config import Settings
from .ledger import PingLedger, now_utc
from .render import render_status_page

log = logging.getLogger("canary")


def get_ledger(request: Request) -> PingLedger:
    return request.app.state.ledger


async def read_reason(request: Request, limit: int) -> str:
    '''
    Read the whole body or fail; nothing partial ever reaches the ledger.
    '''
    declared = request.headers.get("Content-Length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        log.warning("Rejected ping body of %s bytes (limit %d)", declared, limit)
        raise HTTPException(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Reason too long")

    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            log.warning("Rejected streamed ping body over %d bytes", limit)
            raise HTTPException(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Reason too long")
        chunks.append(chunk)
    return b"".join(chunks).decode("utf-8", errors="replace")


def create_app(settings: Settings, ledger: Optional[PingLedger] = None) -> FastAPI:
    app = FastAPI(title="presence canary", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.ledger = ledger if ledger is not None else PingLedger()
    app.state.authenticator = Authenticator(settings.OPERATOR_TOKEN)

    @app.exception_handler(StarletteHTTPException)
    async def plain_text_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    # --- Status view (public, any path)
    @app.api_route("/{path:path}", methods=["GET", "HEAD"], response_class=HTMLResponse)
    def status_page(ledger: PingLedger = Depends(get_ledger)):
        page = render_status_page(ledger.snapshot(), ledger.capacity, now_utc())
        return HTMLResponse(page, headers={"Cache-Control": "no-store"})

    # --- Ping submission (operator token, any path)
    @app.post("/{path:path}", dependencies=[Depends(require_operator)], response_class=PlainTextResponse)
    async def submit_ping(request: Request, ledger: PingLedger = Depends(get_ledger)):
        try:
            reason = await read_reason(request, settings.MAX_REASON_BYTES)
        except ClientDisconnect:
            log.info("Client disconnected before ping body was complete")
            return PlainTextResponse("Incomplete request", status_code=status.HTTP_400_BAD_REQUEST)
        ledger.record(reason)
        return PlainTextResponse("Ok")

    return app
