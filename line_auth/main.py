"""
LINE auth service.
POST /verifyToken exchanges a LINE access token for a Firebase custom auth token.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from line_auth.config import (
    FIREBASE_HTTP_TIMEOUT,
    FIREBASE_SERVICE_ACCOUNT_PATH,
    LINE_API_TIMEOUT,
    LINE_PROFILE_URL,
    LINE_VERIFY_URL,
    configure_logging,
    require_channel_id,
)
from line_auth.errors import MissingInput
from line_auth.exchange import TokenExchange
from line_auth.identity import FirebaseIdentityPlatform, init_firebase_app
from line_auth.line_api import LineClient

logger = logging.getLogger(__name__)

TOKEN_NOT_FOUND_MESSAGE = "Access Token not found"
AUTH_ERROR_MESSAGE = "Authentication error: Cannot verify access token."


def build_exchange() -> TokenExchange:
    """Read configuration and wire the pipeline. Raises ConfigurationError if misconfigured."""
    channel_id = require_channel_id()
    firebase_app = init_firebase_app(FIREBASE_SERVICE_ACCOUNT_PATH, http_timeout=FIREBASE_HTTP_TIMEOUT)
    return TokenExchange(
        channel_id=channel_id,
        line=LineClient(LINE_VERIFY_URL, LINE_PROFILE_URL, timeout=LINE_API_TIMEOUT),
        platform=FirebaseIdentityPlatform(firebase_app),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, check settings, initialize Firebase once on startup."""
    configure_logging()
    app.state.exchange = build_exchange()
    yield


app = FastAPI(title="LINE Auth", version="0.1.0", lifespan=lifespan)


def get_exchange(request: Request) -> TokenExchange:
    """Dependency: the pipeline built at startup."""
    return request.app.state.exchange


async def _read_token(request: Request) -> str:
    try:
        body = await request.json()
    except ValueError:
        body = None
    token = body.get("token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token.strip():
        raise MissingInput(TOKEN_NOT_FOUND_MESSAGE)
    return token


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "line_auth"}


@app.post("/verifyToken")
async def verify_token(request: Request, exchange: TokenExchange = Depends(get_exchange)):
    """
    Verify a LINE access token and return a Firebase custom token for the matching user.
    400 when the token is missing; 403 for every verification or Firebase failure.
    """
    try:
        access_token = await _read_token(request)
    except MissingInput:
        return JSONResponse(status_code=400, content={"error_message": TOKEN_NOT_FOUND_MESSAGE})

    try:
        result = await run_in_threadpool(exchange.exchange, access_token)
    except Exception as e:
        # Detail stays in the log; the caller only learns that verification failed
        logger.warning("LINE token verification failed: %s", e, exc_info=True)
        return JSONResponse(status_code=403, content={"error_message": AUTH_ERROR_MESSAGE})

    return {"firebase_token": result.custom_token}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "line_auth.main:app",
        host="127.0.0.1",
        port=8080,
        reload=True,
    )
