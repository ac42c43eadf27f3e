"""FastAPI application exposing a pool deployment.

Note: Authentication is intentionally not implemented; `sender` in a
request body is trusted. The service is meant for simulation and for
backing a local client, not for custody.
"""

import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lpengine.api.endpoints import router
from lpengine.errors import AMMError

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("LPENGINE_HOST", "0.0.0.0")
PORT = int(os.environ.get("LPENGINE_PORT", "8000"))
DEBUG = os.environ.get("LPENGINE_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# HTTP status per error category
ERROR_STATUS = {
    "input_validation": 400,
    "ledger": 400,
    "slippage": 409,
    "liquidity_state": 409,
    "invariant": 409,
    "reentrancy": 423,
}

app = FastAPI(
    title="Liquidity Pool Engine",
    description="Constant-product pool with a fee-aware router",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AMMError)
async def amm_error_handler(_request: Request, exc: AMMError) -> JSONResponse:
    """Report pool and router failures with their code and category."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.category, 400),
        content={"code": exc.code, "category": exc.category, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - LPENGINE_HOST: Host to bind to (default: 0.0.0.0)
    - LPENGINE_PORT: Port to bind to (default: 8000)
    - LPENGINE_DEBUG: Enable debug/reload mode (default: false)
    - LPENGINE_*: Pool parameters, see lpengine.config
    """
    uvicorn.run(
        "lpengine.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
