from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from base_models import (
    ErrorResponse,
    Failure,
    OptimizationRequest,
    OptimizationResponse,
    OptimizationResult,
    QuotaExceeded,
    Success,
)
from config import Settings, load_settings
from helpers import request_optimization
from prompt_optimizer import MODEL

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

QUOTA_MESSAGE = "Le service d'optimisation n'est pas disponible pour le moment. Veuillez réessayer plus tard."
GENERIC_MESSAGE = "Une erreur est survenue lors de l'optimisation. Veuillez réessayer plus tard."
INVALID_REQUEST_MESSAGE = "La requête doit contenir un champ « response » de type texte."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def to_http_response(result: OptimizationResult) -> JSONResponse:
    """Map an upstream result to the client-facing response. Provider detail is never forwarded."""
    if isinstance(result, Success):
        return JSONResponse(status_code=200, content=OptimizationResponse(optimizedContent=result.text).model_dump())
    if isinstance(result, QuotaExceeded):
        return _error(503, QUOTA_MESSAGE)
    return _error(500, GENERIC_MESSAGE)


def create_app(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Build the optimization proxy.

    `transport` replaces the network layer of the outbound client; tests pass an
    httpx.MockTransport here.
    """
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Response Optimization API")

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        logger.warning("Rejected optimization request: %s", exc.errors())
        return _error(400, INVALID_REQUEST_MESSAGE)

    @app.options("/{path:path}")
    async def preflight(path: str):
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "model": MODEL,
            "provider_configured": settings.provider_configured,
        }

    @app.post("/", response_model=OptimizationResponse, responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}})
    async def optimize_response(payload: OptimizationRequest):
        try:
            async with httpx.AsyncClient(timeout=settings.openai_timeout_seconds, transport=transport) as client:
                result = await request_optimization(client, settings, payload.response)
        except Exception as exc:
            logger.exception("Error in optimize-response handler")
            result = Failure(detail=str(exc))
        return to_http_response(result)

    return app


app = create_app()
