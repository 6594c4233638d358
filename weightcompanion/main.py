"""Weight Companion Server - Entry point.

Serves the AI coach HTTP endpoints and the MCP tool server from one
Starlette application.
"""

import logging
import os

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from .core.models import (
    DailyInsightRequest,
    MealSuggestionRequest,
    MotivationRequest,
    QuestionRequest,
)
from .shell.auth import api_key_matches, bearer_token
from .shell.mcp_server import mcp, get_coach, validation_message


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]
PROTECTED_PREFIXES = ("/ai", "/mcp")


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": "weight-companion"})


async def _parse(request: Request, model):
    """Validate a JSON body; returns (parsed, None) or (None, error response)."""
    try:
        body = await request.json()
    except ValueError:
        return None, JSONResponse({"error": "Request body must be JSON"}, status_code=400)

    try:
        return model.model_validate(body), None
    except ValidationError as e:
        return None, JSONResponse({"error": validation_message(e)}, status_code=400)


async def daily_insight(request: Request) -> JSONResponse:
    """Personalized insight from profile, recent weigh-ins and today's meals."""
    data, error = await _parse(request, DailyInsightRequest)
    if error:
        return error

    reply = await run_in_threadpool(
        get_coach().daily_insight, data.profile, data.recent_weight_entries, data.todays_meals
    )
    return JSONResponse({"insight": reply.text})


async def motivation(request: Request) -> JSONResponse:
    data, error = await _parse(request, MotivationRequest)
    if error:
        return error

    reply = await run_in_threadpool(get_coach().motivation, data.profile, data.context)
    return JSONResponse({"message": reply.text})


async def ask_question(request: Request) -> JSONResponse:
    data, error = await _parse(request, QuestionRequest)
    if error:
        return error

    reply = await run_in_threadpool(get_coach().answer_question, data.question, data.profile)
    return JSONResponse({"answer": reply.text})


async def meal_suggestions(request: Request) -> JSONResponse:
    data, error = await _parse(request, MealSuggestionRequest)
    if error:
        return error

    reply = await run_in_threadpool(
        get_coach().meal_suggestions, data.calorie_target, data.meal_type, data.dietary_preferences
    )
    return JSONResponse({"suggestions": reply.text})


# ==================== Auth Middleware ====================


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require the shared API key on coach and MCP routes."""

    def __init__(self, app, api_key: str) -> None:
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or not request.url.path.startswith(PROTECTED_PREFIXES):
            return await call_next(request)

        token = bearer_token(request.headers.get("Authorization"))
        if not api_key_matches(token, self.api_key):
            logger.warning("Rejected unauthenticated request to %s", request.url.path)
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        return await call_next(request)


# ==================== Create ASGI App ====================


def create_app(api_key: str | None = None, allowed_origins: list[str] | None = None) -> Starlette:
    """Create the Starlette application with MCP at root.

    Args:
        api_key: Shared key required on /ai and /mcp (defaults to
            COMPANION_API_KEY; unset means open access)
        allowed_origins: CORS origins (defaults to ALLOWED_ORIGINS)
    """
    if api_key is None:
        api_key = os.environ.get("COMPANION_API_KEY") or None
    if allowed_origins is None:
        env_origins = os.environ.get("ALLOWED_ORIGINS", "")
        allowed_origins = [o.strip() for o in env_origins.split(",") if o.strip()] or DEFAULT_ORIGINS

    mcp_app = mcp.streamable_http_app()

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/ai/daily-insight", daily_insight, methods=["POST"]),
        Route("/ai/motivation", motivation, methods=["POST"]),
        Route("/ai/ask", ask_question, methods=["POST"]),
        Route("/ai/meal-suggestions", meal_suggestions, methods=["POST"]),
        # Mount MCP app at root - it handles /mcp/ path internally
        Mount("/", app=mcp_app),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        ),
    ]
    if api_key:
        middleware.append(Middleware(ApiKeyMiddleware, api_key=api_key))
    else:
        logger.warning("COMPANION_API_KEY not set; coach and MCP routes are open")

    return Starlette(
        routes=routes,
        middleware=middleware,
        lifespan=mcp_app.router.lifespan_context,
    )


app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting Weight Companion server on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
