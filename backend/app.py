"""
SmartRecipe ingredient AI API.

Endpoints:
    GET  /                       Health check
    POST /categorize-ingredient  Classify one ingredient into the pantry taxonomy
    POST /parse-ingredients      Free text -> structured ingredient list
    OPTIONS on both POST paths   CORS preflight, browser or bare (200, empty body)

Every failure is answered with {"error": <message>, "code": <code>, "requestId": <id>}.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, List, Optional
import logging
import uuid
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

from core.config import Settings, load_settings, log_config
from core.errors import PantryAIError, InvalidInput, MethodNotAllowed
from core.llm import CompletionProvider, OpenAIChatProvider
from core.categorizer import categorize
from core.parsing.ingredient_parser import parse_ingredients

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SERVICE_NAME = "SmartRecipe Ingredient AI"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

PREFLIGHT_PATHS = frozenset({"/categorize-ingredient", "/parse-ingredients"})


# --- Request Models ---
# Field types stay loose; core.categorizer / core.parsing check them and
# answer with the endpoint-specific message.
class CategorizeRequest(BaseModel):
    ingredientName: Any = None
    userHistory: Optional[List[Any]] = None


class ParseRequest(BaseModel):
    text: Any = None


# --- Helper Functions ---

def _json(payload: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=payload, status_code=status_code, headers=CORS_HEADERS)


def _error_response(exc: PantryAIError) -> JSONResponse:
    request_id = str(uuid.uuid4())
    logger.warning(
        "REQUEST_FAILED request_id=%s code=%s status=%s message=%s",
        request_id, exc.code, exc.status_code, exc.message,
    )
    return _json(
        {"error": exc.message, "code": exc.code, "requestId": request_id},
        status_code=exc.status_code,
    )


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[CompletionProvider] = None,
) -> FastAPI:
    """
    Build the API. Settings are resolved once here; tests inject their own
    settings and a stub provider.
    """
    settings = settings or load_settings()
    log_config(settings)

    app = FastAPI(title="SmartRecipe Ingredient AI API")
    app.state.settings = settings
    app.state.provider = provider or OpenAIChatProvider.from_settings(settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Registered after CORSMiddleware so it runs first: every OPTIONS on the
    # AI endpoints, browser preflight or bare, gets 200 with an empty body.
    @app.middleware("http")
    async def _answer_preflight(request: Request, call_next):
        if request.method == "OPTIONS" and request.url.path in PREFLIGHT_PATHS:
            return _preflight()
        return await call_next(request)

    # --- Error handlers ---

    @app.exception_handler(PantryAIError)
    async def _pantry_error(request: Request, exc: PantryAIError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        logger.info("INVALID_BODY path=%s errors=%s", request.url.path, exc.errors()[:3])
        return _error_response(InvalidInput("Invalid request body"))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return _error_response(MethodNotAllowed())
        error = PantryAIError(str(exc.detail))
        error.code = "not_found" if exc.status_code == 404 else "http_error"
        error.status_code = exc.status_code
        return _error_response(error)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.error("Unhandled error path=%s: %s", request.url.path, exc, exc_info=True)
        return _error_response(PantryAIError())

    # --- Endpoints ---

    @app.get("/")
    def health_check():
        return {"status": "ok", "service": SERVICE_NAME}

    @app.post("/categorize-ingredient")
    def categorize_ingredient(body: CategorizeRequest, request: Request):
        """Classify one ingredient; out-of-taxonomy replies come back as Other/0.5."""
        result = categorize(
            request.app.state.provider,
            body.ingredientName,
            body.userHistory,
            history_limit=request.app.state.settings.history_limit,
        )
        return _json(result.to_dict())

    @app.post("/parse-ingredients")
    def parse_ingredients_endpoint(body: ParseRequest, request: Request):
        """Free-text pantry entry; malformed items in the model reply are dropped."""
        result = parse_ingredients(request.app.state.provider, body.text)
        return _json(result.to_dict())

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
