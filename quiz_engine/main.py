# FastAPI entry point; wires the generation pipeline and API routes
# quiz_engine/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quiz_engine.endpoints import quiz as quiz_router
from quiz_engine.services.batch_orchestrator import BatchOrchestrator
from quiz_engine.services.generation_client import GenerationClient
from quiz_engine.services.quiz_service import QuizService
from quiz_engine.services.result_cache import ResultCache
from quiz_engine.utils.config import settings
from quiz_engine.utils.exceptions import InvalidRequest, UpstreamUnavailable
from quiz_engine.utils.logger import logger


def create_quiz_service() -> QuizService:
    """Builds the long-lived service graph shared by all requests."""
    client = GenerationClient(settings)
    if client.is_configured:
        logger.info(f"LLM provider '{client.provider}' configured, model: {client.model_name}")
    else:
        logger.warning(f"LLM API key missing for provider '{client.provider}'. Generation requests will fail.")

    cache = ResultCache(ttl_seconds=settings.cache_ttl_seconds, max_entries=settings.cache_max_entries)
    return QuizService(
        cache=cache,
        orchestrator=BatchOrchestrator(client),
        default_batch_size=settings.default_batch_size,
        default_parallel=settings.max_parallel,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Quiz API starting up...")
    app.state.quiz_service = create_quiz_service()
    logger.info("Startup complete.")
    yield
    logger.info("Quiz API shutting down...")

# --- FastAPI App Initialization ---
app = FastAPI(
    title="Quiz Generation API",
    description="Generates multiple-choice quizzes with an LLM, batched, cached and optionally streamed.",
    version="1.0.0",
    lifespan=lifespan
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this to your frontend's domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(quiz_router.router, prefix="/api", tags=["Quiz"])

# --- Error Handlers ---
@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    logger.error(f"Error generating quiz: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to generate quiz questions", "message": str(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error = "Endpoint not found" if exc.status_code == 404 else exc.detail
    return JSONResponse(status_code=exc.status_code, content={"error": error})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Something went wrong!", "message": str(exc)})

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {"message": "Welcome to the Quiz Generation API"}
