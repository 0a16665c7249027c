"""
JSON HTTP API for the doctor finder.

Endpoints:
    GET  /api/health       liveness
    POST /api/search       scrape the registry for a SearchCriteria payload
    GET  /api/specialties  fixed specialty list for client choice controls

Run:
    doctor-finder serve
    uvicorn doctor_finder.api:app --port 5000
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Optional, TypeVar

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT, ScraperSettings
from .models import SearchCriteria
from .service import DoctorSearchService
from .specialties import SPECIALTIES
from .utils import TotalScrapeFailure

logger = logging.getLogger(__name__)

T = TypeVar('T')

TOTAL_FAILURE_DETAILS = (
    "Both scraping methods failed. The website structure may have changed. "
    "Check the debug screenshots in the server directory."
)

# How often an in-flight search checks whether its caller is still there
DISCONNECT_POLL_SECONDS = 1.0

# nginx-style "client closed request"
CLIENT_CLOSED_REQUEST = 499

router = APIRouter()


class ClientDisconnected(Exception):
    """The caller went away before the work finished."""
    pass


async def run_until_disconnect(request: Request, work: Awaitable[T]) -> T:
    """
    Await work, cancelling it if the client goes away first.

    Cancellation reaches the scraper, whose browser session is closed on
    the way out. Once that teardown has finished ClientDisconnected is
    raised.
    """
    task = asyncio.ensure_future(work)
    try:
        while not task.done():
            await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if task.done():
                break
            if await request.is_disconnected():
                logger.warning("Client disconnected, cancelling search")
                task.cancel()
                await asyncio.wait({task})
                raise ClientDisconnected("Client disconnected before the search finished")
        return task.result()
    finally:
        if not task.done():
            task.cancel()


@router.get("/health")
def health():
    return {"status": "OK", "message": "Server is running"}


@router.post("/search")
async def search(request: Request, payload: Any = Body(None)):
    """Search for doctors by scraping the registry; zero results is a success."""
    if payload is None:
        return JSONResponse(status_code=400, content={"error": "Search parameters are required"})
    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"error": "Search parameters must be a JSON object"})

    criteria = SearchCriteria.from_dict(payload)
    service: DoctorSearchService = request.app.state.search_service

    try:
        doctors = await run_until_disconnect(request, service.search(criteria))
    except ClientDisconnected:
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    except TotalScrapeFailure as e:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to retrieve doctor data",
                "details": TOTAL_FAILURE_DETAILS,
                "debug": {"screenshots": e.screenshots},
            },
        )
    except Exception as e:
        logger.exception(f"Search error: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)},
        )

    return [doctor.to_dict() for doctor in doctors]


@router.get("/specialties")
def specialties():
    return list(SPECIALTIES)


async def invalid_request_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Search parameters must be valid JSON"})


def create_app(service: Optional[DoctorSearchService] = None) -> FastAPI:
    """Build the API; without a service one is created from the environment at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.search_service is None:
            app.state.search_service = DoctorSearchService(ScraperSettings.from_env())
            logger.info("Search service ready")
        yield

    app = FastAPI(title="Doctor Finder", lifespan=lifespan)
    app.state.search_service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, invalid_request_handler)
    app.include_router(router, prefix="/api", tags=["doctors"])
    return app


app = create_app()


def main(host: str = HOST, port: int = PORT):
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(f"Server running on port {port}")
    logger.info(f"Health check: http://localhost:{port}/api/health")
    logger.info(f"Search endpoint: http://localhost:{port}/api/search")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
