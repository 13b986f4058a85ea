"""
Financial Service API Application Factory
"""

from pathlib import Path
from typing import Optional
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .balance import router as balance_router
from .transferences import router as transferences_router
from .uploads import router as uploads_router
from .verify import router as verify_router
from .. import __version__
from ..config import FinancialServiceConfig, get_config
from ..logging_config import correlation_context, get_logger, setup_logging
from ..service import FinancialService
from ..storage import create_storage


CORRELATION_HEADER = "X-Request-ID"


def create_app(service: Optional[FinancialService] = None,
               config: Optional[FinancialServiceConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    config = config or get_config()
    setup_logging(config.log_level, config.log_format)
    logger = get_logger("financial_service.api")

    if service is None:
        service = FinancialService(
            create_storage(config.database_url),
            include_received_in_balance=config.include_received_in_balance
        )

    app = FastAPI(
        title="Financial Service API",
        description="Transference ledger with reviewer approval of deposits and purchases",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.service = service
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(balance_router, tags=["Balance"])
    app.include_router(transferences_router, tags=["Transference"])
    app.include_router(verify_router, tags=["Review"])
    app.include_router(uploads_router, tags=["Receipts"])

    Path(config.upload_directory).mkdir(parents=True, exist_ok=True)

    @app.middleware("http")
    async def correlate_request(request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        with correlation_context(correlation_id):
            response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "financial_service",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Financial Service API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "balance": "/balance/{user_id}",
                "purchase": "/purchase",
                "history": "/history/{user_id}",
                "transference": "/transference/{transference_id}",
                "verify": "/verify",
                "debit": "/debit/{user_id}",
                "receipt": "/uploads/{filename}",
            }
        }

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "financial_service.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )
