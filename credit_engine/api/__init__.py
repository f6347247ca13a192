"""
Credit Engine API Application Factory
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import get_config
from ..logging_config import setup_logging
from .dues import router as dues_router
from .credits import router as credits_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Credit Due Engine API",
        description="Billing, yield, principal and late fee computation for credit lines",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(dues_router, prefix="/dues", tags=["Dues"])
    app.include_router(credits_router, prefix="/credits", tags=["Credits"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "credit_engine_api",
            "version": __version__
        }

    return app


app = create_app()


def run_server(host: str = None, port: int = None, debug: bool = False):
    """Run the FastAPI server"""
    engine_config = get_config()
    setup_logging(
        level=engine_config.log_level,
        log_format=engine_config.log_format,
        log_file=engine_config.log_file
    )
    uvicorn.run(
        "credit_engine.api:app",
        host=host or engine_config.api_host,
        port=port or engine_config.api_port,
        reload=debug,
        log_level="info"
    )
