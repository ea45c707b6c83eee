"""
FastAPI application served on port 3000.

Routes: GET / (ALB health check), GET /health/db

Dependencies: fastapi, uvicorn, sqlalchemy
System role: Container entry point behind the ALB
"""

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from webapp.database import get_engine, ping
from webapp.logger import configure_logging, get_logger
from webapp.settings import get_app_settings

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="ecrproj web",
        description="Web service behind the ALB and API Gateway",
        version="0.1.0",
    )

    @app.get("/")
    def health_check():
        """Basic health check, used by the ALB target group."""
        return {"status": "healthy", "message": "Server Healthy"}

    @app.get("/health/db")
    def health_check_db(engine: Engine = Depends(get_engine)):
        """Database health check."""
        try:
            ping(engine)
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e.__class__.__name__}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "error": e.__class__.__name__},
            )
        return {"status": "healthy", "message": "Database connection OK"}

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_app_settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)
