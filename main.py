import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from relay.api.routers import uploads
from relay.core.config import settings
from relay.core.errors import ProviderError, RelayError
from relay.services.cleanup_service import setup_cleanup_tasks

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("relay")

# Create FastAPI application
app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    if isinstance(exc, ProviderError):
        logger.error(f"Provider upload failed: {exc.detail}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )

# Include routers
app.include_router(uploads.router)

# Set up background cleanup tasks
setup_cleanup_tasks(app)

if __name__ == "__main__":
    logger.info(f"Server is started at {settings.PORT}")
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
