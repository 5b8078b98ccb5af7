from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from blogmod.api.api import api_router
from blogmod.core.config import APP_ENV
from blogmod.core.errors import BlogError
from blogmod.db.database import create_tables
import logging
import json
import traceback

logging.basicConfig(
    level=logging.DEBUG if APP_ENV == "development" else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # make sure tables are created
    create_tables()
    yield

logger = logging.getLogger("fastapi")

app = FastAPI(title="Moderated Blog API", lifespan=lifespan)


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    logger.warning(f"{request.method} {request.url.path} refused: {exc.code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    body = await request.body()
    request_info = {
        "url": str(request.url),
        "method": request.method,
        "body": body.decode() if body else None,
        "path_params": request.path_params,
        "query_params": dict(request.query_params)
    }

    try:
        response = await call_next(request)

        if response.status_code >= 400:
            response_body = b""
            async for chunk in response.body_iterator:
                response_body += chunk

            log = logger.error if response.status_code >= 500 else logger.info
            log(
                f"Request failed with status {response.status_code}\n"
                f"Request: {json.dumps(request_info, indent=2)}\n"
                f"Response: {response_body.decode()}\n"
            )
            return Response(
                content=response_body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type,
            )

        return response

    except Exception as e:
        logger.error(
            f"Request failed with exception\n"
            f"Request: {json.dumps(request_info, indent=2)}\n"
            f"Error: {str(e)}\n"
            f"Traceback: {traceback.format_exc()}"
        )
        raise

# register the API router
app.include_router(api_router, prefix="/api")
