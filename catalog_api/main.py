from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Security, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader, APIKeyQuery

from catalog_api import db
from catalog_api.exceptions import ConfigurationError, DatabaseError
from catalog_api.logging_config import logger, tracer
from catalog_api.routes.party_route import router as party_router
from catalog_api.routes.product_route import router as product_router

API_KEY_NAME = "x-functions-key"
api_key_header_scheme = APIKeyHeader(
    name=API_KEY_NAME,
    auto_error=False,
    scheme_name="ApiKeyAuthHeader",
    description="API Key (x-functions-key) in header",
)
api_key_query_scheme = APIKeyQuery(
    name="code",
    auto_error=False,
    scheme_name="ApiKeyAuthQuery",
    description="API Key (code) in query string",
)


def _get_azure_function_key(request: Request) -> str | None:
    """Function key from the Azure Functions request context, when hosted there."""
    try:
        if request.function_context and request.function_context.function_directory:
            return request.function_context.function_directory.get_function_key()
    except AttributeError:
        pass
    return None


async def get_api_key(
    req: Request,
    api_key_from_header: str = Security(api_key_header_scheme),
    api_key_from_query: str = Security(api_key_query_scheme),
):
    """Validate API key from header or query against Azure Function key if available."""
    client_api_key = api_key_from_header or api_key_from_query
    azure_expected_key = _get_azure_function_key(req)

    if azure_expected_key:
        if not client_api_key or client_api_key != azure_expected_key:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid API key.",
            )
    elif not client_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required.",
        )
    return client_api_key


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await db.close()


app = FastAPI(
    title="Catalog API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    dependencies=[Security(get_api_key)],
    lifespan=lifespan,
)


@app.exception_handler(DatabaseError)
async def handle_database_error(request: Request, exc: DatabaseError):
    with tracer.start_as_current_span("handle_database_error") as span:
        span.set_attribute("error", True)
        span.set_attribute("error.type", "database_error")
        logger.error(
            "Database error",
            extra={"error": str(exc), "path": request.url.path},
            exc_info=exc.original_exception,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "A database error occurred."},
        )


@app.exception_handler(ConfigurationError)
async def handle_configuration_error(request: Request, exc: ConfigurationError):
    logger.error(
        "Service misconfigured",
        extra={"error": str(exc), "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected internal server error occurred."},
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(_: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ValueError)
async def handle_value_error(_: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.include_router(product_router)
app.include_router(party_router)
