"""Exception handlers translating lifecycle errors into HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.responses import JSONResponse

from src.user_api.core.exceptions import (
    InvalidIdentifierError,
    InvalidInputError,
    UserNotFoundError,
)


def register_error_handlers(app: FastAPI) -> None:
    """Register all lifecycle and validation error handlers on the app."""

    @app.exception_handler(UserNotFoundError)
    async def user_not_found_handler(request: Request, exc: UserNotFoundError):
        logger.bind(path=request.url.path).info("User not found: {}", exc.user_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "User not found"},
        )

    @app.exception_handler(InvalidIdentifierError)
    async def invalid_identifier_handler(request: Request, exc: InvalidIdentifierError):
        logger.bind(path=request.url.path).warning("Invalid user id: {}", exc.user_id)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid user id"},
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        errors = exc.as_dict()
        logger.bind(path=request.url.path).warning("Invalid user input: {}", errors)
        return JSONResponse(
            status_code=422,
            content={"detail": "Invalid user input", "errors": errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Unparseable bodies and query parameters are client errors, not field errors
        logger.bind(path=request.url.path).warning(
            "Malformed request: {}", exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Malformed request",
                "errors": [
                    {
                        "field": ".".join(str(loc) for loc in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                    for error in exc.errors()
                ],
            },
        )
