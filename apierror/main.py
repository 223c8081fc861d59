"""Demo FastAPI service that speaks the standard error contract."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from apierror.api.handlers import register_error_handlers
from apierror.core.codes import ErrorCode
from apierror.core.config import get_error_handling_settings
from apierror.core.errors import ApiError
from apierror.core.errors import NotFoundError
from apierror.core.logging import configure_logging

logger = logging.getLogger(__name__)


class Pet(BaseModel):
    name: str
    type: str


class CreateUserRequest(BaseModel):
    """Payload accepted by ``POST /users``."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    pets: list[Pet] = Field(min_length=1)


def create_app() -> FastAPI:
    settings = get_error_handling_settings()
    configure_logging(settings.log_level)
    logger.info("Starting error contract demo with settings=%s", settings.safe_for_logging())

    app = FastAPI(title="apierror demo")
    register_error_handlers(app)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint for service readiness."""
        return {"status": "ok"}

    @app.get("/users/{user_id}")
    def retrieve_user(user_id: str) -> dict[str, str]:
        raise NotFoundError("The user not found")

    @app.post("/users", status_code=201)
    def create_user(payload: CreateUserRequest) -> dict[str, str]:
        logger.info("Creating user %s", payload.first_name)
        return {"firstName": payload.first_name, "lastName": payload.last_name}

    @app.post("/throw")
    def throw(code: ErrorCode = ErrorCode.UNKNOWN, msg: str = "Unknown error") -> None:
        raise ApiError(code, msg)

    return app


app = create_app()
