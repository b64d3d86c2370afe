import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class MessagelyError(Exception):
	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class ValidationError(MessagelyError):
	status_code = status.HTTP_400_BAD_REQUEST


class DuplicateUser(MessagelyError):
	status_code = status.HTTP_400_BAD_REQUEST


class Forbidden(MessagelyError):
	status_code = status.HTTP_403_FORBIDDEN


class NotFound(MessagelyError):
	status_code = status.HTTP_404_NOT_FOUND


class StoreError(MessagelyError):
	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def messagely_error_handler(request: Request, exc: MessagelyError) -> JSONResponse:
	if exc.status_code >= 500:
		logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
		return error_response(exc.status_code, "Internal server error")
	return error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
	return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
	errors = exc.errors()
	if errors:
		first = errors[0]
		field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
		message = f"{field}: {first.get('msg')}" if field else first.get("msg")
	else:
		message = "Invalid request"
	return error_response(status.HTTP_400_BAD_REQUEST, message)


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
	logger.error("%s %s hit a store failure", request.method, request.url.path, exc_info=exc)
	return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
	logger.error("%s %s failed unexpectedly", request.method, request.url.path, exc_info=exc)
	return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
	app.add_exception_handler(MessagelyError, messagely_error_handler)
	app.add_exception_handler(StarletteHTTPException, http_error_handler)
	app.add_exception_handler(RequestValidationError, request_validation_handler)
	app.add_exception_handler(SQLAlchemyError, store_error_handler)
	app.add_exception_handler(Exception, unhandled_error_handler)
