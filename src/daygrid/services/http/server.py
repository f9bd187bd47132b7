from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...api import call_api, get_api_functions
from ...domain import ConflictError, NotFoundError, ScheduleError, StorageError, ValidationError
from ...logging import configure_logging


logger = logging.getLogger(__name__)

app = FastAPI(title="daygrid local API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 422),
    (StorageError, 503),
)


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _error_response(exc: ScheduleError) -> JSONResponse:
    status = next((code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)), 400)
    body = {
        "error": type(exc).__name__,
        "detail": exc.message,
        "notification": {"title": exc.title, "description": exc.description, "variant": "destructive"},
    }
    return JSONResponse(body, status_code=status)


@app.get("/api/functions")
async def list_api_functions() -> JSONResponse:
    functions = [func.describe() for func in get_api_functions()]
    return JSONResponse({"functions": functions})


@app.post("/api/functions/{function_name}")
def invoke_api_function(function_name: str, request: ApiCallRequest) -> JSONResponse:
    try:
        result = call_api(function_name, **request.arguments)
    except ScheduleError as exc:
        logger.info("API function %s rejected: %s", function_name, exc)
        return _error_response(exc)
    except KeyError as exc:
        logger.warning("API function not found: %s", function_name)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logger.debug("API function %s executed successfully", function_name)
    return JSONResponse({"name": function_name, "result": result})


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    configure_logging()
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving daygrid API on %s:%s", host, port)
    asyncio.run(serve(app, config))
