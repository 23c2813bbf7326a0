"""
Container host for the Discord interactions endpoint: FastAPI on port 8080.

- Any method on / : process_request() (only POST is served; others get 404)

Run with `uvicorn main:app --port 8080` or `python main.py`.

Button-click follow-ups run as FastAPI background tasks, which Starlette
executes after the response has been sent.
"""

import uuid
from typing import Optional

import uvicorn
from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from config import BotConfig, load_config
from followup import post_followup
from interactions import process_request
from logger_util import get_logger, log, log_exception, set_request_id

_logger = get_logger()

ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _log(level: str, event_type: str, data: dict) -> None:
    log(_logger, level, event_type, data, service="gifland-interactions-main")


def create_app(config: BotConfig) -> FastAPI:
    """Build the FastAPI app bound to one immutable BotConfig."""
    app = FastAPI()

    @app.api_route("/", methods=ROUTE_METHODS)
    async def interactions_endpoint(request: Request, background_tasks: BackgroundTasks):
        set_request_id(request.headers.get("x-request-id") or str(uuid.uuid4()))

        def schedule_followup(application_id: str, interaction_token: str, message: dict) -> None:
            background_tasks.add_task(post_followup, application_id, interaction_token, message)

        try:
            body = await request.body()
            # Catalog fetch is blocking I/O
            response = await run_in_threadpool(
                process_request,
                method=request.method,
                headers=request.headers,
                body=body,
                config=config,
                schedule_followup=schedule_followup,
            )
        except Exception as e:
            log_exception(_logger, "unhandled_exception", {}, e, service="gifland-interactions-main")
            return PlainTextResponse("Internal server error", status_code=500)

        _log("INFO", "response_sent", {"status_code": response.status_code})
        if isinstance(response.body, dict):
            return JSONResponse(content=response.body, status_code=response.status_code)
        return PlainTextResponse(response.body, status_code=response.status_code)

    return app


_app: Optional[FastAPI] = None


def get_app() -> FastAPI:
    """Return the process-wide app, built from load_config() on first use."""
    global _app
    if _app is None:
        _app = create_app(load_config())
    return _app


def __getattr__(name: str):
    # main.app is built on first access (uvicorn main:app)
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


if __name__ == "__main__":
    uvicorn.run(get_app(), host="0.0.0.0", port=8080)
