"""
Serve the contents of a fixed JSON config file over HTTP.

GET / returns the raw bytes of CONFIG_FILE as application/json, read fresh on
every request. Any other method is rejected with 405; a failure to read the
file answers 500 without leaking the underlying error to the client.
"""

import asyncio
import logging

import fire
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

# Fixed path, not exposed via flags or environment
CONFIG_FILE = "/config/config.json"

HOST = "0.0.0.0"
PORT = 8080

READ_ERROR_MESSAGE = "Error reading config file"
METHOD_ERROR_MESSAGE = "Invalid request method"

logger = logging.getLogger(__name__)


def read_config(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def error_response(message: str, status_code: int, headers=None) -> Response:
    response = PlainTextResponse(message + "\n", status_code, headers)
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


# Sync endpoint: Starlette runs it in its threadpool, so a slow read only
# blocks this request.
def config_endpoint(request: Request) -> Response:
    # Exact, case-sensitive match: HEAD and "get" are rejected too
    if request.method != "GET":
        return error_response(METHOD_ERROR_MESSAGE, 405, {"Allow": "GET"})

    path = request.app.state.config_file
    try:
        content = read_config(path)
    except OSError as e:
        logger.error("Cannot read config file %s: %s", path, e)
        return error_response(READ_ERROR_MESSAGE, 500)

    return Response(content, 200, media_type="application/json")


def create_app(config_file: str = CONFIG_FILE) -> Starlette:
    routes = [
        Route("/", config_endpoint),
    ]
    app = Starlette(routes=routes)
    app.state.config_file = config_file
    return app


app = create_app()


def main(host=HOST, port=PORT, server="uvicorn"):
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger.info("Server starting on port %s...", port)

    if server == "uvicorn":
        # uvicorn logs bind errors itself and exits with status 1
        uvicorn.run(app, host=host, port=port, log_level="info")

    elif server == "hypercorn":
        from hypercorn.asyncio import serve
        from hypercorn.config import Config

        config = Config()
        config.bind = [f"{host}:{port}"]
        try:
            asyncio.run(serve(app, config))
        except OSError as e:
            logger.critical("Cannot listen on %s:%s: %s", host, port, e)
            raise SystemExit(1)

    else:
        raise ValueError(f"Unknown server: {server!r}")


def cli():
    fire.Fire(main)


if __name__ == "__main__":
    cli()
