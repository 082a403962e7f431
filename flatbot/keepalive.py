# flatbot/keepalive.py
import threading

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

app = FastAPI(title="flatbot keep-alive", docs_url=None, redoc_url=None, openapi_url=None)


# Liveness ping for the hosting platform; no business logic.
@app.get("/")
@app.get("/health")
def health():
    return {"ok": True}


@app.api_route("/{path:path}", methods=ALL_METHODS)
def ack(path: str):
    return PlainTextResponse("ok")


class KeepAlive:
    """Handle for the listener thread, stopped from the bot's signal handler."""

    def __init__(self, server: uvicorn.Server, thread: threading.Thread):
        self.server = server
        self.thread = thread

    def shutdown(self, timeout: float = 5):
        self.server.should_exit = True
        self.thread.join(timeout)


def run_keepalive(port: int, host: str = "0.0.0.0") -> KeepAlive:
    """Start the keep-alive HTTP listener in a background daemon thread."""
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)
    t = threading.Thread(target=server.run, daemon=True)
    t.start()
    print(f"[INFO] HTTP server on {port}")
    return KeepAlive(server, t)


__all__ = ["app", "run_keepalive", "KeepAlive"]
