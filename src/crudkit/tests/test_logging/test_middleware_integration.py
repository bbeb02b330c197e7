import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from crudkit.config.settings import Settings
from crudkit.core.logging.builder import setup_logging
from crudkit.core.logging.middleware import RequestIDMiddleware


def test_request_id_in_response_and_logs_stdout(capsys):
    settings = Settings(_env_file=None, ENV="production", LOG_FORMAT="json", LOG_LEVEL="INFO", LOG_TO_STDOUT=True)
    setup_logging(settings)

    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    async def hello():
        logging.getLogger("crudkit").info("handling hello")
        return {"ok": True}

    try:
        resp = TestClient(app).get("/hello")
        assert resp.status_code == 200
        rid = resp.headers.get("X-Request-ID")
        assert rid is not None

        # Each line on stderr is a JSON object (LOG_FORMAT=json)
        stderr = capsys.readouterr().err.strip()
        assert stderr, "Expected logs on stderr but nothing was captured."

        found = False
        for line in stderr.splitlines():
            try:
                rec = json.loads(line)
            except json.JSONDecodeError:
                continue
            if rec.get("request_id") == rid and rec.get("message") == "handling hello":
                found = True
                break

        assert found, "No log line in stderr with matching request_id"
    finally:
        setup_logging(Settings(_env_file=None, ENV="testing", LOG_LEVEL="DEBUG", LOG_FORMAT="text"))
