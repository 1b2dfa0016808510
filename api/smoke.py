#!/usr/bin/env python

import json
import sys
from api.client import WavepipeClient
from config import CLIENT_NAME, LOG_FILE, LOG_LEVEL, PASSWORD, USERNAME
from core.errors import WavepipeError
from core.logging import log_error, setup_logging
from eliot import log_message, start_action

SMOKE_ENDPOINTS = [
    "/api/v0/albums",
    "/api/v0/albums/1",
    "/api/v0/artists",
    "/api/v0/artists/1",
    "/api/v0/folders",
    "/api/v0/folders/1",
    "/api/v0/search/song",
    "/api/v0/songs",
    "/api/v0/songs/1",
    "/api/v0/status",
]


def run_smoke(
    client: WavepipeClient,
    username: str,
    password: str,
    endpoints: list[str] | None = None,
    out=None,
    client_name: str | None = None,
) -> int:
    """Log in, hit every endpoint once, then log out.

    Each response is written to ``out`` as ``<path>:`` followed by its JSON.
    The first error (transport, decode, API or signing) is reported and ends the run.

    Returns:
        Exit code: 0 on success, 1 on the first failure
    """
    out = out or sys.stdout
    endpoints = SMOKE_ENDPOINTS if endpoints is None else endpoints

    with start_action(action_type="smoke_run", host=client.base_url, endpoints=len(endpoints)):
        try:
            client.login(username, password, client=client_name)
            log_message(message_type="smoke_login", message=f"Logged in as {username}")

            for resource in endpoints:
                out.write(f"{resource}:\n")
                out.write(json.dumps(client.get(resource)) + "\n")

            out.write(f"{client.api_path('logout')}:\n")
            out.write(json.dumps(client.logout()) + "\n")
        except WavepipeError as e:
            log_error(e, context="smoke_run")
            out.write(f"{type(e).__name__}: {e}\n")
            return 1

    log_message(message_type="smoke_complete", message=f"Smoke test passed ({len(endpoints) + 1} calls)")
    return 0


def main():
    setup_logging(LOG_LEVEL, LOG_FILE)
    with WavepipeClient() as client:
        code = run_smoke(client, USERNAME, PASSWORD, client_name=CLIENT_NAME)
    sys.exit(code)


if __name__ == "__main__":
    main()
