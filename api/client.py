#!/usr/bin/env python

import random
import requests
from config import API_VERSION, AUTH_MODE, CREDENTIAL_TRANSPORT, NONCE_LENGTH, REQUEST_TIMEOUT, WAVEPIPE_HOST, WAVEPIPE_SCHEME
from core.errors import ApiError, DecodeError, TransportError, WavepipeError
from core.logging import log_api_request
from core.models import LoginResponse, Session
from core.signing import basic_auth_header, generate_nonce, sign_request
from eliot import start_action
from enum import Enum
from pydantic import ValidationError
from typing import Any


class AuthMode(str, Enum):
    """Which session credential authenticates requests after login."""

    TOKEN = 'token'  # session key sent verbatim, no signing
    HMAC = 'hmac'  # signed, identified by public key
    USER = 'user'  # signed, identified by numeric user ID


class CredentialTransport(str, Enum):
    """Where the credential travels on each request."""

    QUERY = 'query'
    HEADER = 'header'


class WavepipeClient:
    """Client for the wavepipe JSON API."""

    def __init__(
        self,
        host: str = WAVEPIPE_HOST,
        scheme: str = WAVEPIPE_SCHEME,
        api_version: str = API_VERSION,
        auth_mode: AuthMode | str = AUTH_MODE,
        transport: CredentialTransport | str = CREDENTIAL_TRANSPORT,
        nonce_length: int = NONCE_LENGTH,
        timeout: float = REQUEST_TIMEOUT,
        rng: random.Random | None = None,
        http: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            host: Server host, optionally with port (default from WAVEPIPE_HOST)
            scheme: URL scheme, http or https
            api_version: API version path segment (e.g. "v0")
            auth_mode: Credential used after login (token, hmac, user)
            transport: Send credentials as the "s" query parameter or an Authorization header
            nonce_length: Length of generated nonces
            timeout: Per-request timeout in seconds
            rng: Random source for nonces; tests pass a seeded random.Random
            http: requests.Session to use (one is created if omitted)
        """
        self.base_url = f"{scheme}://{host}"
        self.api_version = api_version
        self.auth_mode = AuthMode(auth_mode)
        self.transport = CredentialTransport(transport)
        self.nonce_length = nonce_length
        self.timeout = timeout
        self.rng = rng
        self.http = http or requests.Session()
        self.session: Session | None = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        """Close the underlying HTTP session."""
        self.http.close()

    def api_path(self, endpoint: str) -> str:
        """Build a versioned API path, e.g. ``songs/1`` -> ``/api/v0/songs/1``."""
        return f"/api/{self.api_version}/{endpoint.lstrip('/')}"

    # === Session ===

    def login(self, username: str, password: str, client: str | None = None) -> Session:
        """Log in with plaintext credentials and store the returned session.

        Args:
            username: Account name (sent as "u")
            password: Account password (sent as "p")
            client: Optional client name recorded on the session (sent as "c")

        Returns:
            The session issued by the server

        Raises:
            TransportError: If the server cannot be reached or returns nothing
            DecodeError: If the response lacks the session fields this auth mode needs
            ApiError: If the server rejects the login
        """
        params = {'u': username, 'p': password}
        if client:
            params['c'] = client

        body = self._request('login', self.api_path('login'), params=params)
        try:
            response = LoginResponse.model_validate(body)
        except ValidationError as e:
            raise DecodeError(f"Unexpected login response: {e}") from e

        self._check_session(response.session)
        self.session = response.session
        return self.session

    def _check_session(self, session: Session | None):
        if session is None:
            raise DecodeError("Login response has no session")
        if self.auth_mode is AuthMode.TOKEN:
            if not session.has_key:
                raise DecodeError("Login session has no key")
        elif not session.has_key_pair:
            raise DecodeError("Login session has no publicKey/secretKey pair")
        elif self.auth_mode is AuthMode.USER and session.user_id is None:
            raise DecodeError("Login session has no userId")

    def logout(self) -> Any:
        """Destroy the current session on the server and forget it locally."""
        body = self.get(self.api_path('logout'))
        self.session = None
        return body

    # === Credentials ===

    def signed_token(self, method: str, resource: str, nonce: str | None = None) -> str:
        """Produce the credential for one request.

        In token mode this is the session key. Otherwise it is
        ``identifier:nonce:signature`` signed over ``method`` and ``resource``,
        with a fresh nonce unless one is given.
        """
        if self.session is None:
            raise WavepipeError("not logged in")
        if self.auth_mode is AuthMode.TOKEN:
            return self.session.key

        if self.auth_mode is AuthMode.USER:
            identifier = self.session.user_id
        else:
            identifier = self.session.public_key
        if nonce is None:
            nonce = generate_nonce(self.nonce_length, rng=self.rng)
        return sign_request(identifier, method.upper(), resource, self.session.secret_key, nonce=nonce).pack()

    def _credentials(self, method: str, resource: str) -> tuple[dict, dict]:
        token = self.signed_token(method, resource)
        if self.transport is CredentialTransport.QUERY:
            return {'s': token}, {}
        if self.auth_mode is AuthMode.TOKEN:
            # Server reads the username half of the Basic pair
            token = f"{token}:"
        return {}, {'Authorization': basic_auth_header(token)}

    # === Requests ===

    def get(self, resource: str, params: dict | None = None) -> Any:
        """Send a signed GET request and return the decoded JSON body.

        Args:
            resource: Absolute request path (e.g. "/api/v0/songs"); a relative
                endpoint like "songs" is placed under the API version
            params: Extra query parameters
        """
        if not resource.startswith('/'):
            resource = self.api_path(resource)
        auth_params, headers = self._credentials('GET', resource)
        return self._request('get', resource, params={**(params or {}), **auth_params}, headers=headers)

    def _request(self, action: str, resource: str, params: dict | None = None, headers: dict | None = None) -> Any:
        url = f"{self.base_url}{resource}"
        with start_action(action_type="wavepipe:request", method='GET', resource=resource):
            try:
                response = self.http.get(url, params=params, headers=headers or {}, timeout=self.timeout)
            except requests.RequestException as e:
                raise TransportError(f"Request to {resource} failed: {e}", url=url) from e

            log_api_request(action, resource=resource, status_code=response.status_code, auth_mode=self.auth_mode.value)

            if not response.content:
                raise TransportError(f"No data returned from {resource}", url=url)
            try:
                body = response.json()
            except ValueError as e:
                raise DecodeError(f"Invalid JSON from {resource}: {e}") from e

        error = body.get('error') if isinstance(body, dict) else None
        if error:
            if not isinstance(error, dict):
                raise ApiError(response.status_code, str(error))
            raise ApiError(error.get('code', response.status_code), error.get('message', ''))
        return body
