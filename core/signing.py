"""HMAC-SHA1 request signing for the wavepipe API.

Every request outside of login carries a credential of the form
``identifier:nonce:signature``, where the signature is the hex HMAC-SHA1 of
``<identifier>-<nonce>-<method>-<resource>`` keyed by the session secret.

Fields are joined with a bare hyphen and are not escaped, so a hyphen inside
a field is indistinguishable from the separator. Servers expect exactly this
format, so it is reproduced as-is.
"""

import base64
import hashlib
import hmac
import random
from core.errors import SigningError
from typing import NamedTuple

NONCE_ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ'
DEFAULT_NONCE_LENGTH = 10

SIGN_SEPARATOR = '-'
TOKEN_SEPARATOR = ':'

_system_rng = random.SystemRandom()


class SignatureToken(NamedTuple):
    """The three components of a packed ``s`` credential."""

    identifier: str
    nonce: str
    signature: str

    def pack(self) -> str:
        return pack_token(self.identifier, self.nonce, self.signature)


def generate_nonce(length: int = DEFAULT_NONCE_LENGTH, rng: random.Random | None = None) -> str:
    """Generate a random alphanumeric nonce.

    Each character is drawn independently and uniformly from the 62-symbol
    ``NONCE_ALPHABET``.

    Args:
        length: Number of characters (0 yields an empty string)
        rng: Random source exposing ``choice``; defaults to ``random.SystemRandom``

    Returns:
        Nonce string of exactly ``length`` characters

    Raises:
        SigningError: If length is negative or not an integer
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise SigningError(f"nonce length must be an integer, got {type(length).__name__}")
    if length < 0:
        raise SigningError(f"nonce length must not be negative, got {length}")

    rng = rng or _system_rng
    return ''.join(rng.choice(NONCE_ALPHABET) for _ in range(length))


def _field(name: str, value) -> str:
    if not isinstance(value, str):
        raise SigningError(f"{name} must be a string, got {type(value).__name__}")
    return value


def _identifier(value) -> str:
    # Numeric user IDs sign as their decimal form
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _field('identifier', value)


def signing_string(identifier: str | int, nonce: str, method: str, resource: str) -> str:
    """Build the canonical ``<identifier>-<nonce>-<method>-<resource>`` string."""
    return SIGN_SEPARATOR.join(
        (
            _identifier(identifier),
            _field('nonce', nonce),
            _field('method', method),
            _field('resource', resource),
        )
    )


def api_signature(identifier: str | int, nonce: str, method: str, resource: str, secret: str) -> str:
    """Compute the HMAC-SHA1 API signature for a request.

    Args:
        identifier: Public key, or numeric user ID
        nonce: Per-request nonce
        method: Uppercase HTTP verb
        resource: Request path without host or query string
        secret: Session secret key, used verbatim as the HMAC key

    Returns:
        40-character lowercase hex digest
    """
    message = signing_string(identifier, nonce, method, resource)
    key = _field('secret', secret)
    return hmac.new(key.encode('utf-8'), message.encode('utf-8'), hashlib.sha1).hexdigest()


def pack_token(identifier: str | int, nonce: str, signature: str) -> str:
    """Join identifier, nonce and signature into the ``s`` parameter value."""
    return TOKEN_SEPARATOR.join((_identifier(identifier), _field('nonce', nonce), _field('signature', signature)))


def parse_token(token: str) -> SignatureToken:
    """Split a packed ``identifier:nonce:signature`` credential.

    Components past the third are ignored, matching the server.

    Raises:
        SigningError: If the token has fewer than three components
    """
    parts = _field('token', token).split(TOKEN_SEPARATOR)
    if len(parts) < 3:
        raise SigningError("malformed signature provided")
    return SignatureToken(parts[0], parts[1], parts[2])


def sign_request(
    identifier: str | int,
    method: str,
    resource: str,
    secret: str,
    nonce: str | None = None,
    rng: random.Random | None = None,
) -> SignatureToken:
    """Sign a request with a fresh nonce (or the one given)."""
    if nonce is None:
        nonce = generate_nonce(rng=rng)
    identifier = _identifier(identifier)
    return SignatureToken(identifier, nonce, api_signature(identifier, nonce, method, resource, secret))


def basic_auth_header(token: str) -> str:
    """Wrap a credential in an HTTP Basic ``Authorization`` header value.

    The server decodes with URL-safe base64 and splits on the first colon,
    so ``identifier:nonce:signature`` and ``sessionkey:`` both round-trip.
    """
    encoded = base64.urlsafe_b64encode(_field('token', token).encode('utf-8')).decode('ascii')
    return f"Basic {encoded}"


def verify_signature(token: str | SignatureToken, method: str, resource: str, secret: str) -> bool:
    """Check a packed credential against the expected signature.

    Raises:
        SigningError: If the token is malformed
    """
    if not isinstance(token, SignatureToken):
        token = parse_token(token)
    expected = api_signature(token.identifier, token.nonce, method, resource, secret)
    return hmac.compare_digest(token.signature.encode('utf-8'), expected.encode('utf-8'))
