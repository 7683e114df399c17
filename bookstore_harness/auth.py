import json
import logging

from .errors import AuthenticationError

logger = logging.getLogger(__name__)


def authenticate(client, settings, email=None, password=None):
    """
    Logs in against the identity endpoint and returns the bearer token.
    Raises AuthenticationError unless the call answers 200 with a non-empty
    token in `settings.token_field`.
    """
    email = email or settings.email
    password = password or settings.password

    response = client.post(settings.auth_path, json={"email": email, "password": password})
    if response.status_code != 200:
        raise AuthenticationError(
            f"{response.method} {response.url} returned {response.status_code}: {response.excerpt()}",
            status_code=response.status_code
        )

    try:
        payload = response.json()
    except json.JSONDecodeError as exc:
        raise AuthenticationError(f"login response is not JSON: {response.excerpt()}", status_code=200) from exc

    token = payload.get(settings.token_field) if isinstance(payload, dict) else None
    if not token:
        raise AuthenticationError(f"login response has no '{settings.token_field}'", status_code=200)

    logger.info("Authenticated as %s", email)
    return token
