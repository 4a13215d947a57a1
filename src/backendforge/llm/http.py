"""JSON-over-HTTP transport shared by the provider adapters."""

from __future__ import annotations

import json
import logging
from http import client
from typing import Any
from urllib import error, request

from backendforge.llm.base import LLMError, ProviderConnectionError, ProviderHTTPError

logger = logging.getLogger(__name__)


def post_json(
    url: str,
    body: dict[str, Any],
    *,
    headers: dict[str, str],
    provider: str,
    timeout_seconds: int,
) -> dict[str, Any]:
    """POST ``body`` as JSON and return the decoded JSON object response."""
    req = request.Request(
        url,
        method="POST",
        data=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json", **headers},
    )
    logger.debug("POST %s (provider=%s)", url, provider)

    try:
        with request.urlopen(req, timeout=timeout_seconds) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except error.HTTPError as exc:
        details = exc.read().decode("utf-8", errors="replace")
        raise ProviderHTTPError(provider, exc.code, details) from exc
    except error.URLError as exc:
        raise ProviderConnectionError(
            f"Could not reach the {provider} service ({exc.reason}). "
            "Check the base URL, API key and network connection."
        ) from exc
    except TimeoutError as exc:
        raise ProviderConnectionError(
            f"{provider} request timed out after {timeout_seconds}s. "
            "Check the provider configuration or network connection."
        ) from exc
    except (client.HTTPException, OSError) as exc:
        raise ProviderConnectionError(
            f"Connection to the {provider} service failed ({exc!r}). "
            "Check the network connection and try again."
        ) from exc
    except UnicodeDecodeError as exc:
        raise LLMError(f"{provider} response was not valid UTF-8.") from exc
    except json.JSONDecodeError as exc:
        raise LLMError(f"{provider} response was not valid JSON.") from exc

    if not isinstance(payload, dict):
        raise LLMError(f"{provider} response root must be a JSON object.")
    return payload
