"""
Location: python/wrangle_sdk/transport.py

Summary:
    Gateway wire details. Builds the authentication headers and translates
    non-2xx responses into APIError.

Usage:
    Used by client.py to configure the httpx client and to check every
    response, streaming or not, before its body is consumed.

Example:
    from wrangle_sdk.transport import build_headers, raise_for_api_error

    headers = build_headers("sk-...")
    raise_for_api_error(response)
"""

from typing import Optional
import json
import httpx

from .errors import APIError


# Gateway header names
WRANGLE_HEADERS = {
    "AUTHORIZATION": "Authorization",
    "CONTENT_TYPE": "Content-Type",
    "API_KEY": "X-API-Key",
}


def build_headers(api_key: str, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
    """
    Build the default headers sent with every gateway request.

    Args:
        api_key: The Wrangle AI API key
        extra: Optional caller headers, applied last

    Returns:
        New headers dict with bearer auth and JSON content type
    """
    headers = {
        WRANGLE_HEADERS["AUTHORIZATION"]: f"Bearer {api_key}",
        WRANGLE_HEADERS["CONTENT_TYPE"]: "application/json",
    }
    headers.update(extra or {})
    return headers


def extract_error_message(response: httpx.Response) -> str:
    """
    Pull a human-readable error message out of a failed response.

    The gateway reports errors either as {"error": {"message": ...}} or
    as {"error": "..."}. Anything else falls back to the raw body text and
    finally to the reason phrase.

    Args:
        response: A response whose body has been read

    Returns:
        Error message string
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])

    return response.text or response.reason_phrase


def raise_for_api_error(response: httpx.Response) -> None:
    """
    Raise APIError if the response is not successful.

    Args:
        response: The httpx response to check (body must be read)

    Raises:
        APIError: If the status code is not 2xx
    """
    if response.is_success:
        return
    raise APIError(response.status_code, extract_error_message(response))
