"""
Location: python/wrangle_sdk/client.py

Summary:
    Main WrangleClient class for the wrangle-sdk. Provides chat completions
    (standard and streaming) plus the gateway's usage, cost and key
    verification routes.

Usage:
    The primary entry point for using the SDK. Create a WrangleClient with
    an API key, then call the resource namespaces.

Example:
    from wrangle_sdk import WrangleClient

    async with WrangleClient(api_key="sk-...") as client:
        completion = await client.chat.completions.create(
            model="auto",
            messages=[{"role": "user", "content": "Hello"}],
        )

        stream = await client.chat.completions.create(
            model="auto",
            messages=[{"role": "user", "content": "Hello"}],
            stream=True,
        )
        # Always wrap the stream in `async with`: breaking out of a bare
        # `async for` leaves the HTTP response open.
        async with stream:
            async for chunk in stream:
                print(chunk.choices[0].delta.content or "", end="")
"""

import json as json_lib
import logging
from typing import Any, Optional, Union

import httpx

from .types import (
    ClientOptions,
    ChatCompletionCreateParams,
    ChatCompletion,
    UsageResponse,
    CostResponse,
    KeyVerifyResponse,
)
from .transport import WRANGLE_HEADERS, build_headers, raise_for_api_error
from .stream import Stream, HttpxByteSource, ParseErrorHandler
from .errors import APIConnectionError, InvalidResponseError

logger = logging.getLogger(__name__)


class WrangleClient:
    """
    Async client for the Wrangle AI gateway.

    Attributes:
        options: Validated client options (api key, base URL, timeout)
        chat: Chat namespace, exposing chat.completions.create()
        usage: Usage namespace (retrieve, retrieve_by_model)
        cost: Cost namespace (retrieve)
        keys: API key namespace (verify)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_parse_error: Optional[ParseErrorHandler] = None,
    ):
        """
        Initialize the WrangleClient.

        Args:
            api_key: Wrangle AI API key (required)
            base_url: Gateway base URL (defaults to https://gateway.wrangleai.com/v1)
            timeout: Request timeout in seconds (default 60)
            headers: Optional default headers for all requests
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
            on_parse_error: Optional handler for stream payloads that fail to
                parse (logs a warning by default)

        Raises:
            ValueError: If api_key is missing or an option is invalid
        """
        if not api_key:
            raise ValueError("The WrangleAI client requires an api_key argument")

        option_values: dict[str, Any] = {"api_key": api_key, "timeout": timeout}
        if base_url:
            option_values["base_url"] = base_url
        self.options = ClientOptions(**option_values)
        self.on_parse_error = on_parse_error

        self._http = httpx.AsyncClient(
            base_url=self.options.base_url,
            headers=build_headers(self.options.api_key, headers),
            timeout=self.options.timeout,
            transport=transport,
        )

        self.chat = Chat(self)
        self.usage = Usage(self)
        self.cost = Cost(self)
        self.keys = Keys(self)

    @property
    def base_url(self) -> str:
        return self.options.base_url

    @property
    def timeout(self) -> float:
        return self.options.timeout

    async def close(self) -> None:
        """
        Close the HTTP client and release resources.

        Open streams keep their own response and must be closed separately.
        """
        await self._http.aclose()

    async def __aenter__(self) -> "WrangleClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager and close resources."""
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Send a request and return the parsed JSON body.

        Raises:
            APIError: If the gateway answers with a non-2xx status
            APIConnectionError: If no response was received
            InvalidResponseError: If a 2xx body is not valid JSON
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self._http.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TransportError as e:
            raise APIConnectionError(f"Request to {path} failed: {e}") from e

        raise_for_api_error(response)
        try:
            return response.json()
        except (json_lib.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidResponseError(f"Response from {path} is not valid JSON: {e}") from e

    async def _stream(self, path: str, *, json: dict) -> Stream:
        """
        Send a streaming POST and hand the open response to a Stream.

        The status is checked before any decoding starts; an error body is
        read in full so its message can be reported.
        """
        logger.debug("POST %s (stream)", path)
        request = self._http.build_request("POST", path, json=json)
        try:
            response = await self._http.send(request, stream=True)
        except httpx.TransportError as e:
            raise APIConnectionError(f"Request to {path} failed: {e}") from e

        if not response.is_success:
            try:
                await response.aread()
            except httpx.TransportError as e:
                raise APIConnectionError(f"Reading error body from {path} failed: {e}") from e
            finally:
                await response.aclose()
            raise_for_api_error(response)

        return Stream(HttpxByteSource(response), on_parse_error=self.on_parse_error)


def _date_params(start_date: Optional[str], end_date: Optional[str]) -> dict[str, str]:
    params = {}
    if start_date:
        params["startDate"] = start_date
    if end_date:
        params["endDate"] = end_date
    return params


class Completions:
    """Chat completions resource."""

    def __init__(self, client: WrangleClient):
        self._client = client

    async def create(
        self,
        *,
        messages: list,
        model: str,
        stream: bool = False,
        **options: Any,
    ) -> Union[ChatCompletion, Stream]:
        """
        Create a chat completion.

        Args:
            messages: Conversation messages (dicts or ChatCompletionMessageParam)
            model: Model name, or "auto" for gateway routing
            stream: Return a Stream of ChatCompletionChunk instead of
                a single ChatCompletion
            **options: Any other ChatCompletionCreateParams field
                (temperature, tools, tool_choice, ...)

        Returns:
            ChatCompletion, or a Stream when stream=True

        A returned Stream holds an open HTTP response. Consume it inside
        `async with stream:` (or call `await stream.aclose()`); breaking out
        of a plain `async for` does not release the connection.

        Raises:
            pydantic.ValidationError: If the parameters are invalid
            APIError: If the gateway rejects the request
            APIConnectionError: If the gateway could not be reached
        """
        params = ChatCompletionCreateParams(
            messages=messages,
            model=model,
            stream=stream or None,
            **options,
        )
        body = params.model_dump(exclude_none=True)

        if stream:
            return await self._client._stream("/chat/completions", json=body)

        data = await self._client._request("POST", "/chat/completions", json=body)
        return ChatCompletion.model_validate(data)


class Chat:
    """Chat namespace."""

    def __init__(self, client: WrangleClient):
        self.completions = Completions(client)


class Usage:
    """Usage reporting resource."""

    def __init__(self, client: WrangleClient):
        self._client = client

    async def retrieve(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> UsageResponse:
        """
        Get aggregated usage for the API key.

        Args:
            start_date: Optional start of the window (YYYY-MM-DD)
            end_date: Optional end of the window (YYYY-MM-DD)

        Returns:
            UsageResponse with totals and a per-model breakdown
        """
        data = await self._client._request(
            "GET", "/usage", params=_date_params(start_date, end_date)
        )
        return UsageResponse.model_validate(data)

    async def retrieve_by_model(
        self,
        model: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> UsageResponse:
        """
        Get usage restricted to a single model.

        Args:
            model: Model name to filter on
            start_date: Optional start of the window (YYYY-MM-DD)
            end_date: Optional end of the window (YYYY-MM-DD)

        Returns:
            UsageResponse for that model
        """
        params = {**_date_params(start_date, end_date), "model": model}
        data = await self._client._request("GET", "/usage/model", params=params)
        return UsageResponse.model_validate(data)


class Cost:
    """Cost reporting resource."""

    def __init__(self, client: WrangleClient):
        self._client = client

    async def retrieve(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> CostResponse:
        """Get the total cost for the API key over an optional window."""
        data = await self._client._request(
            "GET", "/cost", params=_date_params(start_date, end_date)
        )
        return CostResponse.model_validate(data)


class Keys:
    """API key resource."""

    def __init__(self, client: WrangleClient):
        self._client = client

    async def verify(self) -> KeyVerifyResponse:
        """
        Check that the configured API key is valid.

        The gateway expects the key in X-API-Key for this route, in
        addition to the bearer token.
        """
        data = await self._client._request(
            "GET",
            "/keys/verify",
            headers={WRANGLE_HEADERS["API_KEY"]: self._client.options.api_key},
        )
        return KeyVerifyResponse.model_validate(data)


__all__ = ["WrangleClient"]
