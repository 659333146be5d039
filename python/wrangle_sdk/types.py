"""
Location: python/wrangle_sdk/types.py

Summary:
    Pydantic models for the wrangle-sdk. Defines the client options, the
    chat completion request and response shapes, the streamed
    ChatCompletionChunk record, and the usage/cost/key resource payloads.

Usage:
    These models are imported and used by client.py, stream.py and
    transport.py for type-safe data handling. Wire field names that are
    camelCase on the gateway are mapped to snake_case via aliases.

Example:
    from wrangle_sdk.types import ChatCompletionChunk

    chunk = ChatCompletionChunk.model_validate_json(payload)
    for choice in chunk.choices:
        print(choice.delta.content or "", end="")
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator


DEFAULT_BASE_URL = "https://gateway.wrangleai.com/v1"

Role = Literal["system", "user", "assistant", "tool"]
FinishReason = Literal["stop", "length", "tool_calls", "content_filter"]


class ClientOptions(BaseModel):
    """
    Configuration for WrangleClient.

    Attributes:
        api_key: Wrangle AI API key, sent as a bearer token
        base_url: Gateway base URL (trailing slash removed)
        timeout: Request timeout in seconds
    """
    api_key: str = Field(alias="apiKey")
    base_url: str = Field(DEFAULT_BASE_URL, alias="baseURL")
    timeout: float = Field(60.0, gt=0)

    model_config = {"populate_by_name": True}

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        if not value:
            raise ValueError("The WrangleAI client requires an api_key argument")
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# --- Chat completion request ---

class ChatCompletionMessageParam(BaseModel):
    """A single message in the conversation sent to the model."""
    role: Role
    content: str
    name: Optional[str] = None


class FunctionDefinition(BaseModel):
    name: str
    description: Optional[str] = None
    parameters: Optional[dict] = None


class ChatCompletionFunctionTool(BaseModel):
    type: Literal["function"] = "function"
    function: FunctionDefinition


class WebSearchOptions(BaseModel):
    external_web_access: bool


class ChatCompletionWebSearchTool(BaseModel):
    """Gateway-specific web search tool."""
    type: Literal["web_search"] = "web_search"
    web_search: WebSearchOptions


ChatCompletionTool = Union[ChatCompletionFunctionTool, ChatCompletionWebSearchTool]


class ResponseFormat(BaseModel):
    type: Literal["text", "json_object"]


class NamedToolChoice(BaseModel):
    type: Literal["function"] = "function"
    function: dict[str, str]


class ChatCompletionCreateParams(BaseModel):
    """
    Request body for POST /chat/completions.

    The model name is free-form: "auto" lets the gateway route the
    request, any other string names a concrete model.

    Attributes:
        messages: Conversation so far
        model: Model name or "auto"
        stream: When true the gateway answers with a server-sent event stream
        tools: Function or web_search tools the model may call
        tool_choice: "none", "auto", "required" or a named function
    """
    messages: list[ChatCompletionMessageParam]
    model: str
    frequency_penalty: Optional[float] = None
    logit_bias: Optional[dict[str, float]] = None
    logprobs: Optional[bool] = None
    top_logprobs: Optional[int] = None
    max_tokens: Optional[int] = None
    n: Optional[int] = None
    presence_penalty: Optional[float] = None
    response_format: Optional[ResponseFormat] = None
    seed: Optional[int] = None
    stop: Optional[Union[str, list[str]]] = None
    stream: Optional[bool] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    user: Optional[str] = None
    tools: Optional[list[ChatCompletionTool]] = None
    tool_choice: Optional[Union[Literal["none", "auto", "required"], NamedToolChoice]] = None


# --- Chat completion response ---

class FunctionCall(BaseModel):
    name: str
    arguments: str


class ChatCompletionMessageToolCall(BaseModel):
    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class ChatCompletionMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: Optional[str] = None
    tool_calls: Optional[list[ChatCompletionMessageToolCall]] = None


class Choice(BaseModel):
    index: int
    message: ChatCompletionMessage
    finish_reason: Optional[str] = None


class GatewayAnnotation(BaseModel):
    """Citation attached to web search output text."""
    type: str
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    title: Optional[str] = None
    url: Optional[str] = None


class GatewayContent(BaseModel):
    type: Literal["output_text"] = "output_text"
    text: str
    annotations: Optional[list[GatewayAnnotation]] = None


class GatewaySearchAction(BaseModel):
    type: Literal["search"] = "search"
    query: str


class GatewayOutputItem(BaseModel):
    """One item of Responses-API output (message or web_search_call)."""
    id: str
    type: str
    status: Optional[str] = None
    role: Optional[str] = None
    content: Optional[list[GatewayContent]] = None
    action: Optional[GatewaySearchAction] = None


class CompletionUsage(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatCompletion(BaseModel):
    """
    Non-streaming chat completion response.

    Grounded (web search) requests come back in the Responses-API shape,
    with output items instead of choices, so both are optional.
    """
    id: str
    object: Literal["chat.completion", "response"]
    created: int
    model: str
    choices: Optional[list[Choice]] = None
    output: Optional[list[GatewayOutputItem]] = None
    usage: Optional[CompletionUsage] = None


# --- Streaming chunk (one record per `data:` event) ---

class FunctionCallDelta(BaseModel):
    model_config = {"frozen": True}

    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCallDelta(BaseModel):
    """Fragment of a tool call; fragments sharing an index belong together."""
    model_config = {"frozen": True}

    index: int
    id: Optional[str] = None
    type: Optional[Literal["function"]] = None
    function: Optional[FunctionCallDelta] = None


class ChoiceDelta(BaseModel):
    model_config = {"frozen": True}

    role: Optional[Role] = None
    content: Optional[str] = None
    tool_calls: Optional[list[ToolCallDelta]] = None


class ChunkChoice(BaseModel):
    model_config = {"frozen": True}

    index: int
    delta: ChoiceDelta
    finish_reason: Optional[FinishReason] = None


class ChatCompletionChunk(BaseModel):
    """
    A single incremental update from a streaming chat completion.

    Attributes:
        id: Completion identifier, shared by all chunks of one stream
        object: Always "chat.completion.chunk"
        created: Unix timestamp (seconds)
        model: Model that produced the chunk
        choices: Per-choice deltas, ordered by index
    """
    model_config = {"frozen": True}

    id: str
    object: Literal["chat.completion.chunk"] = "chat.completion.chunk"
    created: int
    model: str
    choices: list[ChunkChoice]


# --- Gateway resources ---

class ModelUsage(BaseModel):
    model: str
    requests: int
    input_tokens: int
    output_tokens: int
    total_tokens: int
    total_cost: str


class UsageResponse(BaseModel):
    """
    Aggregated usage for the API key.

    Costs are strings to prevent precision loss.
    """
    total_requests: int
    total_input_tokens: int
    total_output_tokens: int
    total_tokens: int
    total_cost: str
    optimized: bool
    usage_by_model: list[ModelUsage] = Field(default_factory=list)


class CostResponse(BaseModel):
    total_cost: float


class KeyVerifyResponse(BaseModel):
    """
    Result of verifying the API key.

    Attributes:
        valid: Whether the key is accepted by the gateway
        message: Human-readable status
        api_key_id: Identifier of the key
        key_status: Gateway key status (e.g. "active")
        expiry: ISO timestamp when the key expires, if any
    """
    valid: bool
    message: str
    api_key_id: str = Field(alias="apiKeyId")
    key_status: str = Field(alias="keyStatus")
    expiry: Optional[str] = None

    model_config = {"populate_by_name": True}
