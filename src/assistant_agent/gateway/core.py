"""Model gateway: one call contract over the hosted and local-compatible dialects."""

from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence, cast

from openai import AsyncOpenAI, OpenAIError

from ..agent_core.base import ContentDelta, GatewayEvent, ToolCallEvent
from ..agent_core.exceptions import GatewayError, MissingCredentials
from ..agent_core.logger import get_logger
from ..agent_core.messages import BaseMessage, SystemMessage
from .adapter import OpenAIResponseAdapter, ToolCallAccumulator
from .dialects import PROFILES, ApiType, DialectProfile

logger = get_logger(__name__)

DEFAULT_MODEL = "llama3.2"


class ModelGateway:
    """
    Sends the transcript to an OpenAI-compatible backend and yields the answer as events.

    Both dialects talk through ``AsyncOpenAI``; what differs between them (tool-name
    restrictions, extra system instructions, credentials) is read from the dialect's
    ``DialectProfile``. A transport failure is raised once as ``GatewayError``; there
    is no automatic retry.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        api_type: ApiType | str = ApiType.LOCAL_COMPATIBLE,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        stream: bool = True,
    ):
        """
        Initializes the gateway.

        Args:
            client: The initialized AsyncOpenAI client.
            model_name: The model identifier (e.g. 'gpt-4o-mini', 'llama3.2').
            api_type: The backend dialect.
            temperature: Optional sampling temperature; the backend default applies when None.
            max_tokens: Optional cap on generated tokens.
            stream: Request incremental output. When False the whole completion is awaited.
        """
        self.client = client
        self.model = model_name
        self.api_type = ApiType.parse(api_type)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.stream = stream

    @property
    def dialect(self) -> DialectProfile:
        return PROFILES[self.api_type]

    def accepts_tool_name(self, name: str) -> bool:
        return self.dialect.accepts_tool_name(name)

    async def complete(
        self, messages: Sequence[BaseMessage], tools: Optional[List[Dict[str, Any]]] = None
    ) -> AsyncIterator[GatewayEvent]:
        """
        Run one completion.

        Args:
            messages: The transcript, system message first.
            tools: OpenAI function-tool declarations. Without them this is a plain chat completion.

        Yields:
            ``ContentDelta`` events while text arrives, then one ``ToolCallEvent`` per requested call.

        Raises:
            GatewayError: If the backend call fails.
        """
        tool_names = [t["function"]["name"] for t in tools or []]
        payload = self._convert_history(messages, self.dialect.system_instructions(self.model, tool_names))
        request: Dict[str, Any] = {"model": self.model, "messages": cast(Iterable[Any], payload)}
        if tools:
            request["tools"] = tools
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if self.max_tokens is not None:
            request["max_tokens"] = self.max_tokens

        logger.debug(f"Sending {len(payload)} message(s) to '{self.model}' ({self.api_type.value}).")
        try:
            if self.stream:
                async for event in self._complete_streaming(request):
                    yield event
            else:
                async for event in self._complete_once(request):
                    yield event
        except OpenAIError as exc:
            logger.error(f"Model call failed: {exc}")
            raise GatewayError(str(exc)) from exc

    async def _complete_streaming(self, request: Dict[str, Any]) -> AsyncIterator[GatewayEvent]:
        stream = await self.client.chat.completions.create(**request, stream=True)
        accumulator = ToolCallAccumulator()
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            if delta.content:
                yield ContentDelta(delta.content)
            if delta.tool_calls:
                accumulator.add(delta.tool_calls)

        for call in accumulator.requests():
            yield ToolCallEvent(call)

    async def _complete_once(self, request: Dict[str, Any]) -> AsyncIterator[GatewayEvent]:
        response = await self.client.chat.completions.create(**request)
        content = OpenAIResponseAdapter.get_content(response)
        if content:
            yield ContentDelta(content)
        for call in OpenAIResponseAdapter.get_tool_calls(response):
            yield ToolCallEvent(call)

    @staticmethod
    def _convert_history(history: Sequence[BaseMessage], instructions: Sequence[str] = ()) -> List[Dict[str, Any]]:
        """
        Converts the transcript to OpenAI message dictionaries.

        Dialect instructions are placed right after the leading system message, so the
        transcript itself never changes.

        Args:
            history: Transcript messages.
            instructions: Extra system instructions for the active dialect.

        Returns:
            List of OpenAI message dictionaries.
        """
        converted = [msg.to_openai() for msg in history]
        extra = [SystemMessage(content=text).to_openai() for text in instructions]
        position = 1 if history and history[0].role == "system" else 0
        return converted[:position] + extra + converted[position:]


def configure(
    api_type: ApiType | str,
    credentials: Optional[str] = None,
    base_endpoint: Optional[str] = None,
    model_name: str = DEFAULT_MODEL,
    **options: Any,
) -> ModelGateway:
    """
    Builds a gateway for exactly one recognized dialect.

    Args:
        api_type: ``hosted`` or ``local-compatible`` (aliases ``openai`` and ``ollama``).
        credentials: API key. Required for the hosted dialect.
        base_endpoint: Base URL. Defaults to the local Ollama endpoint for the local dialect.
        model_name: Model identifier.
        **options: Forwarded to ``ModelGateway`` (temperature, max_tokens, stream).

    Raises:
        UnsupportedApiType: For an unknown dialect.
        MissingCredentials: When the dialect requires an API key and none is given.
    """
    dialect = PROFILES[ApiType.parse(api_type)]

    if dialect.requires_credentials and not credentials:
        raise MissingCredentials(f"The {dialect.api_type.value} API type requires an API key (OPENAI_API_KEY).")

    base_url = base_endpoint or dialect.default_base_url
    logger.info(f"Setting up {dialect.api_type.value} API client (base URL: {base_url or 'client default'}).")
    client = AsyncOpenAI(api_key=credentials or dialect.placeholder_api_key, base_url=base_url)

    return ModelGateway(client=client, model_name=model_name, api_type=dialect.api_type, **options)
