"""Chat-completion translator implementing the ``Translator`` port."""

from __future__ import annotations

import json
import logging
import re

import httpx
from pydantic import SecretStr, ValidationError

from java2php.errors import (
    EmptyResultError,
    HttpStatusError,
    MalformedResponseError,
    RemoteServiceError,
    TransportError,
)
from java2php.schemas import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    TranslatorSettings,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*```[\w+-]*[ \t]*\n(?P<body>.*?)\n?```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Return the body of a single Markdown code fence, or ``text`` unchanged."""
    match = _FENCE_RE.match(text)
    if match is None:
        return text
    return match.group("body") + "\n"


def build_client(
    api_key: SecretStr | str,
    settings: TranslatorSettings | None = None,
) -> httpx.AsyncClient:
    """Create the shared, bearer-authenticated HTTP client for a run.

    The caller owns the client and must close it (``async with`` or
    ``await client.aclose()``).
    """
    settings = settings or TranslatorSettings()
    token = api_key.get_secret_value() if isinstance(api_key, SecretStr) else api_key
    return httpx.AsyncClient(
        base_url=settings.base_url,
        headers={"Authorization": f"Bearer {token}"},
        timeout=httpx.Timeout(settings.timeout),
    )


class ChatCompletionTranslator:
    """Translate Java source through an OpenAI-compatible chat endpoint.

    One request per call, no retries. The HTTP client is shared with other
    translations and is not closed by this class.

    Parameters
    ----------
    client : httpx.AsyncClient
        Authenticated client whose ``base_url`` points at the API root.
    settings : TranslatorSettings | None, default=None
        Model and prompt configuration.
    """

    endpoint = "/chat/completions"

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: TranslatorSettings | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or TranslatorSettings()

    def build_request(self, content: str) -> ChatCompletionRequest:
        """Build the request body embedding ``content`` in the prompt."""
        return ChatCompletionRequest(
            model=self.settings.model,
            messages=[
                ChatMessage(role="system", content=self.settings.system_prompt),
                ChatMessage(role="user", content=self.settings.render_prompt(content)),
            ],
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
        )

    async def translate(self, content: str) -> str:
        """Translate one file's text.

        Raises
        ------
        TransportError
            If the request could not be sent or the response not received,
            decoded or followed.
        HttpStatusError
            If the endpoint answered with a non-2xx status and no error body.
        RemoteServiceError
            If the body carries an application-level error object.
        EmptyResultError
            If the endpoint answered with no candidate.
        MalformedResponseError
            If the body is neither a candidate list nor an error object.
        """
        payload = self.build_request(content).model_dump(exclude_none=True)
        try:
            response = await self.client.post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"request to {self.endpoint} failed: {str(exc) or type(exc).__name__}"
            ) from exc

        body = self._parse_body(response)
        if body is not None and body.error is not None:
            raise RemoteServiceError(body.error.message)
        if not response.is_success:
            raise HttpStatusError(
                f"endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if body is None or body.choices is None:
            raise MalformedResponseError("response has neither choices nor error")
        if not body.choices:
            raise EmptyResultError("no result")
        text = body.choices[0].message.content
        if not text:
            raise EmptyResultError("no result")
        logger.debug(
            "received %d candidate(s), finish_reason=%s",
            len(body.choices),
            body.choices[0].finish_reason,
        )
        return strip_code_fence(text)

    @staticmethod
    def _parse_body(response: httpx.Response) -> ChatCompletionResponse | None:
        try:
            raw = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            if response.is_success:
                raise MalformedResponseError("response body is not JSON") from None
            return None
        if not isinstance(raw, dict):
            if response.is_success:
                raise MalformedResponseError("response body is not a JSON object")
            return None
        try:
            return ChatCompletionResponse.model_validate(raw)
        except ValidationError as exc:
            if response.is_success:
                raise MalformedResponseError(f"unexpected response shape: {exc}") from exc
            return None
