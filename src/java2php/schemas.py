"""Pydantic schemas for run configuration and the completion wire format."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from java2php.types import ChatRole

SOURCE_PLACEHOLDER = "{source}"

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_SYSTEM_PROMPT = (
    "You translate Java source files into equivalent PHP source files. "
    "Answer with the PHP code only, starting with <?php, without explanations "
    "and without Markdown code fences."
)
DEFAULT_PROMPT_TEMPLATE = "#Java to PHP:\nJava:\n{source}\n\nPHP:"


class RunConfig(BaseModel):
    """Validated, read-only input of a conversion run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_root: Path
    destination_root: Path
    credential: SecretStr

    @field_validator("credential")
    @classmethod
    def _validate_credential(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("API key cannot be empty.")
        return value


class TranslatorSettings(BaseModel):
    """Endpoint, model and prompt configuration for the translator adapter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = DEFAULT_BASE_URL
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)
    timeout: float = Field(default=120.0, gt=0.0)

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL.")
        return cleaned

    @field_validator("prompt_template")
    @classmethod
    def _validate_prompt_template(cls, value: str) -> str:
        if SOURCE_PLACEHOLDER not in value:
            raise ValueError(f"prompt_template must contain '{SOURCE_PLACEHOLDER}'.")
        return value

    def render_prompt(self, source: str) -> str:
        """Embed raw source text into the user prompt."""
        # Plain replacement: Java braces must not be read as format fields.
        return self.prompt_template.replace(SOURCE_PLACEHOLDER, source)


class ChatMessage(BaseModel):
    """One chat message in a completion request."""

    model_config = ConfigDict(extra="forbid")

    role: ChatRole
    content: str


class ChatCompletionRequest(BaseModel):
    """Request body for the chat completions endpoint."""

    model_config = ConfigDict(extra="forbid")

    model: str
    messages: list[ChatMessage]
    temperature: float = 0.0
    max_tokens: int | None = None


class ChoiceMessage(BaseModel):
    """Message carried by a returned candidate."""

    model_config = ConfigDict(extra="ignore")

    role: str | None = None
    content: str | None = None


class CompletionChoice(BaseModel):
    """One candidate completion."""

    model_config = ConfigDict(extra="ignore")

    index: int = 0
    message: ChoiceMessage = Field(default_factory=ChoiceMessage)
    finish_reason: str | None = None


class RemoteError(BaseModel):
    """Application-level error object reported by the endpoint."""

    model_config = ConfigDict(extra="ignore")

    message: str = "unknown error"
    type: str | None = None
    code: str | int | None = None


class ChatCompletionResponse(BaseModel):
    """Response body: either candidates or an error object."""

    model_config = ConfigDict(extra="ignore")

    choices: list[CompletionChoice] | None = None
    error: RemoteError | None = None
