"""Adapters implementing application ports."""

from __future__ import annotations

from java2php.adapters.translators import (
    ChatCompletionTranslator,
    build_client,
    strip_code_fence,
)

__all__ = ["ChatCompletionTranslator", "build_client", "strip_code_fence"]
