"""Shared type aliases for pipeline modules."""

from __future__ import annotations

from typing import Literal, TypeAlias

EntryKind: TypeAlias = Literal["file", "directory"]
RunMode: TypeAlias = Literal["single-file", "tree"]
ChatRole: TypeAlias = Literal["system", "user", "assistant"]
