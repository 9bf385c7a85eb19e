"""Shared type aliases for the core and domain layers."""
from typing import Any, Dict, Literal

AttributeSet = Dict[str, str]
StatePayload = Dict[str, Any]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

__all__ = ["AttributeSet", "LogLevel", "StatePayload"]
