"""Conversation session state."""

from .session import Session, InputMode, TERMINATION_KEYWORD, contains_termination_keyword

__all__ = ["Session", "InputMode", "TERMINATION_KEYWORD", "contains_termination_keyword"]
