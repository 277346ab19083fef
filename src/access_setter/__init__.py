"""Reversible access setters: a reversible transform language for class access flags."""

from .engine import (
    AccessSetterContext,
    ApplicationEngine,
    FailPolicy,
    ParseError,
    RuleRegistry,
    Scope,
    TransformFailure,
    rewrite,
)

__version__ = "1.0.0"

__all__ = [
    "AccessSetterContext",
    "ApplicationEngine",
    "FailPolicy",
    "ParseError",
    "RuleRegistry",
    "Scope",
    "TransformFailure",
    "rewrite",
]
