"""Reversible access setter engine.

Key Components:

- AccessFlagCodec (access_flags): modifier tokens <-> JVM access flag bits
- TransformParser: RAS header and line grammar, dialects
- RuleRegistry: per-class transforms, scope filtering, escalate-only merging
- ApplicationEngine: applies transforms to class records by fail policy
- RewriteEmitter: re-serializes RAS documents through a NameResolver
- AccessSetterContext: facade bundling the above
- AccessSetterConfig: pydantic configuration (YAML file + environment)
- DiagnosticLog: structured diagnostic events
"""

from .access_flags import (
    VISIBILITY_MASK,
    EntityKind,
    Modifier,
    is_visibility,
    kind_of,
    parse_token,
    stringify,
)
from .application import ApplicationEngine, apply_access, apply_batch_access
from .config import AccessSetterConfig, AccessSetterConfigLoader, DialectConfig
from .context import AccessSetterContext
from .diagnostics import DiagnosticCode, DiagnosticEvent, DiagnosticLog, Severity
from .entity import ClassNode, ClassRecord, FieldNode, InnerClassNode, MethodNode
from .exceptions import (
    AccessSetterError,
    IncompatibleAccessesError,
    InvalidPrefixError,
    KindMismatchError,
    MalformedHeaderError,
    MalformedLineError,
    ModuleNotSupportedError,
    OriginMismatchError,
    ParseError,
    TransformFailure,
    UnknownModifierError,
    UnknownScopeError,
    UnsupportedDialectError,
    UnsupportedVersionError,
)
from .load_result import LoadResult, LoadStatus
from .loader import discover_access_setters, load_access_setter_file
from .parser import Dialect, ParsedLine, TransformParser
from .registry import EntityRuleSet, RuleRegistry
from .rewrite import (
    IdentityResolver,
    MappingResolver,
    NameResolver,
    RewriteEmitter,
    rewrite,
    rewrite_file,
)
from .transform import AccessTransform, FailPolicy, Scope

__all__ = [
    # Access flags
    "EntityKind",
    "Modifier",
    "VISIBILITY_MASK",
    "is_visibility",
    "kind_of",
    "parse_token",
    "stringify",
    # Transforms
    "AccessTransform",
    "FailPolicy",
    "Scope",
    # Parsing
    "Dialect",
    "ParsedLine",
    "TransformParser",
    # Registry and application
    "ApplicationEngine",
    "EntityRuleSet",
    "RuleRegistry",
    "apply_access",
    "apply_batch_access",
    # Entities
    "ClassNode",
    "ClassRecord",
    "FieldNode",
    "InnerClassNode",
    "MethodNode",
    # Rewriting
    "IdentityResolver",
    "MappingResolver",
    "NameResolver",
    "RewriteEmitter",
    "rewrite",
    "rewrite_file",
    # Facade, configuration, loading
    "AccessSetterConfig",
    "AccessSetterConfigLoader",
    "AccessSetterContext",
    "DialectConfig",
    "LoadResult",
    "LoadStatus",
    "discover_access_setters",
    "load_access_setter_file",
    # Diagnostics
    "DiagnosticCode",
    "DiagnosticEvent",
    "DiagnosticLog",
    "Severity",
    # Errors
    "AccessSetterError",
    "IncompatibleAccessesError",
    "InvalidPrefixError",
    "KindMismatchError",
    "MalformedHeaderError",
    "MalformedLineError",
    "ModuleNotSupportedError",
    "OriginMismatchError",
    "ParseError",
    "TransformFailure",
    "UnknownModifierError",
    "UnknownScopeError",
    "UnsupportedDialectError",
    "UnsupportedVersionError",
]
