"""
AccessSetterContext: one object bundling registry, application and rewriting.

Example:
    context = AccessSetterContext(Scope.RUNTIME)
    context.load("mymod", text)

    for node in classes:
        if context.is_target(node.name):
            context.apply(node)

    # or, from configuration (file + environment)
    context = AccessSetterContext.from_config()
"""

from pathlib import Path

from .application import ApplicationEngine
from .config import AccessSetterConfig, AccessSetterConfigLoader
from .diagnostics import DiagnosticLog
from .entity import ClassRecord
from .load_result import LoadResult
from .loader import discover_access_setters, load_access_setter_file
from .parser import Dialect
from .registry import RuleRegistry
from .rewrite import NameResolver, RewriteEmitter
from .transform import Scope


class AccessSetterContext:
    """
    Facade over RuleRegistry, ApplicationEngine and RewriteEmitter.

    Attributes:
        registry: Registry holding the loaded transforms
        engine: Engine applying them to class records
        diagnostics: Structured diagnostic sink shared by all components
    """

    def __init__(
        self,
        active_scope: Scope,
        force_silent: bool = False,
        dialects: dict[str, Dialect] | None = None,
        extra_versions: tuple[str, ...] = (),
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self._dialects = dialects
        self._extra_versions = extra_versions
        self.registry = RuleRegistry(
            active_scope,
            force_silent,
            dialects=dialects,
            extra_versions=extra_versions,
            diagnostics=self.diagnostics,
        )
        self.engine = ApplicationEngine(self.registry, self.diagnostics)

    @classmethod
    def from_config(
        cls,
        config: AccessSetterConfig | None = None,
        config_path: str | Path | None = None,
    ) -> "AccessSetterContext":
        """Create a context from a config object or the configured config file."""
        if config is None:
            config = AccessSetterConfigLoader(config_path).load_config()
        return cls(
            config.active_scope,
            config.force_silent,
            dialects=config.build_dialects(),
            extra_versions=tuple(config.extra_versions),
        )

    def load(self, namespace: str, text: str, reversed: bool = False) -> int:
        """Register the transforms of ``text``. See RuleRegistry.load."""
        return self.registry.load(namespace, text, reversed)

    def load_file(
        self, file_path: str | Path, namespace: str | None = None, reversed: bool = False
    ) -> LoadResult[int]:
        return load_access_setter_file(self.registry, file_path, namespace, reversed)

    def load_directory(self, directory: str | Path, reversed: bool = False) -> LoadResult[list[str]]:
        return discover_access_setters(self.registry, directory, reversed)

    def is_target(self, name: str) -> bool:
        return self.registry.is_target(name)

    def apply(self, entity: ClassRecord) -> None:
        """Apply all transforms to ``entity``. See ApplicationEngine.accept."""
        self.engine.accept(entity)

    def rewrite(self, text: str, resolver: NameResolver, namespace: str = "<string>") -> str:
        """Rewrite ``text`` with the dialects known to this context."""
        emitter = RewriteEmitter(
            resolver,
            namespace,
            dialects=self._dialects,
            extra_versions=self._extra_versions,
            diagnostics=self.diagnostics,
        )
        return emitter.rewrite(text)


__all__ = ["AccessSetterContext"]
