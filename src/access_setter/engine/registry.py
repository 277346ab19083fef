"""
Rule registry holding the validated access transforms of every entity.

The registry only ever grows: transforms are appended or merged, merged
transforms only escalate their fail policy and gain sources. Loading
namespace A then B therefore yields the same rules as loading B then A,
and concurrent readers never observe a rule disappearing.

Thread safety:
- A registry-level lock guards creation of per-entity rule sets
- Each EntityRuleSet has its own lock for list mutation
- Each AccessTransform guards its policy/sources with its own lock
- Reads of the rule lists take snapshots and need no lock

Example:
    registry = RuleRegistry(Scope.RUNTIME)
    registry.load("mymod", text)

    if registry.is_target("com/example/Foo"):
        engine.accept(class_node)
"""

import logging
import threading
from collections.abc import Iterator

from .diagnostics import DiagnosticCode, DiagnosticLog, Severity, report
from .parser import STANDARD_DIALECTS, Dialect, ParsedLine, TransformParser
from .transform import AccessTransform, FailPolicy, Scope

logger = logging.getLogger(__name__)


def _add_transform(transforms: list[AccessTransform], transform: AccessTransform) -> None:
    """Merge ``transform`` into an existing equal transform or append it."""
    for existing in transforms:
        if existing == transform:
            for source in transform.sources:
                existing.merge(transform.policy, source)
            return
    transforms.append(transform)


class EntityRuleSet:
    """
    Transforms registered for one class.

    Attributes:
        name: Internal name of the class (e.g. ``com/example/Outer$Inner``)
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._self_transforms: list[AccessTransform] = []
        self._member_transforms: dict[tuple[str, str], list[AccessTransform]] = {}

    @property
    def self_transforms(self) -> list[AccessTransform]:
        """Transforms applying to the class's own flags, in insertion order."""
        with self._lock:
            return list(self._self_transforms)

    def member_transforms(self, name: str, desc: str) -> list[AccessTransform]:
        """Transforms for the member ``name`` + ``desc``, in insertion order."""
        with self._lock:
            return list(self._member_transforms.get((name, desc), ()))

    def members(self) -> list[tuple[str, str]]:
        """Keys of all members that have transforms."""
        with self._lock:
            return list(self._member_transforms)

    def add(self, transform: AccessTransform, member: tuple[str, str] | None = None) -> None:
        """Register ``transform`` for the class itself or for ``member``."""
        with self._lock:
            if member is None:
                _add_transform(self._self_transforms, transform)
            else:
                _add_transform(self._member_transforms.setdefault(member, []), transform)

    def snapshot(self) -> dict[str, object]:
        """Comparable view of the rule set (identity, policy and sources per rule)."""

        def view(transforms: list[AccessTransform]) -> set[tuple[object, ...]]:
            return {(*t.identity, t.policy, frozenset(t.sources)) for t in transforms}

        with self._lock:
            return {
                "self": view(self._self_transforms),
                "members": {key: view(value) for key, value in self._member_transforms.items()},
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._self_transforms) + sum(
                len(transforms) for transforms in self._member_transforms.values()
            )

    def __repr__(self) -> str:
        return f"EntityRuleSet(name={self.name!r}, transforms={len(self)})"


class RuleRegistry:
    """
    Per-entity registry of access transforms for one active scope.

    Attributes:
        active_scope: BUILD or RUNTIME; lines of other scopes (except ALL) are discarded
        force_silent: Treat every transform as SOFT, regardless of its prefix
    """

    def __init__(
        self,
        active_scope: Scope,
        force_silent: bool = False,
        dialects: dict[str, Dialect] | None = None,
        extra_versions: tuple[str, ...] = (),
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        """
        Initialize an empty registry.

        Raises:
            ValueError: If ``active_scope`` is not BUILD or RUNTIME
        """
        if active_scope not in (Scope.BUILD, Scope.RUNTIME):
            raise ValueError(f"Active scope may not be '{active_scope.value}'.")

        self._active_scope = active_scope
        self._force_silent = force_silent
        self._dialects = STANDARD_DIALECTS if dialects is None else dialects
        self._extra_versions = extra_versions
        self.diagnostics = diagnostics

        self._lock = threading.Lock()
        self._entities: dict[str, EntityRuleSet] = {}

    @property
    def active_scope(self) -> Scope:
        return self._active_scope

    @property
    def force_silent(self) -> bool:
        return self._force_silent

    def is_active(self, scope: Scope) -> bool:
        """Check whether transforms declared with ``scope`` belong in this registry."""
        return scope == Scope.ALL or scope == self._active_scope

    def load(self, namespace: str, text: str, reversed: bool = False) -> int:
        """
        Parse a RAS document and register its transforms under ``namespace``.

        The whole document is validated before anything is registered, so a
        malformed line leaves the registry untouched.

        Args:
            namespace: Label identifying the document in diagnostics
            text: Document contents
            reversed: Register the inverse of every transform

        Returns:
            Number of transforms registered (after scope filtering)

        Raises:
            ParseError: If the document is malformed
        """
        parser = TransformParser(
            namespace,
            dialects=self._dialects,
            extra_versions=self._extra_versions,
            diagnostics=self.diagnostics,
        )
        parsed_lines = list(parser.parse(text, reversed))

        accepted = [parsed for parsed in parsed_lines if self.is_active(parsed.scope)]
        for parsed in accepted:
            self._register(namespace, parsed)

        report(
            logger,
            self.diagnostics,
            Severity.INFO,
            DiagnosticCode.NAMESPACE_LOADED,
            f"Loaded access setter namespace \"{namespace}\": {len(accepted)} transforms active, "
            f"{len(parsed_lines) - len(accepted)} outside of scope {self._active_scope.value}"
            + (" (reversed)" if reversed else ""),
            namespace=namespace,
        )
        return len(accepted)

    def _register(self, namespace: str, parsed: ParsedLine) -> None:
        policy = FailPolicy.SOFT if self._force_silent else parsed.policy
        transform = parsed.to_transform(namespace, policy)

        with self._lock:
            rule_set = self._entities.get(parsed.class_name)
            if rule_set is None:
                rule_set = EntityRuleSet(parsed.class_name)
                self._entities[parsed.class_name] = rule_set

        rule_set.add(transform, parsed.member_key)

    def is_target(self, name: str) -> bool:
        """Check whether the class ``name`` is subject to at least one transform."""
        return name in self._entities

    def get(self, name: str) -> EntityRuleSet | None:
        """Get the rule set of class ``name``, or None if it has no transforms."""
        return self._entities.get(name)

    def entity_names(self) -> list[str]:
        """Sorted names of all classes with transforms."""
        with self._lock:
            return sorted(self._entities)

    def snapshot(self) -> dict[str, dict[str, object]]:
        """Order-independent view of the registry contents."""
        with self._lock:
            entities = dict(self._entities)
        return {name: rule_set.snapshot() for name, rule_set in entities.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[EntityRuleSet]:
        with self._lock:
            return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return (
            f"RuleRegistry(active_scope={self._active_scope.value!r}, "
            f"force_silent={self._force_silent}, entities={len(self)})"
        )


__all__ = ["EntityRuleSet", "RuleRegistry"]
