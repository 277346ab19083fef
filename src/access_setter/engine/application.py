"""
Application of registered access transforms to entity records.

Transforms of one entity (the class itself, or one member) form a batch:

1. Every precondition is checked against the flags the entity had before
   the batch, in insertion order (so diagnostics follow the file order)
2. Removals of all successful transforms are applied
3. Additions of all successful transforms are applied, clearing the
   visibility bits first when a visibility modifier is added. A record
   holds a single visibility: when several transforms of one batch add
   different visibilities, the last one in insertion order (that is,
   from the namespace loaded last) wins

Checking against the pre-batch flags makes the result independent of the
insertion order (conflicting visibility additions aside), which keeps a
transform file and its reverse exact inverses even when visibility is
swapped (``private 0`` + ``0 public``).

Failure handling follows the fail policy of each transform: SOFT is
skipped silently, WARN is logged and skipped, HARD aborts the whole class
before any of its records is written.
"""

import logging
from collections.abc import Sequence

from .access_flags import VISIBILITY_MASK, EntityKind, is_visibility, stringify
from .diagnostics import DiagnosticCode, DiagnosticLog, Severity, report
from .entity import ClassRecord, MemberRecord
from .exceptions import OriginMismatchError, TransformFailure
from .registry import EntityRuleSet, RuleRegistry
from .transform import AccessTransform, FailPolicy

logger = logging.getLogger(__name__)


def apply_access(flags: int, transform: AccessTransform, kind: EntityKind | None = None) -> int:
    """
    Apply a single transform to ``flags``.

    - ``0 X``: no precondition, adds X (replacing the visibility if X is one)
    - ``X 0``: X must be present, removes it
    - ``X X``: X must be present, no change

    Args:
        flags: Current access flags
        transform: Transform to apply
        kind: Kind used to render flags in the error (defaults to the transform's)

    Returns:
        The new access flags

    Raises:
        OriginMismatchError: If the precondition does not hold
    """
    origin, target = transform.origin, transform.target

    if origin.is_negate:
        if target.is_negate:
            return flags
        if is_visibility(target):
            flags &= ~VISIBILITY_MASK
        return flags | target.bit

    if not flags & origin.bit:
        raise OriginMismatchError(origin, flags, stringify(flags, kind or transform.kind))

    if target.is_negate:
        return flags & ~origin.bit
    return flags


def apply_batch_access(
    flags: int,
    transforms: Sequence[AccessTransform],
    kind: EntityKind,
) -> tuple[int, list[tuple[AccessTransform, OriginMismatchError]]]:
    """
    Apply a batch of transforms to the flags of one record.

    Preconditions are checked against ``flags`` for every transform; the
    removals and additions of the transforms that hold are then combined.

    Returns:
        The new flags, and the transforms whose precondition failed (in
        insertion order) together with their mismatch
    """
    removed = 0
    added = 0
    failures: list[tuple[AccessTransform, OriginMismatchError]] = []
    for transform in transforms:
        try:
            apply_access(flags, transform, kind)
        except OriginMismatchError as e:
            failures.append((transform, e))
            continue

        if transform.origin.is_negate:
            if transform.target.is_negate:
                continue
            if is_visibility(transform.target):
                removed |= VISIBILITY_MASK
                added &= ~VISIBILITY_MASK
            added |= transform.target.bit
        elif transform.target.is_negate:
            removed |= transform.origin.bit

    return (flags & ~removed) | added, failures


class ApplicationEngine:
    """
    Applies the transforms of a RuleRegistry to class records.

    Example:
        engine = ApplicationEngine(registry)
        for node in classes:
            if registry.is_target(node.name):
                engine.accept(node)
    """

    def __init__(self, registry: RuleRegistry, diagnostics: DiagnosticLog | None = None) -> None:
        self.registry = registry
        self.diagnostics = diagnostics if diagnostics is not None else registry.diagnostics

    def apply_batch(
        self,
        flags: int,
        transforms: Sequence[AccessTransform],
        kind: EntityKind,
        target: str,
    ) -> int:
        """
        Apply a batch of transforms to the flags of one record.

        Args:
            flags: Flags before the batch
            transforms: Transforms in insertion order
            kind: Kind of the record (CLASS, METHOD or FIELD)
            target: Description of the record for diagnostics

        Returns:
            Flags after the batch

        Raises:
            TransformFailure: If a HARD transform's precondition does not hold
        """
        new_flags, failures = apply_batch_access(flags, transforms, kind)
        for transform, error in failures:
            self._handle_mismatch(transform, kind, target, error)
        return new_flags

    def _handle_mismatch(
        self,
        transform: AccessTransform,
        kind: EntityKind,
        target: str,
        error: OriginMismatchError,
    ) -> None:
        policy = transform.policy
        description = transform.describe(kind)
        sources = list(transform.sources)

        if policy == FailPolicy.HARD:
            report(
                logger,
                self.diagnostics,
                Severity.ERROR,
                DiagnosticCode.TRANSFORM_FAILURE,
                f"Access transform \"{description}\" from namespaces {sources} "
                f"failed for {target}: {error}",
                target=target,
                sources=sources,
            )
            raise TransformFailure(description, sources, target, error) from error

        if policy == FailPolicy.WARN:
            report(
                logger,
                self.diagnostics,
                Severity.WARNING,
                DiagnosticCode.ORIGIN_MISMATCH,
                f"Access transform \"{description}\" from namespaces {sources} "
                f"failed to apply for {target}: {error}",
                target=target,
                sources=sources,
            )
            return

        logger.debug(f"Skipping soft access transform \"{description}\" for {target}: {error}")

    def apply_to_entity(self, entity: ClassRecord, rule_set: EntityRuleSet) -> None:
        """
        Apply ``rule_set`` to a class and its methods and fields.

        Nothing is written back if a HARD transform fails.

        Raises:
            TransformFailure: If a HARD transform's precondition does not hold
        """
        staged: list[tuple[ClassRecord | MemberRecord, int]] = []

        self_transforms = rule_set.self_transforms
        if self_transforms:
            new_access = self.apply_batch(
                entity.access, self_transforms, EntityKind.CLASS, f"class \"{entity.name}\""
            )
            staged.append((entity, new_access))

        for method in entity.methods:
            transforms = rule_set.member_transforms(method.name, method.desc)
            if not transforms:
                continue
            new_access = self.apply_batch(
                method.access,
                transforms,
                EntityKind.METHOD,
                f"method \"{entity.name}.{method.name}{method.desc}\"",
            )
            staged.append((method, new_access))

        for field in entity.fields:
            transforms = rule_set.member_transforms(field.name, field.desc)
            if not transforms:
                continue
            new_access = self.apply_batch(
                field.access,
                transforms,
                EntityKind.FIELD,
                f"field \"{entity.name}.{field.name}:{field.desc}\"",
            )
            staged.append((field, new_access))

        for record, new_access in staged:
            record.access = new_access

    def _mirror_inner_classes(self, entity: ClassRecord) -> None:
        # Inner class table entries duplicate the flags of other classes and are
        # not authoritative, so mismatches are never reported here.
        for inner in entity.inner_classes:
            rule_set = self.registry.get(inner.name)
            if rule_set is None:
                continue
            access, failures = apply_batch_access(
                inner.access, rule_set.self_transforms, EntityKind.CLASS
            )
            for transform, _ in failures:
                logger.debug(
                    f"Inner class entry \"{inner.name}\" of \"{entity.name}\" "
                    f"does not match \"{transform.describe(EntityKind.CLASS)}\""
                )
            inner.access = access

    def accept(self, entity: ClassRecord) -> None:
        """
        Apply all relevant transforms to a class record.

        Applies the class's own rule set, then mirrors the self transforms of
        every class listed in the inner class table onto its table entry.

        Raises:
            TransformFailure: If a HARD transform of this class fails
        """
        rule_set = self.registry.get(entity.name)
        if rule_set is not None:
            self.apply_to_entity(entity, rule_set)
        self._mirror_inner_classes(entity)


__all__ = ["ApplicationEngine", "apply_access", "apply_batch_access"]
