"""LoadResult for file level loading of access setter documents.

File loading reports failures as values so that callers processing many
documents (a mod folder, a build's resource tree) can collect failures
instead of aborting on the first one. The registry itself raises
ParseError; the loader converts it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from .exceptions import ParseError

T = TypeVar("T")


class LoadStatus(str, Enum):
    """Status of a loading operation."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class LoadResult(Generic[T]):  # noqa: UP046
    """
    Result of loading one access setter file or a directory of them.

    Attributes:
        status: SUCCESS or FAILED
        value: Registered transform count, or loaded namespaces for a directory
        error: Reason of the failure
        namespace: Namespace the document was loaded under, if known
        line_number: Offending line of a malformed document, if known
        warnings: Non-fatal problems (e.g. skipped files of a directory)

    Usage:
        result = load_access_setter_file(registry, "mymod.ras")
        if result.is_success:
            print(f"{result.value} transforms registered")
        else:
            print(f"{result.namespace}:{result.line_number}: {result.error}")
    """

    status: LoadStatus
    value: T | None = None
    error: str | None = None
    namespace: str | None = None
    line_number: int | None = None
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.status == LoadStatus.SUCCESS and self.value is None:
            raise ValueError("Success result must have a value")
        if self.status == LoadStatus.FAILED and not self.error:
            raise ValueError("Failed result must have an error message")

    @property
    def is_success(self) -> bool:
        return self.status == LoadStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == LoadStatus.FAILED

    @classmethod
    def success(
        cls,
        value: T,
        namespace: str | None = None,
        warnings: list[str] | None = None,
    ) -> "LoadResult[T]":
        return cls(
            status=LoadStatus.SUCCESS,
            value=value,
            namespace=namespace,
            warnings=warnings or [],
        )

    @classmethod
    def failure(cls, error: str, namespace: str | None = None) -> "LoadResult[T]":
        return cls(status=LoadStatus.FAILED, error=error, namespace=namespace)

    @classmethod
    def from_parse_error(cls, error: ParseError) -> "LoadResult[T]":
        """Failure carrying the location of a malformed document."""
        return cls(
            status=LoadStatus.FAILED,
            error=str(error),
            namespace=error.namespace,
            line_number=error.line_number,
        )

    def __bool__(self) -> bool:
        return self.is_success

    def unwrap(self) -> T:
        """Get the value or raise ValueError if loading failed."""
        if not self.is_success or self.value is None:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        if self.is_success and self.value is not None:
            return self.value
        return default
