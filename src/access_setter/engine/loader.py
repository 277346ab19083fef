"""
File loading for access setter documents.

Features:
- Load a single document into a registry, using the file name as namespace
- Discover and load every ``*.ras`` document of a directory
- Failures are reported as LoadResult values instead of exceptions
"""

import logging
from pathlib import Path

from .exceptions import ParseError
from .load_result import LoadResult
from .registry import RuleRegistry

logger = logging.getLogger(__name__)

ACCESS_SETTER_SUFFIX = ".ras"


def load_access_setter_file(
    registry: RuleRegistry,
    file_path: str | Path,
    namespace: str | None = None,
    reversed: bool = False,
) -> LoadResult[int]:
    """
    Load an access setter file into ``registry``.

    Args:
        registry: Registry to load into
        file_path: Path to the document
        namespace: Namespace label (defaults to the file name)
        reversed: Register the inverse transforms

    Returns:
        LoadResult.success(number of registered transforms) if valid
        LoadResult.failure(error_message) otherwise; nothing is registered then
    """
    path = Path(file_path)

    if not path.exists():
        return LoadResult.failure(f"Access setter file not found: {file_path}")

    if not path.is_file():
        return LoadResult.failure(f"Path is not a file: {file_path}")

    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return LoadResult.failure(f"Failed to read file '{file_path}': {e}")

    label = namespace or path.name
    try:
        count = registry.load(label, text, reversed)
    except ParseError as e:
        return LoadResult.from_parse_error(e)

    return LoadResult.success(count, namespace=label)


def discover_access_setters(
    registry: RuleRegistry,
    directory: str | Path,
    reversed: bool = False,
) -> LoadResult[list[str]]:
    """
    Load every ``*.ras`` document of ``directory`` (non-recursive, sorted by name).

    Invalid documents are skipped and listed in ``warnings``; they do not
    fail the whole operation.

    Returns:
        LoadResult.success(list of loaded namespaces)
        LoadResult.failure(error_message) if the directory doesn't exist
    """
    dir_path = Path(directory)

    if not dir_path.exists():
        return LoadResult.failure(f"Directory not found: {directory}")

    if not dir_path.is_dir():
        return LoadResult.failure(f"Path is not a directory: {directory}")

    loaded: list[str] = []
    errors: list[str] = []

    for ras_file in sorted(dir_path.glob(f"*{ACCESS_SETTER_SUFFIX}")):
        result = load_access_setter_file(registry, ras_file, reversed=reversed)
        if result.is_success:
            loaded.append(ras_file.name)
        else:
            errors.append(f"{ras_file.name}: {result.error}")

    if errors:
        logger.warning(f"{len(errors)} access setter(s) failed to load:")
        for error in errors:
            logger.warning(f"  - {error}")

    return LoadResult.success(loaded, warnings=errors)
