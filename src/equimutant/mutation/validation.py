"""
Request validation. Everything here runs before the input file is read.
"""

from typing import List, Optional, Sequence

from equimutant.exceptions import InvalidArgumentError
from equimutant.schemas import BugReport
from equimutant.strategy import validate_bug_report, validate_target_lines
from equimutant.transform import Transform, TransformRegistry


def validate_paths(input_path: Optional[str], output_dir: Optional[str]) -> None:
    if input_path is None or not str(input_path).strip():
        raise InvalidArgumentError("Input path cannot be null or empty")
    if output_dir is None or not str(output_dir).strip():
        raise InvalidArgumentError("Output path cannot be null or empty")


def validate_count(count: Optional[int]) -> int:
    if count is None:
        raise InvalidArgumentError("Random count cannot be null")
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError(f"Random count must be an integer: {count!r}")
    if count < 0:
        raise InvalidArgumentError("Random count cannot be negative")
    return count


def resolve_transforms(registry: TransformRegistry, plugin_name: Optional[str]) -> List[Transform]:
    """
    Working set for a request: the named transform, or every registered one.

    Raises:
        PluginNotFoundError: If a name is given and the registry does not know it
    """
    if plugin_name is not None and plugin_name.strip():
        return [registry.require(plugin_name.strip())]
    return registry.all()


def validate_random_request(input_path, output_dir, count, registry, plugin_name=None) -> List[Transform]:
    validate_paths(input_path, output_dir)
    validate_count(count)
    return resolve_transforms(registry, plugin_name)


def validate_guided_request(
    input_path, output_dir, bug_report: Optional[BugReport], registry, plugin_name=None
) -> List[Transform]:
    validate_paths(input_path, output_dir)
    validate_bug_report(bug_report)
    return resolve_transforms(registry, plugin_name)


def validate_target_request(
    input_path, output_dir, target_lines: Optional[Sequence[int]], registry, plugin_name=None
) -> List[Transform]:
    validate_paths(input_path, output_dir)
    validate_target_lines(target_lines)
    return resolve_transforms(registry, plugin_name)
