from typing import Dict, Iterable, List, Optional

from equimutant.exceptions import InvalidArgumentError, PluginNotFoundError
from equimutant.logging_config import logger
from equimutant.parser.nodes import SyntaxNode
from .base import Transform


class TransformRegistry:
    """
    Name -> Transform lookup, enumerable in registration order.

    The registry is a plain value: build one per process or per test and pass
    it to the MutationEngine.
    """

    def __init__(self, transforms: Optional[Iterable[Transform]] = None):
        self._transforms: Dict[str, Transform] = {}
        for transform in transforms or ():
            self.register(transform)

    @classmethod
    def default(cls) -> "TransformRegistry":
        """Registry holding the built-in transform set."""
        from . import default_transforms
        return cls(default_transforms())

    def register(self, transform: Transform) -> None:
        """
        Add a transform. A transform with an existing name replaces the earlier
        entry and keeps its position.

        Raises:
            InvalidArgumentError: If the transform is None or has an empty name
        """
        if transform is None:
            raise InvalidArgumentError("Transform cannot be null")
        name = transform.name
        if not name or not name.strip():
            raise InvalidArgumentError("Transform name cannot be null or empty")
        if name in self._transforms:
            logger.debug(f"Replacing registered transform '{name}'")
        self._transforms[name] = transform

    def get(self, name: Optional[str]) -> Optional[Transform]:
        if not name or not name.strip():
            return None
        return self._transforms.get(name)

    def require(self, name: str) -> Transform:
        """
        Raises:
            PluginNotFoundError: If no transform has this name
        """
        transform = self.get(name)
        if transform is None:
            raise PluginNotFoundError(name, self.names())
        return transform

    def has(self, name: Optional[str]) -> bool:
        return name is not None and name in self._transforms

    def names(self) -> List[str]:
        return list(self._transforms)

    def all(self) -> List[Transform]:
        return list(self._transforms.values())

    def transforms_for_node(self, index, node: SyntaxNode) -> List[Transform]:
        """Transforms whose check accepts `node`; a failing check counts as not applicable."""
        applicable = []
        for transform in self._transforms.values():
            try:
                if transform.check(index, node):
                    applicable.append(transform)
            except Exception as e:
                logger.debug(f"{transform.name}.check failed on {node.describe()}: {e}")
        return applicable

    def clear(self) -> None:
        self._transforms.clear()

    def reset(self) -> None:
        """Restore the built-in transform set."""
        from . import default_transforms
        self.clear()
        for transform in default_transforms():
            self.register(transform)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._transforms)

    def __repr__(self) -> str:
        return f"TransformRegistry({self.names()})"
