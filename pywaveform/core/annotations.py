"""Annotation resolution: class id -> display label and color."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Union

from PyQt6.QtGui import QColor

from .colors import auto_color
from .entity_path import EntityPath
from .errors import ResolutionError
from pywaveform.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnnotationInfo:
    """Description of one class as logged by the user."""
    class_id: int
    label: Optional[str] = None
    color: Optional[QColor] = None


@dataclass(frozen=True)
class ResolvedAnnotation:
    """Label and concrete color for a class id (color fallback applied)."""
    class_id: int
    label: Optional[str]
    color: QColor

    @classmethod
    def from_info(cls, info: AnnotationInfo) -> 'ResolvedAnnotation':
        color = QColor(info.color) if info.color is not None else auto_color(info.class_id)
        return cls(class_id=info.class_id, label=info.label, color=color)


class AnnotationContext:
    """Class descriptions that apply to one entity subtree."""

    def __init__(self, infos: Iterable[AnnotationInfo] = ()):
        self._classes: Dict[int, AnnotationInfo] = {}
        for info in infos:
            self.add(info)

    def add(self, info: AnnotationInfo) -> None:
        self._classes[info.class_id] = info

    def get(self, class_id: int) -> Optional[AnnotationInfo]:
        return self._classes.get(class_id)

    def __contains__(self, class_id: int) -> bool:
        return class_id in self._classes

    def __len__(self) -> int:
        return len(self._classes)


class AnnotationResolver(ABC):
    """Host service resolving class ids of an entity."""

    @abstractmethod
    def resolve(self, entity: EntityPath, class_id: int) -> Optional[ResolvedAnnotation]:
        """Return the resolved annotation, or None for an unknown class id.

        Raises:
            ResolutionError: if the resolver itself fails.
        """
        pass


ContextProvider = Callable[[EntityPath], Optional[AnnotationContext]]


class AnnotationMap(AnnotationResolver):
    """Resolver backed by per-entity annotation contexts.

    A context applies to the entity it was registered on and to all of its
    descendants; the nearest registered ancestor wins.

    An optional ``provider`` is consulted for paths with no registered
    context. Any exception it raises is reported as ResolutionError.
    """

    def __init__(self, provider: Optional[ContextProvider] = None):
        self._contexts: Dict[EntityPath, AnnotationContext] = {}
        self._provider = provider

    def set_context(
        self,
        entity: Union[str, EntityPath],
        context: Union[AnnotationContext, Iterable[AnnotationInfo]],
    ) -> None:
        if not isinstance(context, AnnotationContext):
            context = AnnotationContext(context)
        self._contexts[EntityPath.parse(entity)] = context

    def context_for(self, entity: EntityPath) -> Optional[AnnotationContext]:
        """Find the nearest context at or above ``entity``."""
        path: Optional[EntityPath] = entity
        while path is not None:
            context = self._contexts.get(path)
            if context is not None:
                return context
            path = path.parent()

        if self._provider is None:
            return None
        try:
            return self._provider(entity)
        except Exception as e:
            raise ResolutionError(f"Annotation lookup failed for {entity}: {e}") from e

    def resolve(self, entity: EntityPath, class_id: int) -> Optional[ResolvedAnnotation]:
        context = self.context_for(entity)
        if context is None:
            return None
        info = context.get(class_id)
        if info is None:
            return None
        return ResolvedAnnotation.from_info(info)
