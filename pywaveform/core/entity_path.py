"""Entity path - immutable hierarchical identity for a sample source."""
from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class EntityPath:
    """Ordered sequence of path segments, e.g. ``A/y1`` -> ("A", "y1").

    Frozen for hashability - can be used as dict key and in sets.
    """
    parts: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, path: Union[str, 'EntityPath']) -> 'EntityPath':
        """Create from a slash separated string. Empty segments are ignored."""
        if isinstance(path, EntityPath):
            return path
        return cls(tuple(p for p in path.strip().split('/') if p))

    @property
    def domain(self) -> Optional[str]:
        """First path segment, or None for the root path."""
        return self.parts[0] if self.parts else None

    @property
    def is_root(self) -> bool:
        return not self.parts

    @property
    def name(self) -> str:
        """Last path segment ('' for the root)."""
        return self.parts[-1] if self.parts else ''

    def parent(self) -> Optional['EntityPath']:
        """Parent path, or None for the root."""
        if not self.parts:
            return None
        return EntityPath(self.parts[:-1])

    def is_descendant_of(self, other: 'EntityPath') -> bool:
        """True if ``other`` is a strict prefix of this path."""
        n = len(other.parts)
        return n < len(self.parts) and self.parts[:n] == other.parts

    def __str__(self) -> str:
        return '/' + '/'.join(self.parts)

    def to_dict(self) -> dict:
        return {'parts': list(self.parts)}

    @classmethod
    def from_dict(cls, d: dict) -> 'EntityPath':
        return cls(tuple(d.get('parts', ())))
