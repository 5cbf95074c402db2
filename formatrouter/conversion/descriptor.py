"""Capability descriptors declared by conversion backends."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional


def _freeze_table(table: Mapping[str, Iterable[str]]) -> Mapping[str, frozenset[str]]:
    return MappingProxyType(
        {category: frozenset(extensions) for category, extensions in table.items()}
    )


@dataclass(frozen=True, eq=False)
class CapabilityDescriptor:
    """Extensions a backend accepts and produces, grouped by category.

    A source extension can only be converted to target extensions listed
    under the same category. A category with no ``to`` entry accepts input
    that the backend cannot convert to anything.
    """

    name: str
    from_: Mapping[str, frozenset[str]]
    to: Mapping[str, frozenset[str]]
    options: Optional[Mapping[str, Any]] = field(default=None)

    @classmethod
    def from_tables(
        cls,
        name: str,
        from_: Mapping[str, Iterable[str]],
        to: Mapping[str, Iterable[str]],
        options: Optional[Mapping[str, Any]] = None,
    ) -> "CapabilityDescriptor":
        """Build a descriptor from plain category -> extension list tables."""
        if not name:
            raise ValueError("descriptor name must not be empty")
        return cls(
            name=name,
            from_=_freeze_table(from_),
            to=_freeze_table(to),
            options=MappingProxyType(dict(options)) if options is not None else None,
        )

    def categories(self) -> Iterator[tuple[str, frozenset[str], frozenset[str]]]:
        """Yield (category, sources, targets) for categories with a non-empty ``to``."""
        for category, sources in self.from_.items():
            targets = self.to.get(category)
            if targets:
                yield category, sources, targets

    def supports(self, source_extension: str, target_extension: str) -> bool:
        """Check whether one category lists both the source and the target."""
        return any(
            source_extension in sources and target_extension in targets
            for _, sources, targets in self.categories()
        )
