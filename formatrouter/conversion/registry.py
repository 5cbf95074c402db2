"""Backend registry and the capability index derived from it.

The registry is an ordered priority list. When several backends can service
the same conversion, the one registered first is selected, so each entry
records the reason for its rank.

Example:
    registry = BackendRegistry()
    registry.register(InkscapeAdapter(), reason="best EMF/WMF rendering")
    registry.register(ImageMagickAdapter(), reason="raster fallback")
    index = registry.freeze()
    index.by_extension["emf"]
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping, Optional, Sequence

import structlog

from formatrouter.conversion.descriptor import CapabilityDescriptor
from formatrouter.conversion.normalize import normalize_filetype
from formatrouter.exceptions import ConfigurationError, RegistryFrozenError

if TYPE_CHECKING:
    from formatrouter.adapters.base import ConverterAdapter

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BackendEntry:
    """A registered backend: its adapter, capabilities and priority rationale."""

    adapter: "ConverterAdapter"
    reason: str = ""

    @property
    def name(self) -> str:
        return self.adapter.descriptor.name

    @property
    def descriptor(self) -> CapabilityDescriptor:
        return self.adapter.descriptor


@dataclass(frozen=True)
class CapabilityIndex:
    """Read-only lookup tables derived from all registered descriptors."""

    by_extension: Mapping[str, Mapping[str, frozenset[str]]]
    all_inputs: Mapping[str, frozenset[str]]
    all_targets: Mapping[str, frozenset[str]]
    possible_inputs: tuple[str, ...]


def build_index(descriptors: Iterable[CapabilityDescriptor]) -> CapabilityIndex:
    """Derive the capability index from descriptors, in priority order.

    ``by_extension[ext][backend]`` is the union of the ``to`` sets of every
    category of ``backend`` whose ``from`` lists ``ext``. Categories without
    targets contribute inputs to ``all_inputs`` only.
    """
    by_extension: dict[str, dict[str, set[str]]] = {}
    all_inputs: dict[str, set[str]] = {}
    all_targets: dict[str, set[str]] = {}

    for descriptor in descriptors:
        inputs = all_inputs.setdefault(descriptor.name, set())
        for sources in descriptor.from_.values():
            inputs.update(sources)

        targets = all_targets.setdefault(descriptor.name, set())
        for extensions in descriptor.to.values():
            targets.update(extensions)

        for _, sources, reachable in descriptor.categories():
            for extension in sources:
                by_extension.setdefault(extension, {}).setdefault(
                    descriptor.name, set()
                ).update(reachable)

    possible_inputs = sorted(
        {extension for extensions in all_inputs.values() for extension in extensions}
    )

    return CapabilityIndex(
        by_extension=MappingProxyType(
            {
                extension: MappingProxyType(
                    {name: frozenset(reachable) for name, reachable in backends.items()}
                )
                for extension, backends in by_extension.items()
            }
        ),
        all_inputs=MappingProxyType(
            {name: frozenset(extensions) for name, extensions in all_inputs.items()}
        ),
        all_targets=MappingProxyType(
            {name: frozenset(extensions) for name, extensions in all_targets.items()}
        ),
        possible_inputs=tuple(possible_inputs),
    )


class BackendRegistry:
    """Ordered collection of conversion backends.

    Backends are registered during start-up only. Freezing the registry
    builds the capability index; any later registration is rejected.
    """

    def __init__(self, entries: Sequence[BackendEntry] = ()) -> None:
        self._entries: dict[str, BackendEntry] = {}
        self._index: Optional[CapabilityIndex] = None
        for entry in entries:
            self._add(entry)

    def register(self, adapter: "ConverterAdapter", reason: str = "") -> BackendEntry:
        """Append a backend at the lowest priority.

        Raises:
            RegistryFrozenError: If the index has already been built
            ConfigurationError: If a backend with the same name exists
        """
        entry = BackendEntry(adapter=adapter, reason=reason)
        self._add(entry)
        return entry

    def _add(self, entry: BackendEntry) -> None:
        if self._index is not None:
            raise RegistryFrozenError(entry.name)
        if entry.name in self._entries:
            raise ConfigurationError(
                f"Backend already registered: {entry.name}", backend=entry.name
            )
        self._entries[entry.name] = entry
        logger.debug(
            "backend_registered",
            backend=entry.name,
            priority=len(self._entries),
            reason=entry.reason,
        )

    def freeze(self) -> CapabilityIndex:
        """Build the capability index and stop accepting registrations."""
        if self._index is None:
            self._index = build_index(entry.descriptor for entry in self._entries.values())
            logger.info(
                "capability_index_built",
                backends=list(self._entries),
                input_extensions=len(self._index.possible_inputs),
            )
        return self._index

    @property
    def frozen(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> CapabilityIndex:
        """Capability index, built on first access."""
        return self.freeze()

    def get(self, name: str) -> Optional[BackendEntry]:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[BackendEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def possible_targets(self, extension: str) -> dict[str, list[str]]:
        """Targets reachable from ``extension`` per backend, in priority order."""
        backends = self.index.by_extension.get(normalize_filetype(extension), {})
        return {name: sorted(targets) for name, targets in backends.items()}

    def all_targets(self) -> dict[str, list[str]]:
        return {name: sorted(targets) for name, targets in self.index.all_targets.items()}

    def all_inputs(self, backend: str) -> list[str]:
        return sorted(self.index.all_inputs.get(backend, frozenset()))

    def possible_inputs(self) -> list[str]:
        """Every source extension at least one backend accepts, sorted."""
        return list(self.index.possible_inputs)
