"""
Known CurseForge game version types for World of Warcraft.

CurseForge identifies each WoW flavor by a numeric gameVersionTypeId.
The ids are hardcoded since the API exposes no stable lookup for them.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, Optional, Union


UNKNOWN_VARIANT = "unknown"

# Variants in the order they are reported in summaries
VARIANTS = (
    "classic_era",
    "tbc_classic",
    "wotlk_classic",
    "cata_classic",
    "mop_classic",
    "retail",
)


@dataclass(frozen=True)
class VersionTypeDescriptor:
    """One CurseForge version type and the WoW variant it belongs to."""

    id: int
    name: str
    slug: str
    variant: str

    def to_dict(self) -> Dict:
        return asdict(self)


class VersionTypeCatalog:
    """Read-only lookup of version type descriptors by gameVersionTypeId."""

    def __init__(self, descriptors: Iterable[VersionTypeDescriptor]):
        self._by_id: Dict[int, VersionTypeDescriptor] = {}
        for descriptor in descriptors:
            self._by_id[descriptor.id] = descriptor

    def lookup(self, type_id: Union[int, str, None]) -> Optional[VersionTypeDescriptor]:
        """Return the descriptor for a type id, or None if it is not known."""
        try:
            return self._by_id.get(int(type_id))
        except (TypeError, ValueError):
            return None

    def variant_for(self, type_id: Union[int, str, None]) -> str:
        descriptor = self.lookup(type_id)
        return descriptor.variant if descriptor else UNKNOWN_VARIANT

    def to_dict(self) -> Dict[str, Dict]:
        """Dump the catalog keyed by id string, as written to versions.json."""
        return {str(type_id): descriptor.to_dict() for type_id, descriptor in self._by_id.items()}

    def __iter__(self) -> Iterator[VersionTypeDescriptor]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)


WOW_VERSION_TYPES = VersionTypeCatalog([
    VersionTypeDescriptor(67408, "WoW Classic Era", "wow-classic-era", "classic_era"),
    VersionTypeDescriptor(73246, "WoW Burning Crusade Classic", "wow-burning-crusade-classic", "tbc_classic"),
    VersionTypeDescriptor(73713, "WoW Wrath of the Lich King Classic", "wow-wrath-of-the-lich-king-classic", "wotlk_classic"),
    VersionTypeDescriptor(77522, "WoW Cataclysm Classic", "wow-cataclysm-classic", "cata_classic"),
    VersionTypeDescriptor(79434, "WoW Mists of Pandaria Classic", "wow-mists-of-pandaria-classic", "mop_classic"),
    VersionTypeDescriptor(517, "WoW Retail", "wow-retail", "retail"),
])
