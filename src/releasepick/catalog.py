"""
Release catalog.

Immutable snapshot of the releases the registry returned at startup, and the
rule that picks the installable package out of a release's assets.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

from releasepick.constants import APK_EXTENSION


@dataclass(frozen=True)
class Asset:
    """A downloadable artifact attached to a release."""

    name: str
    """The filename of the asset"""

    remote_id: int
    """Registry handle used to address the asset"""

    download_ref: str = ""
    """Browser download URL"""

    size: int = 0
    """File size in bytes, 0 when unknown"""

    def is_installable(self) -> bool:
        return self.name.lower().endswith(APK_EXTENSION)


@dataclass(frozen=True)
class Release:
    """A published version with notes and zero or more assets."""

    tag: str
    notes: str = ""
    display_name: Optional[str] = None
    assets: Tuple[Asset, ...] = field(default_factory=tuple)

    def installable_asset(self) -> Optional[Asset]:
        """Return the first asset recognised as a device package, if any."""
        return next((asset for asset in self.assets if asset.is_installable()), None)


class Catalog(Sequence[Release]):
    """Read-only, ordered collection of releases in registry order."""

    def __init__(self, releases: Sequence[Release] = ()) -> None:
        self._releases: Tuple[Release, ...] = tuple(releases)

    def __getitem__(self, index):
        return self._releases[index]

    def __len__(self) -> int:
        return len(self._releases)

    def __iter__(self) -> Iterator[Release]:
        return iter(self._releases)

    def __repr__(self) -> str:
        return f"Catalog({[release.tag for release in self._releases]!r})"
