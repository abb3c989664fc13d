import logging
from typing import Dict, Iterable, Iterator, List, Tuple

from core.models import FOLDER_KINDS, Asset, FolderKind


class MetadataStore:
    """Per-asset metadata from the last scan, keyed by a stable integer id.

    Ids are assigned in scan order starting at 0 and never reused within one
    store; a rescan builds a new store (or calls :meth:`replace`) wholesale.
    """

    def __init__(self, assets: Iterable[Asset] = ()):
        self._assets: List[Asset] = []
        self.replace(assets)

    def replace(self, assets: Iterable[Asset]) -> None:
        assets = list(assets)
        seen = set()
        for asset in assets:
            if asset.path in seen:
                raise ValueError(f"Duplicate asset path: {asset.path}")
            seen.add(asset.path)
        self._assets = assets
        logging.debug(f"MetadataStore holds {len(assets)} assets")

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Tuple[int, Asset]]:
        return iter(enumerate(self._assets))

    def __contains__(self, asset_id) -> bool:
        return isinstance(asset_id, int) and 0 <= asset_id < len(self._assets)

    def get(self, asset_id: int) -> Asset:
        if asset_id not in self:
            raise KeyError(asset_id)
        return self._assets[asset_id]

    def ids(self) -> range:
        return range(len(self._assets))

    def counts_by_folder(self) -> Dict[FolderKind, int]:
        counts = {kind: 0 for kind in FOLDER_KINDS}
        for asset in self._assets:
            counts[asset.source_folder] += 1
        return counts
