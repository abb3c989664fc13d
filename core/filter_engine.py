from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Tuple

from core.metadata_store import MetadataStore
from core.models import Asset, FilterState, Orientation, Resolution


@dataclass(frozen=True)
class AssetVisibility:
    passes_folder: bool
    visible: bool


@dataclass(frozen=True)
class VisibilityReport:
    """Per-asset decisions plus the aggregates derived from them in the same pass."""

    results: Dict[int, AssetVisibility] = field(default_factory=dict)
    passes_folder_filter: int = 0
    visible_count: int = 0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def visible_ids(self) -> FrozenSet[int]:
        return frozenset(i for i, r in self.results.items() if r.visible)

    def is_visible(self, asset_id: int) -> bool:
        result = self.results.get(asset_id)
        return result is not None and result.visible


def matches_orientation(asset: Asset, orientation: Orientation) -> bool:
    if orientation is Orientation.PORTRAIT:
        return asset.is_portrait
    if orientation is Orientation.LANDSCAPE:
        return asset.is_landscape
    return True


def matches_resolution(asset: Asset, resolution: Resolution) -> bool:
    size = resolution.size
    return size is None or asset.dimensions == size


def evaluate_asset(asset: Asset, state: FilterState) -> AssetVisibility:
    # Folder axis first: a hidden folder short-circuits the other axes.
    if not state.folders.is_visible(asset.source_folder):
        return AssetVisibility(passes_folder=False, visible=False)

    visible = matches_orientation(asset, state.orientation)
    if visible:
        visible = matches_resolution(asset, state.resolution)
    return AssetVisibility(passes_folder=True, visible=visible)


class FilterEngine:
    """Recomputes every visibility decision and both counters from scratch."""

    def evaluate(self, store: MetadataStore, state: FilterState) -> VisibilityReport:
        return self.evaluate_assets(store, state)

    def evaluate_assets(self, assets: Iterable[Tuple[int, Asset]], state: FilterState) -> VisibilityReport:
        results: Dict[int, AssetVisibility] = {}
        passes_folder = 0
        visible_count = 0
        for asset_id, asset in assets:
            result = evaluate_asset(asset, state)
            results[asset_id] = result
            if result.passes_folder:
                passes_folder += 1
            if result.visible:
                visible_count += 1
        return VisibilityReport(
            results=results,
            passes_folder_filter=passes_folder,
            visible_count=visible_count,
        )
