from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class BundleLabels:
    success_label: Optional[str] = None
    failure_label: Optional[str] = None

    def label(self, is_failure: bool) -> Optional[str]:
        return self.failure_label if is_failure else self.success_label


# 10 minute chest reports failures only
DEFAULT_BUNDLES: Mapping[int, BundleLabels] = MappingProxyType(
    {
        1786571320: BundleLabels(None, "❌ 10 Minutes Chest Failed"),
        844758222: BundleLabels("✅ 4 Hours Chest Successful", "❌ 4 Hours Chest Failed"),
        1918154038: BundleLabels("✅ 24 hour Chest Successful", "❌ 24 hour Chest Failed"),
        787829412: BundleLabels(
            "✅ DailyMission Chest Successful", "❌ DailyMission Chest Failed"
        ),
        1579845062: BundleLabels(
            "✅ OpticalDiode Chest Successful", "❌ OpticalDiode Chest Failed"
        ),
        1210188306: BundleLabels(
            "✅ ReplicatorRations Chest Successful", "❌ ReplicatorRations Chest Failed"
        ),
        718968170: BundleLabels(
            "✅ TrailBells Chest Successful", "❌ TrailBells Chest Failed"
        ),
        1904351560: BundleLabels(
            "✅ NadionSupply Chest Successful", "❌ NadionSupply Chest Failed"
        ),
        1438866306: BundleLabels(
            "✅ TranswarpCell Chest Successful", "❌ TranswarpCell Chest Failed"
        ),
    }
)


class BundleCatalog:
    """Read-only lookup of notification labels by bundle id."""

    def __init__(self, entries: Optional[Mapping[int, BundleLabels]] = None):
        source: Dict[int, BundleLabels] = dict(
            DEFAULT_BUNDLES if entries is None else entries
        )
        self._entries: Mapping[int, BundleLabels] = MappingProxyType(source)

    def __contains__(self, bundle_id: object) -> bool:
        return bundle_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, bundle_id: int) -> Optional[BundleLabels]:
        return self._entries.get(bundle_id)

    def label_for(self, bundle_id: int, is_failure: bool) -> Optional[str]:
        """Return the label for this outcome, or None if nothing is mapped."""
        labels = self._entries.get(bundle_id)
        if labels is None:
            return None
        return labels.label(is_failure)
