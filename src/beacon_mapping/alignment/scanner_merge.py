"""
Scanner Report Merging

Folds a collection of scanner reports into one unified beacon map by
repeatedly merging any pair of groups that overlap.

Groups keep the slot of the original report they started from. A queue of
untried pairs is processed lowest pair first; after a merge only pairs that
involve the freshly merged group are queued again, since every other pair
was already tried with unchanged contents. The lower-index group is always
the reference frame, so the unified map ends up in the frame of report 0.
"""

from __future__ import annotations

import heapq
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .beacons import BeaconSet, Coordinate
from .overlap_detection import OverlapDetector, OverlapResult
from ..acceleration.parallel_executor import PairParallelExecutor
from ..analysis.scanner_layout import max_scanner_distance
from ..utils.coordinate_transform import RigidTransform
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

Pair = Tuple[int, int]


class UnresolvedScannersError(RuntimeError):
    """
    Raised when no remaining pair of scanner groups overlaps.

    Attributes:
        groups: Scanner indices of each group that could not be merged
    """

    def __init__(self, groups: List[List[int]]):
        self.groups = groups
        super().__init__(
            f"Could not merge {len(groups)} scanner groups into one map; "
            f"no pair overlaps. Groups: {groups}"
        )


@dataclass(frozen=True)
class ScannerGroup:
    """Beacons of one or more merged scanners and each scanner's transform into the group frame."""

    beacons: BeaconSet
    transforms: Mapping[int, RigidTransform] = field(default_factory=dict)

    @classmethod
    def from_report(cls, index: int, report: BeaconSet) -> "ScannerGroup":
        return cls(beacons=report, transforms={index: RigidTransform.identity()})

    @property
    def scanners(self) -> List[int]:
        return sorted(self.transforms)

    def absorb(self, other: "ScannerGroup", overlap: OverlapResult) -> "ScannerGroup":
        """Merge ``other`` into this group using a result found with this group as reference."""
        transforms = dict(self.transforms)
        for scanner, transform in other.transforms.items():
            transforms[scanner] = overlap.transform.compose(transform)
        return ScannerGroup(beacons=overlap.merged, transforms=transforms)


@dataclass
class MergeResult:
    """
    Unified beacon map.

    Attributes:
        beacons: Every distinct beacon, in the anchor scanner's frame
        scanner_transforms: Transform from each scanner's frame into the unified frame
        merges: Committed merges as (reference slot, absorbed slot), in order
        anchor: Index of the report whose frame the map uses
    """

    beacons: BeaconSet
    scanner_transforms: Dict[int, RigidTransform]
    merges: List[Pair] = field(default_factory=list)
    anchor: int = 0

    @property
    def scanner_positions(self) -> Dict[int, Coordinate]:
        return {s: t.origin for s, t in sorted(self.scanner_transforms.items())}

    @property
    def max_scanner_distance(self) -> int:
        return max_scanner_distance(list(self.scanner_positions.values()))


def detect_pair_overlap(
    job: Tuple[BeaconSet, BeaconSet],
    threshold: int,
    require_unique: bool = False,
) -> Optional[OverlapResult]:
    """Worker entry point for parallel pair evaluation."""
    reference, candidate = job
    return OverlapDetector(threshold=threshold, require_unique=require_unique).find_overlap(reference, candidate)


class MergeOrchestrator:
    """
    Merge scanner reports into a single map.

    Example:
        orchestrator = MergeOrchestrator(OverlapDetector(threshold=12))
        result = orchestrator.merge(reports)
        print(len(result.beacons), result.max_scanner_distance)
    """

    def __init__(
        self,
        detector: Optional[OverlapDetector] = None,
        executor: Optional[PairParallelExecutor] = None,
    ):
        """
        Args:
            detector: Overlap detector (default threshold of 12 beacons)
            executor: Optional parallel executor used to test several pairs
                at once. At most one merge is committed per round, so results
                match the sequential run.
        """
        self.detector = detector or OverlapDetector()
        self.executor = executor

    def merge(self, reports: Sequence[BeaconSet]) -> MergeResult:
        """
        Merge all reports into one beacon set.

        Args:
            reports: One beacon set per scanner, in input order

        Returns:
            MergeResult anchored at report 0

        Raises:
            ValueError: If no reports are given
            UnresolvedScannersError: If the reports cannot all be connected
            AmbiguousOverlapError: If the detector requires unique overlaps
                and a pair matches under several transforms
        """
        if len(reports) == 0:
            raise ValueError("Cannot merge an empty collection of scanner reports")

        groups: Dict[int, ScannerGroup] = {
            i: ScannerGroup.from_report(i, report) for i, report in enumerate(reports)
        }
        queue: List[Pair] = [(i, j) for i in range(len(reports)) for j in range(i + 1, len(reports))]
        heapq.heapify(queue)
        merges: List[Pair] = []

        logger.info(
            "Merging %d scanner reports (%d beacons total, threshold %d).",
            len(reports),
            sum(len(r) for r in reports),
            self.detector.threshold,
        )

        with self.executor if self.executor is not None else nullcontext():
            while len(groups) > 1:
                found = self._next_merge(groups, queue)
                if found is None:
                    unresolved = [group.scanners for _, group in sorted(groups.items())]
                    logger.error("Unresolved scanner groups after exhausting all pairs: %s", unresolved)
                    raise UnresolvedScannersError(unresolved)

                i, j, overlap = found
                absorbed = groups.pop(j)
                groups[i] = groups[i].absorb(absorbed, overlap)
                merges.append((i, j))
                logger.info(
                    "Merged group %d into group %d: %d shared beacons, %d beacons in group, %d groups left.",
                    j,
                    i,
                    len(overlap.shared),
                    len(groups[i].beacons),
                    len(groups),
                )

                queue[:] = [p for p in queue if i not in p and j not in p]
                queue.extend((min(i, k), max(i, k)) for k in groups if k != i)
                heapq.heapify(queue)

        anchor, final = next(iter(groups.items()))
        logger.info(
            "Merge complete: %d beacons from %d scanners in %d merges.",
            len(final.beacons),
            len(final.transforms),
            len(merges),
        )
        return MergeResult(
            beacons=final.beacons,
            scanner_transforms=dict(sorted(final.transforms.items())),
            merges=merges,
            anchor=anchor,
        )

    def _next_merge(
        self,
        groups: Dict[int, ScannerGroup],
        queue: List[Pair],
    ) -> Optional[Tuple[int, int, OverlapResult]]:
        if self.executor is not None:
            return self._next_merge_parallel(groups, queue)
        while queue:
            i, j = heapq.heappop(queue)
            overlap = self.detector.find_overlap(groups[i].beacons, groups[j].beacons)
            if overlap is not None:
                return i, j, overlap
            logger.debug("Groups %d and %d do not overlap.", i, j)
        return None

    def _next_merge_parallel(
        self,
        groups: Dict[int, ScannerGroup],
        queue: List[Pair],
    ) -> Optional[Tuple[int, int, OverlapResult]]:
        while queue:
            batch = [heapq.heappop(queue) for _ in range(min(self.executor.batch_size, len(queue)))]
            results = self.executor.map_pairs(
                jobs=[(groups[i].beacons, groups[j].beacons) for i, j in batch],
                worker_fn=detect_pair_overlap,
                worker_kwargs={
                    "threshold": self.detector.threshold,
                    "require_unique": self.detector.require_unique,
                },
            )
            for n, ((i, j), overlap) in enumerate(zip(batch, results)):
                if overlap is not None:
                    # Untested pairs go back so the next round sees them
                    for pair in batch[n + 1:]:
                        heapq.heappush(queue, pair)
                    return i, j, overlap
        return None


def merge_reports(reports: Sequence[BeaconSet], threshold: int = 12) -> MergeResult:
    """Convenience wrapper merging reports with a default sequential orchestrator."""
    return MergeOrchestrator(OverlapDetector(threshold=threshold)).merge(reports)
