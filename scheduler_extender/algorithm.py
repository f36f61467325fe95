"""
Extender interface used by the scheduler core.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from .types import CandidateList, HostPriorityList, PlacementRequest


class SchedulerExtender(ABC):
    """An external process that takes part in filtering and scoring nodes."""

    @abstractmethod
    def filter(self, pod: PlacementRequest, nodes: CandidateList) -> CandidateList:
        """Return the subset of ``nodes`` the extender considers feasible for ``pod``."""

    @abstractmethod
    def prioritize(
        self, pod: PlacementRequest, nodes: CandidateList
    ) -> Tuple[HostPriorityList, int]:
        """Return per-node scores for ``pod`` and the weight to apply to them.

        The scheduler multiplies each score by the weight and adds it to the
        scores computed by its own priority functions.
        """
