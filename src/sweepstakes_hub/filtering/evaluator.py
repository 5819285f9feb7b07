from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from sweepstakes_hub.errors import PortalError
from sweepstakes_hub.schemas.competition import Competition

from .memory import apply_criteria
from .spec import FilterSpec

logger = logging.getLogger(__name__)


class CompetitionSource(Protocol):
    async def list(self, spec: Optional[FilterSpec] = None) -> List[Competition]: ...


class FilterEvaluator:
    """Runs a FilterSpec remotely (pushdown) or over records already in memory.

    Keeps the last full record set it was given; if a remote query fails, the same spec is
    evaluated over that set instead of surfacing an empty result.
    """

    def __init__(self, last_known: Optional[Iterable[Competition]] = None) -> None:
        self._last_known: List[Competition] = list(last_known or [])

    @property
    def last_known(self) -> List[Competition]:
        return list(self._last_known)

    def remember(self, records: Iterable[Competition]) -> None:
        """Record the latest complete (unfiltered) record set."""
        self._last_known = list(records)

    def apply(self, spec: FilterSpec, records: Optional[Iterable[Competition]] = None) -> List[Competition]:
        """Client-side mode: evaluate ``spec`` over ``records`` (default: last known set)."""
        source = self._last_known if records is None else records
        return apply_criteria(spec.criteria(), source)

    async def fetch(self, spec: FilterSpec, source: CompetitionSource) -> List[Competition]:
        """Server mode with silent client-side fallback on remote failure."""
        try:
            records = await source.list(spec)
        except PortalError as e:
            logger.warning(
                "Remote competition query failed (%s); filtering %d cached records instead",
                e.message,
                len(self._last_known),
            )
            return self.apply(spec)
        if spec.is_empty:
            self.remember(records)
        return records
