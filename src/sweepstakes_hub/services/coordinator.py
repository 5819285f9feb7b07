"""
List/detail coordinator for the admin workspace.

Owns the full record set, the filter spec, the selection and the "creating new" flag.
The visible subset is recomputed synchronously whenever records or filters change;
remote filter queries go through a debounced latest-only runner so a slow response for
an older filter state never overwrites a newer one.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from sweepstakes_hub.errors import NotFound, RemoteUnavailable
from sweepstakes_hub.filtering.evaluator import CompetitionSource, FilterEvaluator
from sweepstakes_hub.filtering.spec import FilterSpec
from sweepstakes_hub.schemas.competition import (
    Competition,
    CompetitionFormData,
    CompetitionSummary,
    validate_form,
)
from sweepstakes_hub.services.admin_gate import AdminSessionGate
from sweepstakes_hub.services.competition_service import CompetitionService, SaveOutcome
from sweepstakes_hub.services.debounce import LatestOnly

logger = logging.getLogger(__name__)


class CompetitionCoordinator:
    def __init__(
        self,
        service: CompetitionService,
        gate: AdminSessionGate,
        *,
        evaluator: Optional[FilterEvaluator] = None,
        debounce_seconds: float = 0.0,
        source: Optional[CompetitionSource] = None,
    ) -> None:
        self._service = service
        self._gate = gate
        self._evaluator = evaluator or FilterEvaluator()
        # Remote filter queries default to the service itself.
        self._source: CompetitionSource = source or service
        self._latest = LatestOnly(debounce_seconds)
        self._records: List[Competition] = []
        self._filters = FilterSpec()
        self._visible: List[Competition] = []
        self.selected_id: Optional[str] = None
        self.creating_new = False

    def bind_gate(self, gate: AdminSessionGate) -> None:
        self._gate = gate

    @property
    def records(self) -> List[Competition]:
        return list(self._records)

    @property
    def filters(self) -> FilterSpec:
        return self._filters

    @property
    def visible(self) -> List[Competition]:
        return list(self._visible)

    @property
    def selected(self) -> Optional[Competition]:
        if self.selected_id is None:
            return None
        return next((c for c in self._records if c.id == self.selected_id), None)

    def summaries(self) -> List[CompetitionSummary]:
        return [
            CompetitionSummary(id=c.id, title=c.title, status=c.status, category=c.category)
            for c in self._visible
        ]

    def _recompute(self) -> None:
        self._visible = self._evaluator.apply(self._filters, self._records)

    def _set_records(self, records: List[Competition]) -> None:
        self._latest.supersede()
        self._records = list(records)
        self._evaluator.remember(self._records)
        self._recompute()

    def _merge(self, fetched: List[Competition]) -> None:
        """Fold server results into the held record set (upsert by id, newest first)."""
        by_id = {c.id: c for c in self._records}
        by_id.update((c.id, c) for c in fetched)
        self._records = sorted(by_id.values(), key=lambda c: c.created_at, reverse=True)
        self._evaluator.remember(self._records)

    async def load(self) -> List[Competition]:
        """Refetch the full record set (newest first) and re-derive the visible subset."""
        self._set_records(await self._service.list())
        return self.visible

    def set_filters(self, **changes: Any) -> List[Competition]:
        """Merge filter changes and recompute locally; cancels pending remote queries."""
        self._latest.supersede()
        self._filters = self._filters.merged(**changes)
        self._recompute()
        return self.visible

    async def query(self, **changes: Any) -> Optional[List[Competition]]:
        """Apply filter changes locally, then refresh them from the backend.

        Returns the applied visible list, or None if a newer filter change superseded this one.
        """
        self.set_filters(**changes)
        spec = self._filters
        result = await self._latest.run(lambda: self._evaluator.fetch(spec, self._source))
        if result is None:
            return None
        self._merge(result)
        self._visible = result
        return self.visible

    def select(self, competition_id: str) -> Competition:
        record = next((c for c in self._records if c.id == competition_id), None)
        if record is None:
            raise NotFound(f"Competition {competition_id} was not found.")
        self.selected_id = competition_id
        self.creating_new = False
        return record

    def start_create(self) -> None:
        self.selected_id = None
        self.creating_new = True

    def cancel(self) -> None:
        """Leave create mode, falling back to the first record (or nothing)."""
        if not self.creating_new:
            return
        self.creating_new = False
        self.selected_id = self._records[0].id if self._records else None

    async def save(self, form: Union[CompetitionFormData, Mapping[str, Any]]) -> SaveOutcome:
        """Validate, write through the service, then refetch the list."""
        user = self._gate.require_admin()
        data = validate_form(form)
        if self.selected_id is not None and not self.creating_new:
            outcome = await self._service.update(self.selected_id, data)
        else:
            outcome = await self._service.create(data, created_by=user.id)
        if outcome.failed_side_effects:
            logger.warning(
                "Saved competition %s with %d failed projection write(s)",
                outcome.competition.id,
                len(outcome.failed_side_effects),
            )
        if outcome.created:
            self.selected_id = outcome.competition.id
            self.creating_new = False
        try:
            await self.load()
        except RemoteUnavailable as e:
            raise RemoteUnavailable(
                "The competition was saved, but the list could not be refreshed. Please reload."
            ) from e
        return outcome
