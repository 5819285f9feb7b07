from __future__ import annotations

import asyncio
from typing import Callable, Dict

from sweepstakes_hub.services.admin_gate import AdminSessionGate
from sweepstakes_hub.services.coordinator import CompetitionCoordinator


class WorkspaceRegistry:
    """One coordinator per signed-in admin, kept for the life of the process."""

    def __init__(self, factory: Callable[[AdminSessionGate], CompetitionCoordinator]) -> None:
        self._factory = factory
        self._workspaces: Dict[str, CompetitionCoordinator] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    async def open(self, gate: AdminSessionGate) -> CompetitionCoordinator:
        """Workspace for the gate's admin user; loads the list on first open."""
        user = gate.require_admin()
        # Concurrent first opens for one user share a single load.
        async with self._locks.setdefault(user.id, asyncio.Lock()):
            workspace = self._workspaces.get(user.id)
            if workspace is None:
                workspace = self._factory(gate)
                await workspace.load()
                self._workspaces[user.id] = workspace
            else:
                workspace.bind_gate(gate)
            return workspace

    def discard(self, user_id: str) -> None:
        self._workspaces.pop(user_id, None)
        self._locks.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._workspaces)
