"""Error taxonomy shared by the store, the core services and the API."""

from __future__ import annotations


class DepthChartError(Exception):
    """Base error carrying a stable ``kind`` and a caller-safe message."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class NotFound(DepthChartError):
    kind = "not_found"
    status_code = 404


class ArchetypeNotFound(NotFound):
    def __init__(self, archetype_id: str):
        super().__init__(f"Archetype {archetype_id!r} not found")
        self.archetype_id = archetype_id


class FormationNotFound(NotFound):
    def __init__(self, formation_id: str):
        super().__init__(f"Formation {formation_id!r} not found")
        self.formation_id = formation_id


class PlayerNotFound(NotFound):
    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id!r} not found")
        self.player_id = player_id


class NoSlotsForFormation(DepthChartError):
    """Formation exists but has no slots to resolve."""

    kind = "no_slots"
    status_code = 404

    def __init__(self, formation_id: str):
        super().__init__(f"No slots for formation {formation_id!r}")
        self.formation_id = formation_id


class InvalidInput(DepthChartError):
    kind = "invalid_input"
    status_code = 400


class Conflict(DepthChartError):
    kind = "conflict"
    status_code = 409


class UpstreamFailure(DepthChartError):
    kind = "upstream_failure"
    status_code = 503


__all__ = [
    "ArchetypeNotFound",
    "Conflict",
    "DepthChartError",
    "FormationNotFound",
    "InvalidInput",
    "NoSlotsForFormation",
    "NotFound",
    "PlayerNotFound",
    "UpstreamFailure",
]
