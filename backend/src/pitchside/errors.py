"""Errors raised by the positioning engine.

Every error is recoverable by the caller: the board stays usable and the
formation is left exactly as it was before the failing call.
"""


class PositioningError(Exception):
    """Base class for all positioning engine errors."""


class SlotOccupied(PositioningError):
    """A direct bind targeted a slot already holding a different player."""

    def __init__(self, slot_id: str, occupant_id: str):
        self.slot_id = slot_id
        self.occupant_id = occupant_id
        super().__init__(f"Slot {slot_id} is occupied by {occupant_id}")


class InvalidRole(PositioningError):
    """The player cannot structurally play in the slot (e.g. goalkeeper-only slots)."""

    def __init__(self, player_id: str, slot_id: str):
        self.player_id = player_id
        self.slot_id = slot_id
        super().__init__(f"Player {player_id} cannot be placed in slot {slot_id}")


class NoAlternativeSlot(PositioningError):
    """find_alternative was chosen but no compatible free slot exists."""

    def __init__(self, conflict_id: str):
        self.conflict_id = conflict_id
        super().__init__(f"No alternative slot available for conflict {conflict_id}")


class SessionNotFound(PositioningError):
    """A drag session or conflict handle is unknown, expired or already finished."""

    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"Session not found: {handle}")


class SessionBusy(PositioningError):
    """A pick-up was attempted while another drag is in flight or awaiting resolution."""

    def __init__(self, active_session_id: str):
        self.active_session_id = active_session_id
        super().__init__(f"Drag session {active_session_id} is still active")


class SlotNotFound(PositioningError):
    """The formation has no slot with this id."""

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Slot not found: {slot_id}")


class PlayerNotFound(PositioningError):
    """The roster has no player with this id."""

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")
