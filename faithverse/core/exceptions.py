"""
Domain errors raised by the progress engine.

Routes translate these into HTTP errors; the engine itself never raises for
corrupted store values (those are treated as absent and regenerated).
"""


class EngineError(Exception):
    """Base class for every error the engine surfaces to callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(EngineError):
    """A referenced profile, challenge or story record does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class DuplicateUsername(EngineError):
    def __init__(self, username: str):
        super().__init__("Username already taken")
        self.username = username


class MalformedDocument(EngineError):
    """An import document could not be parsed or lacks required fields."""


class StaleState(EngineError):
    """A daily challenge set belongs to a previous day.

    Raised by the scheduler's freshness check and recovered internally by
    regenerating the set; callers never see it.
    """

    def __init__(self, profile_id: str, stored_day: str, today: str):
        super().__init__(f"Daily set for {profile_id} is from {stored_day}, today is {today}")
        self.profile_id = profile_id
        self.stored_day = stored_day
        self.today = today


class ProtectedField(EngineError):
    """A profile update tried to write a field only the engine may change."""

    def __init__(self, fields: list[str]):
        super().__init__(f"Fields cannot be updated directly: {', '.join(sorted(fields))}")
        self.fields = fields


class BlankCharacter(EngineError):
    """A story call named no character once whitespace was stripped."""

    def __init__(self):
        super().__init__("Character name cannot be blank")
