"""Exception hierarchy for promptbot."""


class PromptBotError(Exception):
    """Base class for all promptbot errors."""


class UnknownFieldError(PromptBotError, KeyError):
    """A pending field key does not match any field in the schema.

    Indicates schema/state corruption. Never recovered from inside a turn.
    """

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown profile field: {self.key!r}"


class MissingCollaboratorError(PromptBotError, ValueError):
    """A required collaborator (state accessor, transport) was not provided."""

    def __init__(self, name: str):
        super().__init__(f"{name} is required")
        self.name = name


class StateStoreError(PromptBotError):
    """Stored state could not be decoded into its model."""
