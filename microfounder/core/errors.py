"""
Domain errors.

Logical absence (no business row, no memory value) and unparseable model
output are represented as values, never raised.
"""


class MicroFounderError(Exception):
    """Base exception for MicroFounder errors."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(self.message)


class RemoteUnavailable(MicroFounderError):
    """A store's remote backend is disabled or its call failed."""
    pass


class InferenceFailed(MicroFounderError):
    """The inference backend failed. There is no local fallback for generation."""
    pass


class UnknownAgent(MicroFounderError):
    """Agent id outside ceo|marketing|finance|product|sales."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Unknown agent: {agent_id}")


class NoBusinessFound(MicroFounderError):
    """The user has no business to act on."""

    def __init__(self, user_id: str = ""):
        self.user_id = user_id
        super().__init__("No business found for user")
