"""Exception hierarchy for maint.

Only setup problems (unknown agent, unreadable target file, configuration that
cannot even be recreated) abort an invocation. Everything else is reported on
the result records.
"""


class MaintError(Exception):
    """Base class for all maint errors."""


class ConfigUnavailableError(MaintError):
    """Configuration could not be read and defaults could not be written."""


class UnknownAgentError(MaintError):
    """Lookup for an agent name that is not registered."""

    def __init__(self, agent: str):
        super().__init__(f"Unknown agent: {agent}")
        self.agent = agent


class TargetFileError(MaintError):
    """The file an agent was asked to work on is missing or unreadable."""


class GenerationError(MaintError):
    """The text-generation service failed or timed out."""


class CommitError(MaintError):
    """A version-control side effect failed."""


class LedgerSyncError(MaintError):
    """The external ledger record could not be created or updated."""
