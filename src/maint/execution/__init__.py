"""Running the validation command, version control and failure discovery."""
from maint.execution.changes import ChangedFileSource, endpoint_name, is_api_file
from maint.execution.failures import (
    Failure,
    FailureSource,
    LocalFailureSource,
    TestOutputFailureSource,
)
from maint.execution.process import CommandResult, run_command, run_shell_command
from maint.execution.validator import TestCommandValidator, ValidationResult
from maint.execution.vcs import GitCommitter, commit_message

__all__ = [
    "ChangedFileSource",
    "CommandResult",
    "Failure",
    "FailureSource",
    "GitCommitter",
    "LocalFailureSource",
    "TestCommandValidator",
    "TestOutputFailureSource",
    "ValidationResult",
    "commit_message",
    "endpoint_name",
    "is_api_file",
    "run_command",
    "run_shell_command",
]
