"""Exception types raised at the file-system and subprocess boundary.

Core functions (grammar, scoring, validation, migration planning) never raise
on malformed input. These exceptions only come out of code that touches the
disk or shells out, and the command layer turns them into exit codes.
"""


class HandoffError(Exception):
    """Base class for handoff boundary failures."""


class ConfigError(HandoffError):
    """The project config file exists but cannot be used."""


class CommandFailed(HandoffError):
    """An external command exited non-zero, timed out, or could not start."""

    def __init__(self, command: str, message: str, stdout: str = "", stderr: str = "", returncode: int | None = None):
        super().__init__(f"{command}: {message}")
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class MigrationError(HandoffError):
    """A planned migration step could not be applied."""
