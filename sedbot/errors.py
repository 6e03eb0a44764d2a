"""Error families of the message pipeline.

Parse and command errors are user-facing: the handler turns them into a
reply. Transport errors are fatal to the current dispatch loop and are
left to the supervisor.
"""


class ParseError(Exception):
    """Malformed command text that clearly meant to be a command."""
    pass


class CommandError(Exception):
    """Valid command that cannot be satisfied at execution time."""
    pass


class TransportError(Exception):
    """Network or platform API failure of a channel."""
    pass
