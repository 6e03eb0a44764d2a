"""Built-in commands: /help and s/search/replacement/flags."""

from .help import HELP_TEXT, HelpCommand, HelpRequest, HelpRequestParser
from .replace import (
    DuplicatedFlag,
    EmptyResult,
    Flags,
    InvalidRegex,
    MissingMessage,
    MissingQuery,
    ReplaceCommand,
    Replacement,
    ReplaceRequest,
    ReplaceRequestParser,
    RegexTimeout,
    ResultTooLong,
    UnrecognizedFlag,
    split_unescaped,
)

__all__ = [
    # Help
    "HELP_TEXT",
    "HelpCommand",
    "HelpRequest",
    "HelpRequestParser",
    # Replace
    "DuplicatedFlag",
    "EmptyResult",
    "Flags",
    "InvalidRegex",
    "MissingMessage",
    "MissingQuery",
    "ReplaceCommand",
    "Replacement",
    "ReplaceRequest",
    "ReplaceRequestParser",
    "RegexTimeout",
    "ResultTooLong",
    "UnrecognizedFlag",
    "split_unescaped",
]
