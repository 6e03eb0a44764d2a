"""The ``s/search/replacement/flags`` substitution command.

The rule is taken from anywhere in the message text after the first
``s/``. Segments are split on unescaped ``/``; the flags segment is
optional. The substitution is applied to the message being replied to.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

import regex

from ..command import Command
from ..domain import Bot, Message, MessageData, NewMessage, ReplyToMessageId
from ..errors import CommandError, ParseError
from ..request import Parser
from .pattern import expand_octal, swap_greed

# Telegram refuses text messages longer than this.
MAX_MESSAGE_LENGTH = 4096
# Seconds a single substitution may spend matching.
MATCH_TIMEOUT = 0.5


# ============================================================
# ERRORS
# ============================================================

class MissingQuery(ParseError):
    def __init__(self):
        super().__init__("missing query regex in rule")


class UnrecognizedFlag(ParseError):
    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(f"{flag!r} is an unrecognized flag")


class DuplicatedFlag(ParseError):
    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(f"{flag!r} flag is duplicated")


class InvalidRegex(ParseError):
    def __init__(self, cause: regex.error):
        self.cause = cause
        super().__init__(f"invalid query regex: {cause}")


class MissingMessage(CommandError):
    def __init__(self):
        super().__init__(
            "no message could be reached; reply to the message you want to edit"
        )


class EmptyResult(CommandError):
    def __init__(self):
        super().__init__("the replacement resulted in an empty message")


class RegexTimeout(CommandError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"the query regex took longer than {timeout}s to match and was stopped"
        )


class ResultTooLong(CommandError):
    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"the replacement resulted in a message of {length} characters "
            f"(limit is {limit})"
        )


# ============================================================
# TOKENIZER
# ============================================================

def split_unescaped(text: str, delimiter: str = "/") -> Optional[tuple[str, str]]:
    """Split ``text`` around its first unescaped ``delimiter``.

    A delimiter preceded by an odd run of backslashes is escaped. Escapes
    are kept in the returned segments.

    Returns:
        ``(head, tail)`` or None when no unescaped delimiter exists.
    """
    escape = False
    for index, character in enumerate(text):
        if character == delimiter and not escape:
            return text[:index], text[index + 1:]
        escape = character == "\\" and not escape
    return None


# ============================================================
# FLAGS
# ============================================================

_FLAG_FIELDS = {
    "i": "case_insensitive",
    "m": "multi_line",
    "s": "dot_matches_new_line",
    "U": "swap_greed",
    "x": "ignore_whitespace",
    "o": "octal",
    "g": "global_",
}


@dataclass
class Flags:
    case_insensitive: bool = False
    multi_line: bool = False
    dot_matches_new_line: bool = False
    swap_greed: bool = False
    ignore_whitespace: bool = False
    octal: bool = False
    global_: bool = False

    @classmethod
    def parse(cls, text: str) -> "Flags":
        """Parse a flag string such as ``"ig"``.

        Raises:
            UnrecognizedFlag: A letter is not a known flag.
            DuplicatedFlag: A letter appears twice.
        """
        flags = cls()
        for character in text:
            name = _FLAG_FIELDS.get(character)
            if name is None:
                raise UnrecognizedFlag(character)
            if getattr(flags, name):
                raise DuplicatedFlag(character)
            setattr(flags, name, True)
        return flags

    @property
    def re_flags(self) -> int:
        value = 0
        if self.case_insensitive:
            value |= regex.IGNORECASE
        if self.multi_line:
            value |= regex.MULTILINE
        if self.dot_matches_new_line:
            value |= regex.DOTALL
        if self.ignore_whitespace:
            value |= regex.VERBOSE
        return value

    def compile(self, pattern: str) -> regex.Pattern:
        """Compile ``pattern`` under these flags.

        Raises:
            InvalidRegex: The pattern does not compile.
        """
        if self.octal:
            pattern = expand_octal(pattern)
        if self.swap_greed:
            pattern = swap_greed(pattern, verbose=self.ignore_whitespace)
        try:
            return regex.compile(pattern, self.re_flags)
        except regex.error as e:
            raise InvalidRegex(e) from e


# ============================================================
# REPLACEMENT TEMPLATE
# ============================================================

@dataclass(frozen=True)
class TextNode:
    text: str

    def render(self, match: regex.Match) -> str:
        return self.text


@dataclass(frozen=True)
class IndexNode:
    index: int

    def render(self, match: regex.Match) -> str:
        if self.index > match.re.groups:
            return ""
        return match.group(self.index) or ""


ReplacementNode = Union[TextNode, IndexNode]

# \g<N>, \N, $N, ${N}, $$, and the escapes \\ \/ \n \t
_TEMPLATE_TOKEN = re.compile(
    r"\\g<(?P<g>\d+)>|[\\$](?P<plain>\d+)|\$\{(?P<braced>\d+)\}|\$\$|\\[\\/nt]"
)
_TEMPLATE_ESCAPES = {"$$": "$", "\\\\": "\\", "\\/": "/", "\\n": "\n", "\\t": "\t"}


@dataclass
class Replacement:
    """Replacement template as an ordered list of text and group nodes."""

    nodes: list[ReplacementNode] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "Replacement":
        this = cls()
        literal = []
        position = 0

        for token in _TEMPLATE_TOKEN.finditer(text):
            literal.append(text[position:token.start()])
            position = token.end()
            index = token.group("g") or token.group("plain") or token.group("braced")
            if index is None:
                literal.append(_TEMPLATE_ESCAPES[token.group()])
                continue
            this._push_text("".join(literal))
            literal = []
            this.nodes.append(IndexNode(int(index)))

        literal.append(text[position:])
        this._push_text("".join(literal))
        return this

    def _push_text(self, text: str):
        if text:
            self.nodes.append(TextNode(text))

    def expand(self, match: regex.Match) -> str:
        return "".join(node.render(match) for node in self.nodes)


# ============================================================
# REQUEST & PARSER
# ============================================================

@dataclass(frozen=True)
class ReplaceRequest:
    """A compiled substitution addressed at a target message.

    Attributes:
        query: Compiled search pattern.
        replacement: Parsed replacement template.
        is_global: Replace every match instead of only the first.
        chat_id: Chat the command was sent in.
        original_message_id: Id of the message carrying the command.
        target: The message being replied to, when its text is known.
    """

    query: regex.Pattern
    replacement: Replacement
    is_global: bool
    chat_id: object = None
    original_message_id: object = None
    target: Optional[Message] = None

    def apply(self, text: str, timeout: Optional[float] = None) -> str:
        """Substitute the first match, or all non-overlapping matches if global.

        Applying the same request twice is not the same as applying it once.

        Raises:
            TimeoutError: Matching ran longer than ``timeout`` seconds.
        """
        count = 0 if self.is_global else 1
        return self.query.sub(self.replacement.expand, text, count=count, timeout=timeout)


def parse_rule(text: str) -> Optional[ReplaceRequest]:
    """Parse the ``s/.../.../...`` rule contained in ``text``.

    Returns:
        A request with no addressing information, or None when ``text``
        does not contain ``s/``.

    Raises:
        MissingQuery, UnrecognizedFlag, DuplicatedFlag, InvalidRegex
    """
    _, sep, tail = text.partition("s/")
    if not sep:
        return None

    split = split_unescaped(tail)
    if split is None:
        raise MissingQuery()
    query_text, tail = split

    split = split_unescaped(tail)
    replacement_text, flags_text = split if split is not None else (tail, "")

    flags = Flags.parse(flags_text)
    return ReplaceRequest(
        query=flags.compile(query_text),
        replacement=Replacement.parse(replacement_text),
        is_global=flags.global_,
    )


class ReplaceRequestParser(Parser):
    """Recognizes any message containing ``s/``."""

    def __repr__(self) -> str:
        return "ReplaceRequestParser()"

    def parse(self, bot: Bot, message: Message) -> Optional[ReplaceRequest]:
        rule = parse_rule(message.data.content)
        if rule is None:
            return None
        return ReplaceRequest(
            query=rule.query,
            replacement=rule.replacement,
            is_global=rule.is_global,
            chat_id=message.data.chat_id,
            original_message_id=message.id,
            target=message.replied_message(),
        )


# ============================================================
# COMMAND
# ============================================================

class ReplaceCommand(Command):
    """Applies a substitution to the replied-to message.

    The result is sent as a reply to the edited message, not to the
    message carrying the command.
    """

    def __init__(self, max_length: int = MAX_MESSAGE_LENGTH, timeout: float = MATCH_TIMEOUT):
        self.max_length = max_length
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"ReplaceCommand(max_length={self.max_length}, timeout={self.timeout})"

    def execute(self, request: ReplaceRequest) -> NewMessage:
        target = request.target
        if target is None:
            raise MissingMessage()

        try:
            content = request.apply(target.data.content, timeout=self.timeout)
        except TimeoutError as e:
            raise RegexTimeout(self.timeout) from e
        if not content.strip():
            raise EmptyResult()
        if len(content) > self.max_length:
            raise ResultTooLong(len(content), self.max_length)

        return NewMessage(
            data=MessageData(
                chat_id=request.chat_id,
                content=content,
                reply_target=ReplyToMessageId(target.id),
            )
        )
