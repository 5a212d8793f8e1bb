"""IRC message parsing and encoding."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .exceptions import MessageEncodeError, MessageParseError

REPLY_WELCOME = "001"

# Including the trailing CRLF
MAX_LINE_LENGTH = 512


@dataclass
class Message:
    command: str
    params: List[str] = field(default_factory=list)
    prefix: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)
    # Always send the last parameter after a colon, e.g. PRIVMSG text
    trailing: bool = False

    def _render(self) -> str:
        parts = []
        if self.tags:
            parts.append("@" + ";".join(
                f"{k}={v}" if v else k for k, v in self.tags.items()
            ))
        if self.prefix:
            parts.append(f":{self.prefix}")
        parts.append(self.command)

        if self.params:
            middle, last = self.params[:-1], self.params[-1]
            parts.extend(middle)
            # The last parameter needs a colon if it could be misread
            if self.trailing or not last or " " in last or last.startswith(":"):
                parts.append(f":{last}")
            else:
                parts.append(last)
        return " ".join(parts)

    def encode(self) -> bytes:
        line = self._render()
        if any(c in line for c in "\r\n\0"):
            raise MessageEncodeError(f"message contains a line break or NUL: {line!r}")

        data = line.encode("utf-8") + b"\r\n"
        if len(data) > MAX_LINE_LENGTH:
            raise MessageEncodeError(
                f"message is {len(data)} bytes, limit is {MAX_LINE_LENGTH}"
            )
        return data

    def __str__(self) -> str:
        return self._render()


def parse_message(line: str) -> Message:
    """Parse one IRC line (with or without the trailing CRLF)."""
    raw = line.rstrip("\r\n")
    rest = raw
    tags: Dict[str, str] = {}
    prefix: Optional[str] = None

    if rest.startswith("@"):
        if " " not in rest:
            raise MessageParseError(f"message has tags but no command: {raw!r}")
        tags_part, rest = rest[1:].split(" ", 1)
        tags = _parse_tags(tags_part)
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        if " " not in rest:
            raise MessageParseError(f"message has a prefix but no command: {raw!r}")
        prefix, rest = rest[1:].split(" ", 1)
        rest = rest.lstrip(" ")

    trailing = None
    if rest.startswith(":"):
        raise MessageParseError(f"message has no command: {raw!r}")
    if " :" in rest:
        rest, trailing = rest.split(" :", 1)

    parts = rest.split()
    if not parts:
        raise MessageParseError(f"message has no command: {raw!r}")

    params = parts[1:]
    if trailing is not None:
        params.append(trailing)

    return Message(command=parts[0].upper(), params=params, prefix=prefix, tags=tags,
                   trailing=trailing is not None)


def _parse_tags(raw_tags: str) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags
