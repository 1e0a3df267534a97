"""Template parser.

Splits a template string into Literal and Placeholder segments:

    "hello {0:?} {{raw}}"  ->  Literal("hello "), Placeholder(Index(0), STRUCTURED),
                               Literal(" {raw}")

Placeholders are written {ref} or {ref:spec}. A ref made of ASCII digits is
positional, an identifier is a field name. Recognized specs: "" (default),
"?" (structured), "0x" (lowercase hex). Doubled braces are literal braces.
"""

import logging

from simple_error.errors import TemplateSyntaxError
from simple_error.types import FormatKind, Index, Literal, Name, Placeholder, Segment

logger = logging.getLogger(__name__)

FORMAT_SPECS: dict[str, FormatKind] = {
    "": FormatKind.DEFAULT,
    "?": FormatKind.STRUCTURED,
    "0x": FormatKind.HEX,
}


def _parse_ref(token: str, source: str, template: str, offset: int) -> Index | Name:
    if not token:
        raise TemplateSyntaxError(
            "empty placeholder reference",
            placeholder=source,
            template=template,
            offset=offset,
        )
    if token.isascii() and token.isdigit():
        return Index(int(token))
    if token.isidentifier():
        return Name(token)
    raise TemplateSyntaxError(
        f"invalid placeholder reference {token!r}",
        placeholder=source,
        template=template,
        offset=offset,
    )


def _parse_placeholder(body: str, template: str, offset: int) -> Placeholder:
    source = f"{{{body}}}"
    token, _, spec = body.partition(":")
    ref = _parse_ref(token, source, template, offset)

    kind = FORMAT_SPECS.get(spec)
    if kind is None:
        raise TemplateSyntaxError(
            f"unsupported format spec {spec!r} (expected one of '', '?', '0x')",
            placeholder=source,
            template=template,
            offset=offset,
        )
    return Placeholder(ref=ref, kind=kind, source=source, offset=offset)


def parse_template(template: str) -> tuple[Segment, ...]:
    """Parse a template into an ordered tuple of segments.

    Adjacent literal text, including collapsed escapes, is merged into a
    single Literal.

    Raises:
        TemplateSyntaxError: unterminated '{', stray '}', empty or invalid
            reference, or unrecognized format spec
    """
    segments: list[Segment] = []
    buffer: list[str] = []
    pos = 0
    length = len(template)

    def flush() -> None:
        if buffer:
            segments.append(Literal("".join(buffer)))
            buffer.clear()

    while pos < length:
        char = template[pos]

        if char == "{":
            if template.startswith("{{", pos):
                buffer.append("{")
                pos += 2
                continue

            close = template.find("}", pos + 1)
            if close == -1:
                raise TemplateSyntaxError(
                    "unterminated '{'",
                    placeholder=template[pos:],
                    template=template,
                    offset=pos,
                )
            body = template[pos + 1 : close]
            if "{" in body:
                raise TemplateSyntaxError(
                    "unterminated '{'",
                    placeholder=template[pos : close + 1],
                    template=template,
                    offset=pos,
                )
            flush()
            segments.append(_parse_placeholder(body, template, pos))
            pos = close + 1
            continue

        if char == "}":
            if template.startswith("}}", pos):
                buffer.append("}")
                pos += 2
                continue
            raise TemplateSyntaxError(
                "unmatched '}' (use '}}' for a literal brace)",
                template=template,
                offset=pos,
            )

        buffer.append(char)
        pos += 1

    flush()
    logger.debug("[PARSE] %r -> %d segments", template, len(segments))
    return tuple(segments)


def placeholders(segments: tuple[Segment, ...]) -> list[Placeholder]:
    """Return only the placeholder segments, in template order."""
    return [seg for seg in segments if isinstance(seg, Placeholder)]
