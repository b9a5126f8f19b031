"""Template parsing and rendering for object key prefixes.

A template is plain text with ``{variable}`` placeholders, for example
``"cluster-1/{topic}/"``. Parsing splits the text into literal and variable
segments; rendering substitutes each variable with the value returned by its
bound producer.

Variables without a binding are rendered back verbatim as ``{name}`` so the
result can be parsed again by a later stage that knows about them.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union

from s3sink.core.exceptions import InvalidValueError

_logger = logging.getLogger(__name__)

_VARIABLE_PATTERN = re.compile(r"\{\s*(\w+)\s*\}")

VariableProducer = Callable[[], object]


@dataclass(frozen=True)
class LiteralSegment:
    """Text copied to the output unchanged."""

    text: str


@dataclass(frozen=True)
class VariableSegment:
    """A ``{name}`` placeholder."""

    name: str

    def __str__(self) -> str:
        return f"{{{self.name}}}"


Segment = Union[LiteralSegment, VariableSegment]


@dataclass(frozen=True)
class Template:
    """A parsed template: the raw text plus its ordered segments."""

    raw: str
    segments: tuple[Segment, ...]

    @property
    def variables(self) -> list[str]:
        """Distinct variable names in order of first appearance."""
        names: list[str] = []
        for segment in self.segments:
            if isinstance(segment, VariableSegment) and segment.name not in names:
                names.append(segment.name)
        return names

    def render(
        self,
        bindings: Mapping[str, VariableProducer],
        logger: Optional[logging.Logger] = None,
    ) -> str:
        return render(self, bindings, logger=logger)

    def __str__(self) -> str:
        return self.raw


def parse(raw: str, name: str = "template") -> Template:
    """
    Parse a template string into literal and variable segments.

    Args:
        raw: Template text
        name: Option name reported when the template is malformed

    Returns:
        Parsed template

    Raises:
        InvalidValueError: If a brace is unmatched or a variable name is not
            made of word characters
    """
    segments: list[Segment] = []
    position = 0
    for match in _VARIABLE_PATTERN.finditer(raw):
        _append_literal(segments, raw, position, match.start(), name)
        segments.append(VariableSegment(match.group(1)))
        position = match.end()
    _append_literal(segments, raw, position, len(raw), name)
    return Template(raw=raw, segments=tuple(segments))


def _append_literal(
    segments: list[Segment], raw: str, start: int, end: int, name: str
) -> None:
    """Append raw[start:end] as a literal, rejecting any brace left in it."""
    text = raw[start:end]
    for offset, char in enumerate(text):
        if char in "{}":
            raise InvalidValueError(
                name,
                raw,
                f"unmatched '{char}' at position {start + offset}, "
                "variables must be written as {name}",
            )
    if text:
        segments.append(LiteralSegment(text))


def render(
    template: Template,
    bindings: Mapping[str, VariableProducer],
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Render a parsed template.

    Args:
        template: Template returned by parse()
        bindings: Variable name to zero-argument producer of its value
        logger: Logger used for unresolved variables (module logger by default)

    Returns:
        Rendered text
    """
    log = logger or _logger
    parts = []
    for segment in template.segments:
        if isinstance(segment, LiteralSegment):
            parts.append(segment.text)
            continue
        producer = bindings.get(segment.name)
        if producer is None:
            log.debug(
                "Template variable has no binding, leaving it unresolved",
                extra={"context": {"variable": segment.name}},
            )
            parts.append(str(segment))
        else:
            parts.append(str(producer()))
    return "".join(parts)
