"""Turn a free-text submission into a title, a body and hashtag names."""

import re
from dataclasses import dataclass, field
from typing import List

# '#' followed by lowercase ASCII letters only; '#Foo' and '#123' are not tags
TAG_PATTERN = re.compile(r"#([a-z]+)")


@dataclass(frozen=True)
class ParsedNote:
    title: str
    body: str
    tag_names: List[str] = field(default_factory=list)


def split_title_body(text: str) -> tuple[str, str]:
    """First line is the title, the rest (trimmed) is the body."""
    title, sep, body = text.partition("\n")
    if not sep:
        return text.strip(), ""
    return title.strip(), body.strip()


def extract_tag_names(text: str) -> List[str]:
    """All hashtag names in order of appearance, duplicates included."""
    return TAG_PATTERN.findall(text)


def parse_note_text(text: str) -> ParsedNote:
    """Parse a raw submission.

    Tags are scanned over the whole original text, so a hashtag in the
    title line counts too. Empty input gives an empty title and body.
    """
    text = text or ""
    title, body = split_title_body(text)
    return ParsedNote(title=title, body=body, tag_names=extract_tag_names(text))
