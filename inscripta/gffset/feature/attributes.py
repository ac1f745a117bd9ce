"""
Parsing of the free-text attribute column (column 9) of GFF/GTF rows.

GFFSet stores attributes unparsed, and only looks inside them when a tag value is needed (for instance when grouping
features by ``transcript_id``). The grammar understood here is the GTF one: a sequence of ``key value`` pairs, where
the value is either a double-quoted string (which may contain whitespace) or a bare token, and pairs are separated
by semicolons:

.. code-block::

    gene_id "ENSG01"; transcript_id "ENST01"; exon_number 2;

A trailing semicolon on a value is dropped, as are the surrounding quotes. Keys are matched exactly. When a key is
repeated, the last occurrence wins.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from methodtools import lru_cache

QUOTE = '"'
PAIR_SEPARATOR = ";"


@dataclass(frozen=True)
class TagLookup:
    """Result of looking up a tag in an attribute string."""

    found: bool
    value: Optional[str] = None

    def value_or(self, default: str) -> str:
        return self.value if self.found else default


NOT_FOUND = TagLookup(found=False)


def _tokenize(attribute: str) -> List[str]:
    """Split on whitespace, except inside double quotes. A quoted token keeps its quotes and at most one pair
    separator directly after the closing quote; whatever follows starts a new token, so compact attributes such as
    ``transcript_id "X";gene_id "Y";`` split into pairs."""
    tokens = []
    i = 0
    n = len(attribute)
    while i < n:
        if attribute[i].isspace():
            i += 1
            continue
        j = i
        if attribute[i] == QUOTE:
            close = attribute.find(QUOTE, i + 1)
            if close != -1:
                j = close + 1
                if j < n and attribute[j] == PAIR_SEPARATOR:
                    j += 1
                tokens.append(attribute[i:j])
                i = j
                continue
            # unterminated quote runs to the next whitespace like a bare token
        while j < n and not attribute[j].isspace():
            j += 1
        tokens.append(attribute[i:j])
        i = j
    return tokens


def _clean_value(token: str) -> str:
    if token.endswith(PAIR_SEPARATOR):
        token = token[:-1]
    if len(token) >= 2 and token[0] == QUOTE and token[-1] == QUOTE:
        token = token[1:-1]
    return token


def iter_attribute_pairs(attribute: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, value)`` pairs in order of appearance. A key without a value is skipped."""
    tokens = _tokenize(attribute)
    i = 0
    while i < len(tokens):
        key = tokens[i].strip(PAIR_SEPARATOR)
        if not key:
            i += 1
            continue
        if tokens[i].endswith(PAIR_SEPARATOR) or i + 1 == len(tokens):
            # bare flag such as ``cds_start_NF;``
            i += 1
            continue
        yield key, _clean_value(tokens[i + 1])
        i += 2


def parse_attributes(attribute: str) -> Dict[str, str]:
    """Parse an attribute string to a dictionary. Later duplicates replace earlier ones."""
    return dict(iter_attribute_pairs(attribute))


class AttributeParser:
    """Looks up the value of one tag in attribute strings.

    Attribute strings are frequently repeated across the features of a transcript, so lookups are memoized per
    parser instance.
    """

    def __init__(self, tag: str):
        self.tag = tag

    def __repr__(self):
        return f"<AttributeParser(tag={self.tag})>"

    @lru_cache(maxsize=4096)
    def lookup(self, attribute: str) -> TagLookup:
        # an attribute no longer than the tag name cannot hold the tag and a value
        if attribute is None or len(attribute) <= len(self.tag):
            return NOT_FOUND
        result = NOT_FOUND
        for key, value in iter_attribute_pairs(attribute):
            if key == self.tag:
                result = TagLookup(found=True, value=value)
        return result
