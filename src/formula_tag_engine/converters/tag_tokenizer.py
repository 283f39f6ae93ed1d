"""
Formula tokenizer - split a raw formula into literal text and [variable] tags.
"""

import logging
import re
from typing import List

from ..models.parser_models import FormulaSegment

logger = logging.getLogger(__name__)

# Tag names cannot contain "]"; there is no escape syntax.
TAG_PATTERN = re.compile(r"\[([^\]]+)\]")


class TagTokenizer:
    """Tokenizer for user-facing formulas such as "[price] * 2 + [tax]"."""

    def __init__(self):
        self.pattern = TAG_PATTERN

    def tokenize(self, formula: str) -> List[FormulaSegment]:
        """Tokenize a formula into an ordered list of segments.

        Empty literals (formula starting or ending with a tag, adjacent
        tags) are left out.
        """
        segments: List[FormulaSegment] = []
        position = 0

        for match in self.pattern.finditer(formula):
            if match.start() > position:
                segments.append(FormulaSegment.literal(formula[position : match.start()]))
            segments.append(FormulaSegment.tag(match.group(1)))
            position = match.end()

        if position < len(formula):
            segments.append(FormulaSegment.literal(formula[position:]))

        logger.debug(f"Tokenized formula {formula!r} into {len(segments)} segments")
        return segments


_default_tokenizer = TagTokenizer()


def tokenize(formula: str) -> List[FormulaSegment]:
    """Tokenize a formula with the shared stateless tokenizer."""
    return _default_tokenizer.tokenize(formula)


def referenced_variables(formula: str) -> List[str]:
    """Return tag names in left-to-right order, duplicates included."""
    return [segment.text for segment in tokenize(formula) if segment.is_tag]
