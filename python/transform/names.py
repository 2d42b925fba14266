"""
Name splitting

Full names are tokenized on whitespace:

- 1 token: lastName only
- 2 tokens: firstName, lastName
- 3+ tokens: first token, interior tokens joined with single spaces, last token

Latin names are cleaned (periods removed) and title-cased first. Any
character outside printable ASCII is taken as a sign of a non-Latin
script and the raw text is kept exactly. This is a heuristic, not a
script classifier: an accented Latin name such as "José" is also kept
as typed.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from transform.primitives import clean_string, is_placeholder, title_case


@dataclass(frozen=True)
class NameParts:
    """First/middle/last decomposition of a full name"""
    first_name: str = ''
    middle_name: str = ''
    last_name: str = ''

    def is_empty(self) -> bool:
        return not (self.first_name or self.middle_name or self.last_name)

    def has_valid_part(self) -> bool:
        """True if at least one part is a real name, not a placeholder"""
        return any(
            part and not is_placeholder(part)
            for part in (self.first_name, self.middle_name, self.last_name)
        )

    def reversed(self) -> 'NameParts':
        """Swap first and last name, keeping the middle name"""
        return NameParts(self.last_name, self.middle_name, self.first_name)

    def to_dict(self) -> Dict[str, str]:
        """Output keys for the valid parts only"""
        result = {}
        for key, part in (('firstName', self.first_name),
                          ('middleName', self.middle_name),
                          ('lastName', self.last_name)):
            if part and not is_placeholder(part):
                result[key] = part
        return result


def has_non_ascii(text: str) -> bool:
    """True if text contains a character outside printable ASCII"""
    return any(not (' ' <= char <= '~') for char in text if not char.isspace())


def split_name(full_name: Optional[str], preserve_original: bool = False) -> NameParts:
    """Split a full name into NameParts

    Args:
        full_name: Name as typed by the operator
        preserve_original: Skip cleaning/title-casing regardless of script

    Returns:
        NameParts, all empty for empty or whitespace-only input
    """
    if not full_name or not str(full_name).strip():
        return NameParts()

    text = str(full_name).strip()
    if not (preserve_original or has_non_ascii(text)):
        text = title_case(clean_string(text))

    tokens = text.split()
    if not tokens:
        return NameParts()
    if len(tokens) == 1:
        return NameParts(last_name=tokens[0])
    if len(tokens) == 2:
        return NameParts(first_name=tokens[0], last_name=tokens[1])
    return NameParts(
        first_name=tokens[0],
        middle_name=' '.join(tokens[1:-1]),
        last_name=tokens[-1]
    )
