"""
Error handling for the ZR# lexer.

Lexical errors are fatal: the lexer raises on the first invalid character
or unterminated string and the whole run stops.

Author: xwest
"""

from typing import Iterable, List, Optional

from .tokens import SourceLocation, KEYWORDS
from ..diagnostics import FatalError


class LexerError(FatalError):
    """
    Exception raised when the lexer encounters an invalid character or an
    unterminated string literal.
    """
    pass


class ErrorRecovery:
    """
    Suggestion helpers for lexer diagnostics.

    The lexer never resumes after an error, these only enrich the message.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str, candidates: Optional[Iterable[str]] = None) -> List[str]:
        """Suggest corrections for misspelled keywords using edit distance."""
        suggestions = []
        for keyword in (candidates if candidates is not None else KEYWORDS.keys()):
            distance = ErrorRecovery._edit_distance(invalid_word.lower(), keyword)
            if distance <= 2:  # Allow up to 2 character differences
                suggestions.append(keyword)

        return sorted(suggestions, key=lambda k: ErrorRecovery._edit_distance(invalid_word.lower(), k))[:3]

    @staticmethod
    def suggest_operator_corrections(char: str) -> List[str]:
        """Suggest the doubled spelling for single-character logical operators."""
        alternatives = {
            '&': ['&&', 'and'],
            '|': ['||', 'or'],
        }

        return alternatives.get(char, [])

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Incomplete logical operator",
}


def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for an invalid character."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in ZR# source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Invalid character: '{char}'",
        location=location,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an unterminated string literal."""
    return LexerError(
        message=f"Unterminated string literal ({reason})",
        location=location,
        code="L002",
        help_text="String literals must be closed with a matching '\"' on the same line.",
        suggestions=["Add a closing '\"' quote"]
    )


def create_incomplete_operator_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a lone '&' or '|'."""
    suggestions = ErrorRecovery.suggest_operator_corrections(char)
    return LexerError(
        message=f"Expected '{char}{char}', found a single '{char}'",
        location=location,
        code="L003",
        help_text="Logical operators are written with a doubled character.",
        suggestions=[f"Use '{s}'" for s in suggestions]
    )
