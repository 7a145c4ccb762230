"""Error type for grammar construction defects."""

from __future__ import annotations


class GrammarError(Exception):
    """Raised when a rule tree cannot be handed to the engine as built.

    `path` names the offending rule from the root (e.g. "root > string[4]"),
    `pattern` is the regex involved, if any, and `position` a 0-based offset
    into it.
    """

    def __init__(
        self,
        message: str,
        path: str,
        pattern: str | None = None,
        position: int | None = None,
    ) -> None:
        self.message = message
        self.path = path
        self.pattern = pattern
        self.position = position
        super().__init__(self.format())

    def format(self, language: str = "grammar") -> str:
        result = f"error: {self.message}\n  --> {language}: {self.path}"
        if self.pattern is None:
            return result

        col = self.position if self.position is not None else 0
        # Stay within the pattern, at least one caret
        underline_len = max(1, min(2, len(self.pattern) - col))
        pad = " " * col
        carets = "^" * underline_len

        return (
            f"{result}\n"
            f"   |\n"
            f"   | {self.pattern}\n"
            f"   | {pad}{carets}"
        )
