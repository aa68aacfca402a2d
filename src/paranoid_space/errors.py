"""Exception taxonomy for paranoid-space."""

from typing import List, Optional


class SpacingError(Exception):
    """Base exception for all paranoid-space errors."""

    pass


# Config errors


class ConfigError(SpacingError):
    """Failed to load or validate configuration."""

    pass


# Dispatch errors


class UnknownFormatError(SpacingError):
    """Requested format has no registered walker."""

    def __init__(self, fmt: str, known: List[str]) -> None:
        self.format = fmt
        self.known = known
        super().__init__(f"Unknown format '{fmt}' (known: {', '.join(known)})")


# Parse errors


class ParseError(SpacingError):
    """Input does not conform to the grammar of its format."""

    def __init__(
        self,
        fmt: str,
        diagnostic: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        excerpt: Optional[str] = None,
    ) -> None:
        self.format = fmt
        self.diagnostic = diagnostic
        self.line = line
        self.column = column
        self.excerpt = excerpt
        location = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"{fmt} syntax error{location}: {diagnostic}")

    def get_detailed_message(self) -> str:
        """Get the error message followed by the offending source line."""
        parts = [str(self)]
        if self.excerpt is not None:
            parts.append(f"  | {self.excerpt}")
            if self.column is not None:
                parts.append("  | " + " " * (self.column - 1) + "^")
        return "\n".join(parts)


class NestingDepthError(ParseError):
    """Structural nesting exceeded the configured depth limit."""

    def __init__(self, fmt: str, max_depth: int, line: Optional[int] = None,
                 column: Optional[int] = None, excerpt: Optional[str] = None) -> None:
        self.max_depth = max_depth
        super().__init__(
            fmt,
            f"nesting deeper than {max_depth} levels",
            line=line,
            column=column,
            excerpt=excerpt,
        )
