from dataclasses import dataclass
from typing import Optional

Span = tuple[int, int]


@dataclass
class Diagnostic(Exception):
    """Source-annotated error shared by every stage of the pipeline.

    ``span`` is ``(start, length)`` in characters of ``source``; diagnostics
    without a location (e.g. unexpected end of input) leave it as ``None``.
    """

    message: str
    help: Optional[str] = None
    source: Optional[str] = None
    span: Optional[Span] = None

    stage = "Error"

    def __str__(self) -> str:
        lines = [f"[{self.stage}] {self.message}"]
        if self.source is not None and self.span is not None:
            lines.extend(self._snippet())
        if self.help:
            lines.append(f"help: {self.help}")
        return "\n".join(lines)

    def _snippet(self) -> list[str]:
        assert self.source is not None and self.span is not None
        code = self.source.rstrip("\n")
        start, length = self.span
        print_start_idx = max(0, start - 20)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(code), start + length + 20)
        print_ellipsis_post = print_end_idx < len(code)
        return [
            (
                ("..." if print_ellipsis_pre else "")
                + code[print_start_idx:print_end_idx]
                + ("..." if print_ellipsis_post else "")
            ),
            " " * (start - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^" * max(1, length),
        ]

    @property
    def snippet(self) -> Optional[str]:
        """Source text covered by the span"""
        if self.source is None or self.span is None:
            return None
        start, length = self.span
        return self.source[start : start + length]
