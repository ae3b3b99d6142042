"""Fluent builder for markdown-flavoured prompt text."""

import json
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import Self

    from ._weaver import PromptWeaver

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


class PromptBuilder:
    """Accumulate text fragments into sections and join them.

    Fragments within a section are joined with newlines; sections are joined
    with a blank line. Starting a new :meth:`section` closes the current one.
    The builder never checks that the result is valid markdown.

    Example:
        >>> (
        ...     PromptBuilder()
        ...     .section("Task", "Summarize the report.")
        ...     .list(["Be brief", "Cite sources"])
        ...     .build()
        ... )
        '## Task\\nSummarize the report.\\n- Be brief\\n- Cite sources'
    """

    def __init__(self) -> None:
        self._sections: list[str] = []
        self._current: list[str] = []

    def _push(self, fragment: str) -> "Self":  # noqa: UP037
        self._current.append(fragment)
        return self

    def _flush(self) -> None:
        if self._current:
            self._sections.append("\n".join(self._current))
            self._current = []

    def section(
        self,
        title: str | None = None,
        content: str | Callable[[], str] | None = None,
    ) -> "Self":  # noqa: UP037
        """Close the current section and start a new one.

        Args:
            title: Rendered as a level-2 heading when given.
            content: Text, or a zero-argument callable producing it.
        """
        self._flush()
        if title:
            self._current.append(f"## {title}")
        if content:
            text = content() if callable(content) else content
            if text:
                self._current.append(text)
        return self

    def text(self, text: str) -> "Self":  # noqa: UP037
        if text:
            self._current.append(text)
        return self

    def heading(self, level: int, text: str) -> "Self":  # noqa: UP037
        """Add a heading; ``level`` is clamped to 1..6."""
        hashes = "#" * min(max(level, MIN_HEADING_LEVEL), MAX_HEADING_LEVEL)
        return self._push(f"{hashes} {text}")

    def code(self, code: str, language: str | None = None) -> "Self":  # noqa: UP037
        return self._push(f"```{language or ''}\n{code}\n```")

    def list(self, items: Sequence[str], ordered: bool = False) -> "Self":  # noqa: A003, FBT001, FBT002, UP037
        """Add a bulleted list, or a numbered one when ``ordered``."""
        if not items:
            return self
        if ordered:
            lines = [f"{index}. {item}" for index, item in enumerate(items, start=1)]
        else:
            lines = [f"- {item}" for item in items]
        return self._push("\n".join(lines))

    def table(self, headers: Sequence[str], rows: Iterable[Sequence[object]]) -> "Self":  # noqa: UP037
        """Add a pipe table: header row, separator row, then one row per entry."""
        if not headers:
            return self
        lines = [
            f"| {' | '.join(headers)} |",
            f"| {' | '.join('---' for _ in headers)} |",
        ]
        lines.extend(f"| {' | '.join(str(cell) for cell in row)} |" for row in rows)
        return self._push("\n".join(lines))

    def quote(self, text: str) -> "Self":  # noqa: UP037
        return self._push("\n".join(f"> {line}" for line in text.split("\n")))

    def conditional(
        self,
        condition: object,
        if_true: str,
        if_false: str | None = None,
    ) -> "Self":  # noqa: UP037
        """Add ``if_true`` when ``condition`` is truthy, else ``if_false`` if given."""
        if condition:
            return self._push(if_true)
        if if_false:
            return self._push(if_false)
        return self

    def loop(
        self,
        items: Iterable[Any],  # pyright: ignore[reportExplicitAny]
        callback: Callable[[Any, int], str],  # pyright: ignore[reportExplicitAny]
    ) -> "Self":  # noqa: UP037
        """Add ``callback(item, index)`` for every item, one per line."""
        content = "\n".join(callback(item, index) for index, item in enumerate(items))
        if content:
            self._current.append(content)
        return self

    def separator(self, char: str = "---") -> "Self":  # noqa: UP037
        return self._push(char)

    def horizontal_rule(self, char: str = "---") -> "Self":  # noqa: UP037
        return self.separator(char)

    def json(self, data: object, indent: int = 2) -> "Self":  # noqa: UP037
        """Add ``data`` as a fenced JSON block, or as plain text if it cannot be serialized."""
        try:
            serialized = json.dumps(data, indent=indent, ensure_ascii=False)
        except (TypeError, ValueError):
            return self._push(str(data))
        return self._push(f"```json\n{serialized}\n```")

    def link(self, text: str, url: str) -> "Self":  # noqa: UP037
        return self._push(f"[{text}]({url})")

    def image(self, alt: str, url: str, title: str | None = None) -> "Self":  # noqa: UP037
        title_part = f' "{title}"' if title else ""
        return self._push(f"![{alt}]({url}{title_part})")

    def checkbox(self, text: str, checked: bool = False) -> "Self":  # noqa: FBT001, FBT002, UP037
        return self._push(f"{'[x]' if checked else '[ ]'} {text}")

    def checkboxes(self, items: Sequence[str | Mapping[str, object]]) -> "Self":  # noqa: UP037
        """Add several checkboxes; items are text or ``{"text": ..., "checked": ...}``."""
        if not items:
            return self
        lines: list[str] = []
        for item in items:
            if isinstance(item, str):
                lines.append(f"[ ] {item}")
            else:
                mark = "[x]" if item.get("checked") else "[ ]"
                lines.append(f"{mark} {item.get('text', '')}")
        return self._push("\n".join(lines))

    def build(self) -> str:
        """Close the current section and return all sections joined by blank lines."""
        self._flush()
        return "\n\n".join(self._sections)

    def clear(self) -> "Self":  # noqa: UP037
        self._sections = []
        self._current = []
        return self

    def to_weaver(self, **options: Any) -> "PromptWeaver":  # noqa: ANN401, UP037  # pyright: ignore[reportExplicitAny, reportAny]
        """Build the text and compile it into a :class:`PromptWeaver`."""
        from ._weaver import PromptWeaver  # noqa: PLC0415

        return PromptWeaver(self.build(), **options)  # pyright: ignore[reportAny]
