"""Built-in formatters for type doc comments."""

from typing import Callable, Sequence

CommentFormatter = Callable[[Sequence[str]], str]


def js_doc(comments: Sequence[str]) -> str:
    """Render comments as a JSDoc block, so JSDoc tags keep working. Empty input renders nothing."""
    if not comments:
        return ""
    lines = ["/**"]
    lines.extend(f" * {comment}" for comment in comments)
    lines.append(" */")
    return "\n".join(lines) + "\n"
