"""Text fitting helpers shared by the SVG renderers."""


def wrap_text(text: str, width: int) -> list[str]:
    """Greedily pack words onto lines of at most ``width`` characters.

    Words are never split: a word longer than ``width`` sits alone on its
    own line.
    """
    lines: list[str] = []
    current = ""
    for word in (text or "").split():
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def truncate(text: str, limit: int) -> str:
    return (text or "")[:limit]


def first_line(text: str, width: int) -> str:
    lines = wrap_text(text, width)
    return lines[0] if lines else ""


def joined(items: list[str], limit: int, separator: str = ", ") -> str:
    """Join the first ``limit`` items; longer lists are cut, not summarized."""
    return separator.join(items[:limit])
