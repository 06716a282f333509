"""Overlapping, boundary-aware text chunking."""
from dataclasses import dataclass

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200

# Preferred cut points, strongest first: paragraph, line, sentence, word
DEFAULT_SEPARATORS = ("\n\n", "\n", ". ", "! ", "? ", " ")


@dataclass(frozen=True)
class TextSpan:
    """A chunk of text and its position in the source text."""

    text: str
    start: int
    end: int


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    separators: tuple[str, ...] = DEFAULT_SEPARATORS,
) -> list[TextSpan]:
    """
    Split text into overlapping chunks of at most `chunk_size` characters.

    Each chunk ends at the strongest separator found in its window and the
    next chunk starts at a separator inside the trailing `chunk_overlap`
    characters, so consecutive chunks overlap by at most `chunk_overlap`.
    Without any separator the text is cut hard. Chunks are exact slices of
    the input: dropping each chunk's overlap with its predecessor and joining
    the rest reproduces the input.

    Args:
        text: Text to split
        chunk_size: Maximum characters per chunk
        chunk_overlap: Maximum characters shared by consecutive chunks
        separators: Cut points in order of preference

    Returns:
        List of TextSpan in document order

    Raises:
        ValueError: If chunk_size is not positive or the overlap does not fit
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")

    if not text:
        return []

    spans: list[TextSpan] = []
    length = len(text)
    start = 0

    while start < length:
        end = min(start + chunk_size, length)

        if end < length:
            # Cut must leave room past the overlap so the next chunk advances
            end = _last_boundary(text, start + chunk_overlap + 1, end, separators) or end

        spans.append(TextSpan(text=text[start:end], start=start, end=end))

        if end >= length:
            break

        window_start = max(end - chunk_overlap, start + 1)
        start = _first_boundary(text, window_start, end, separators) or window_start

    return spans


def _last_boundary(text: str, lower: int, upper: int, separators: tuple[str, ...]) -> int | None:
    """End offset of the last strongest separator fully inside text[lower:upper]."""
    for separator in separators:
        index = text.rfind(separator, lower, upper)
        if index != -1:
            return index + len(separator)
    return None


def _first_boundary(text: str, lower: int, upper: int, separators: tuple[str, ...]) -> int | None:
    """Offset just after the first strongest separator fully inside text[lower:upper]."""
    for separator in separators:
        index = text.find(separator, lower, upper)
        if index != -1 and index + len(separator) < upper:
            return index + len(separator)
    return None


def reassemble(spans: list[TextSpan]) -> str:
    """Join chunks back together, dropping the overlapping prefixes."""
    if not spans:
        return ""

    parts = [spans[0].text]
    previous_end = spans[0].end
    for span in spans[1:]:
        parts.append(span.text[previous_end - span.start:])
        previous_end = span.end
    return "".join(parts)
