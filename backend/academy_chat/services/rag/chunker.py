"""
Text Chunker

Splits extracted document text into fixed-size overlapping windows.

Window i starts at i * (size - overlap) and spans `size` characters; the
last window may be shorter. Windows whose stripped text is 20 characters
or less are dropped (page numbers, stray headers, etc).
"""

from pydantic import BaseModel


MIN_CHUNK_LENGTH = 20


class Chunk(BaseModel):
    text: str
    source_id: str
    sequence_index: int

    model_config = {"frozen": True}


def chunk_text(text: str, size: int = 1500, overlap: int = 200) -> list[str]:
    """
    Slide a `size`-character window over `text`, stepping by `size - overlap`.

    The caller must keep 0 <= overlap < size.
    """
    windows = []
    step = size - overlap
    start = 0
    while start < len(text):
        end = min(start + size, len(text))
        windows.append(text[start:end])
        if end == len(text):
            break
        start += step

    return [w for w in windows if len(w.strip()) > MIN_CHUNK_LENGTH]


def build_chunks(
    text: str,
    source_id: str,
    size: int = 1500,
    overlap: int = 200,
) -> list[Chunk]:
    """Chunk `text` and tag each piece with its source and position."""
    return [
        Chunk(text=piece, source_id=source_id, sequence_index=i)
        for i, piece in enumerate(chunk_text(text, size, overlap))
    ]
