"""Chunk data models."""
from dataclasses import dataclass


@dataclass
class ScoredChunk:
    """Chunk text with its lexical score and citation coordinates."""
    text: str
    score: int  # number of distinct query keywords found, >= 0
    file_name: str
    index: int  # position within the document's chunk sequence
