"""Unit tests for ChunkingEngine."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from services.chunking_engine import ChunkingEngine, split_into_chunks
from services.errors import InvalidConfigurationError


class TestChunkingEngine:
    """Test suite for ChunkingEngine."""

    @pytest.fixture
    def engine(self):
        """Create a small ChunkingEngine for readable assertions."""
        return ChunkingEngine(chunk_size=10, chunk_overlap=3)

    def test_default_configuration(self):
        engine = ChunkingEngine()
        assert engine.chunk_size == 1000
        assert engine.chunk_overlap == 200

    def test_short_text_is_single_chunk(self):
        text = "A short document."
        assert split_into_chunks(text) == [text]

    def test_text_exactly_chunk_size(self, engine):
        assert engine.split("0123456789") == ["0123456789"]

    def test_empty_text_yields_no_chunks(self, engine):
        assert engine.split("") == []

    def test_whitespace_text_yields_no_chunks(self, engine):
        assert engine.split("   \n\t  ") == []

    def test_consecutive_chunks_overlap(self, engine):
        text = "abcdefghijklmnopqrstuvwxyz"
        chunks = engine.split(text)

        assert chunks == ["abcdefghij", "hijklmnopq", "opqrstuvwx", "vwxyz"]
        for previous, current in zip(chunks, chunks[1:]):
            assert previous[-3:] == current[:3]

    def test_chunks_never_exceed_chunk_size(self):
        engine = ChunkingEngine(chunk_size=100, chunk_overlap=20)
        chunks = engine.split("lorem ipsum " * 200)
        assert all(len(chunk) <= 100 for chunk in chunks)

    def test_novel_portions_reconstruct_text(self):
        engine = ChunkingEngine(chunk_size=50, chunk_overlap=10)
        text = "".join(chr(ord("a") + i % 26) for i in range(537))
        chunks = engine.split(text)

        rebuilt = chunks[0] + "".join(chunk[10:] for chunk in chunks[1:])
        assert rebuilt == text

    def test_stops_once_window_reaches_end(self):
        # 1500 chars: [0, 1000) then [800, 1500); no trailing 200-char sliver
        chunks = split_into_chunks("x" * 1500)
        assert [len(chunk) for chunk in chunks] == [1000, 700]

    def test_deterministic(self, engine):
        text = "The quick brown fox jumps over the lazy dog" * 3
        assert engine.split(text) == engine.split(text)

    def test_zero_overlap(self):
        engine = ChunkingEngine(chunk_size=4, chunk_overlap=0)
        assert engine.split("abcdefghij") == ["abcd", "efgh", "ij"]

    @pytest.mark.parametrize("chunk_size,chunk_overlap", [(10, 10), (10, 15), (0, 0), (10, -1)])
    def test_invalid_configuration_rejected(self, chunk_size, chunk_overlap):
        with pytest.raises(InvalidConfigurationError):
            ChunkingEngine(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
