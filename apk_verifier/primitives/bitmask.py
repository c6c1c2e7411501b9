"""Signer participation bitmask packed into 256-bit chunks.

Bit i of the bitmask is bit (i % 256) of chunk i // 256, i.e. bits are packed
little-endian within each chunk and chunks are ordered low to high. The bit
vector is zero-padded to a whole number of chunks.
"""

from typing import List, Sequence

import numpy as np

from apk_verifier.primitives.field import FieldElement

CHUNK_BITS = 256
CHUNK_BYTES = CHUNK_BITS // 8


class Bitmask:
    """Bitmask of participating signers."""

    def __init__(self, bits: np.ndarray, size: int):
        # bits: uint8 array of 0/1, length is a multiple of CHUNK_BITS
        self._bits = bits
        self._size = size

    @classmethod
    def from_bits(cls, bits: Sequence[bool]) -> "Bitmask":
        """Build from a sequence of booleans, padding with zeros to whole chunks."""
        size = len(bits)
        n_chunks = -(-size // CHUNK_BITS)
        padded = np.zeros(n_chunks * CHUNK_BITS, dtype=np.uint8)
        padded[:size] = np.asarray(bits, dtype=bool)
        return cls(padded, size)

    @classmethod
    def from_chunks(cls, chunks: Sequence[int], size: int = None) -> "Bitmask":
        """Build from 256-bit chunk words. size defaults to all chunk bits."""
        raw = b"".join(int(c).to_bytes(CHUNK_BYTES, "little") for c in chunks)
        bits = np.unpackbits(np.frombuffer(raw, dtype=np.uint8), bitorder="little")
        if size is None:
            size = len(bits)
        if size > len(bits) or bits[size:].any():
            raise ValueError(f"Bitmask of size {size} has bits set beyond its size")
        return cls(bits, size)

    @property
    def size(self) -> int:
        """Number of signer slots (unpadded)."""
        return self._size

    @property
    def padded_size(self) -> int:
        return len(self._bits)

    def count_ones(self) -> int:
        return int(self._bits.sum())

    def to_bits(self) -> List[bool]:
        return [bool(b) for b in self._bits[:self._size]]

    def chunks(self) -> List[int]:
        """256-bit chunk words, lowest chunk first."""
        packed = np.packbits(self._bits, bitorder="little").tobytes()
        return [
            int.from_bytes(packed[i:i + CHUNK_BYTES], "little")
            for i in range(0, len(packed), CHUNK_BYTES)
        ]

    def to_field_elements(self) -> List[FieldElement]:
        """Chunks as field elements with a zero high limb."""
        return [FieldElement(0, chunk) for chunk in self.chunks()]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bitmask):
            return NotImplemented
        return self._size == other._size and np.array_equal(self._bits, other._bits)

    def __repr__(self) -> str:
        return f"Bitmask(size={self._size}, ones={self.count_ones()})"
