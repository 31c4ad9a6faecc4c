"""
Block Storage Module

File content is held as an ordered list of fixed-capacity blocks.
A write packs its payload into as many blocks as needed, the last one
holding the remainder; reads copy block by block into a caller-supplied
buffer.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Union


DEFAULT_BLOCK_SIZE = 1024

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Block:
    """A single content block. ``data`` never exceeds ``capacity`` bytes."""
    capacity: int
    data: bytes = b''

    def __post_init__(self):
        if len(self.data) > self.capacity:
            raise ValueError(
                f"Block overflow: {len(self.data)} bytes in a {self.capacity}-byte block"
            )

    @property
    def used(self) -> int:
        return len(self.data)


class BlockStore:
    """
    Content of a single file.

    Example:
        >>> store = BlockStore(block_size=4)
        >>> store.write(b'hello', append=False)
        5
        >>> len(store.blocks), store.size
        (2, 5)
        >>> buf = bytearray(8)
        >>> store.read(buf)
        5
    """

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE):
        if block_size <= 0:
            raise ValueError(f"Block size must be positive, got {block_size}")
        self._block_size = block_size
        self._blocks: List[Block] = []
        self._size = 0

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks)

    @property
    def size(self) -> int:
        """Bytes actually stored, not total block capacity."""
        return self._size

    def write(self, payload: BytesLike, *, append: bool = False) -> int:
        """
        Store ``payload``.

        Args:
            payload: Bytes to store
            append: Keep existing blocks and add after them; otherwise
                existing content is discarded first

        Returns:
            Number of bytes written

        Raises:
            TypeError: If ``payload`` is not bytes-like
        """
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"payload must be bytes, bytearray or memoryview, not {type(payload).__name__}"
            )
        data = bytes(payload)
        new_blocks = [
            Block(self._block_size, data[offset:offset + self._block_size])
            for offset in range(0, len(data), self._block_size)
        ]

        if not append:
            self.clear()

        self._blocks.extend(new_blocks)
        self._size += len(data)
        return len(data)

    def read(self, buffer: Union[bytearray, memoryview]) -> int:
        """
        Copy content into ``buffer`` starting at offset 0.

        Stops when the buffer is full or content runs out; a buffer
        smaller than the file silently truncates. Bytes past the copied
        count are zeroed.

        Returns:
            Number of bytes copied
        """
        view = memoryview(buffer).cast('B')
        capacity = len(view)
        offset = 0

        for block in self._blocks:
            if offset >= capacity:
                break
            count = min(block.used, capacity - offset)
            view[offset:offset + count] = block.data[:count]
            offset += count

        view[offset:] = bytes(capacity - offset)
        return offset

    def clear(self) -> None:
        """Drop all blocks."""
        self._blocks.clear()
        self._size = 0

    def copy(self) -> 'BlockStore':
        """Independent copy holding the same bytes in the same block layout."""
        clone = BlockStore(self._block_size)
        clone._blocks = list(self._blocks)
        clone._size = self._size
        return clone

    def getvalue(self) -> bytes:
        """Entire content as one bytes object."""
        return b''.join(block.data for block in self._blocks)

    def __len__(self) -> int:
        return self._size
