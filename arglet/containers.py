"""
Arglet containers: the growable sequence and the string-keyed hash map.

Overview
- Vector
  • Append-only ordered container backed by a slot list that doubles when full
    (minimum 8 slots). Read access follows collections.abc.Sequence.
  • Holds option lists, child parser lists and captured positional arguments.

- StringMap
  • Open-addressing hash table keyed by str, using 32-bit FNV-1a over the UTF-8
    bytes of the key and linear probing with wraparound.
  • The table keeps a power-of-two capacity and grows (doubling, minimum 8) as soon
    as the number of live keys reaches half the capacity, checked before every set.
  • set_split("help h ?", option) binds every space-separated word to one value.
  • Iteration order is slot order, which is what the parser's debug dump prints.

- CapacityError
  • Raised when a container cannot allocate its next backing table. It derives from
    MemoryError so callers may catch either; the container is left untouched.

Neither container supports removal; the parser never forgets a registration.
"""
from collections.abc import Sequence, Mapping


_OFFSET_BASIS = 2166136261
_PRIME = 16777619


class CapacityError(MemoryError):
    """
    A container could not grow its backing storage.
    """


def fnv1a(key, /):
    """
    Return the 32-bit FNV-1a hash of key (a str, hashed as UTF-8, or raw bytes).

    Examples
    - fnv1a("")  -> 2166136261
    - fnv1a("a") -> 0xE40C292C
    """
    if isinstance(key, str):
        key = key.encode("utf-8", "surrogateescape")
    elif not isinstance(key, bytes | bytearray):
        raise TypeError("fnv1a() argument must be a string or bytes")

    hash = _OFFSET_BASIS
    for byte in key:
        hash ^= byte
        hash = (hash * _PRIME) & 0xFFFFFFFF
    return hash


class Vector(Sequence):
    """
    Append-only sequence with explicit, doubling capacity.

    Parameters
    - iterable: items appended in order at construction.
    - minimum: capacity of the first backing allocation (default 8).

    Slicing returns a plain list; indexing past the live items raises IndexError
    even when spare capacity exists.
    """

    def __init__(self, iterable=(), /, *, minimum=8):
        if not isinstance(minimum, int) or isinstance(minimum, bool):
            raise TypeError("Vector() 'minimum' must be an integer")
        elif minimum < 1:
            raise ValueError("Vector() 'minimum' must be at least 1")

        self._minimum = minimum
        self._slots = []
        self._count = 0
        for item in iterable:
            self.append(item)

    @property
    def capacity(self):
        return len(self._slots)

    def _grow(self):
        slots = [None] * max(self._minimum, len(self._slots) * 2)
        slots[:self._count] = self._slots[:self._count]
        self._slots = slots

    def append(self, item, /):
        """
        Add item at the end, growing the backing slots first when they are full.

        Raises CapacityError (and leaves the vector unchanged) if growth fails.
        """
        if self._count == len(self._slots):
            try:
                self._grow()
            except MemoryError:
                raise CapacityError("cannot grow vector beyond %d items" % self._count) from None
        self._slots[self._count] = item
        self._count += 1

    def pop(self):
        """
        Remove and return the last item.

        Only used to undo an append whose follow-up step failed.
        """
        if not self._count:
            raise IndexError("pop from empty vector")
        self._count -= 1
        item, self._slots[self._count] = self._slots[self._count], None
        return item

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._slots[:self._count][index]
        if not isinstance(index, int):
            raise TypeError("vector indices must be integers or slices")
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("vector index out of range")
        return self._slots[index]

    def __len__(self):
        return self._count

    def __repr__(self):
        return "Vector(%r)" % self[:]


class _Entry:
    __slots__ = ("key", "hash", "value")

    def __init__(self, key, hash, value):
        self.key = key
        self.hash = hash
        self.value = value


class StringMap(Mapping):
    """
    Linear-probing hash map from str keys to arbitrary values.

    Lookups compare the cached hash before the key itself. Overwriting an existing
    key keeps its slot (and therefore its position in iteration order).
    """

    __load__ = 0.5

    def __init__(self, items=(), /):
        self._entries = []
        self._count = 0
        self._threshold = 0
        for key, value in dict(items).items():
            self.set(key, value)

    @property
    def capacity(self):
        return len(self._entries)

    def _find(self, key, hash):
        # Caller guarantees at least one empty slot, so the probe always stops.
        mask = len(self._entries) - 1
        index = hash & mask
        while (entry := self._entries[index]) is not None:
            if entry.hash == hash and entry.key == key:
                break
            index = (index + 1) & mask
        return index

    def _grow(self):
        entries, self._entries = self._entries, [None] * max(8, len(self._entries) * 2)
        for entry in entries:
            if entry is not None:
                self._entries[self._find(entry.key, entry.hash)] = entry
        self._threshold = int(len(self._entries) * self.__load__)

    def set(self, key, value, /):
        """
        Insert key or overwrite its value.

        The table grows first when it already holds capacity * 0.5 keys, even if
        this call only overwrites. Raises CapacityError if that growth fails.
        """
        if not isinstance(key, str):
            raise TypeError("StringMap keys must be strings")

        if self._count == self._threshold:
            try:
                self._grow()
            except MemoryError:
                raise CapacityError("cannot grow map beyond %d keys" % self._count) from None

        hash = fnv1a(key)
        index = self._find(key, hash)
        if (entry := self._entries[index]) is None:
            self._entries[index] = _Entry(key, hash, value)
            self._count += 1
        else:
            entry.value = value

    def set_split(self, keys, value, /):
        """
        Bind every space-separated word of keys to value.

        Runs of spaces are skipped, so "help  h" yields two keys. Keys bound before
        a failure stay bound.
        """
        if not isinstance(keys, str):
            raise TypeError("StringMap keys must be strings")
        for key in keys.split(" "):
            if key:
                self.set(key, value)

    def __getitem__(self, key):
        if not isinstance(key, str) or not self._count:
            raise KeyError(key)
        index = self._find(key, fnv1a(key))
        if (entry := self._entries[index]) is None:
            raise KeyError(key)
        return entry.value

    def __contains__(self, key):
        try:
            self[key]
        except KeyError:
            return False
        return True

    def __iter__(self):
        for entry in self._entries:
            if entry is not None:
                yield entry.key

    def __len__(self):
        return self._count

    def __repr__(self):
        return "StringMap(%r)" % dict(self.items())


__all__ = (
    # Containers used by the parser; exported for hosts that want the same semantics.

    # Classes
    "Vector",
    "StringMap",

    # Functions
    "fnv1a",

    # Exceptions
    "CapacityError",
)
