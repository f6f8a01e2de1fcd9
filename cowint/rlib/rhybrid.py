"""
Hybrid vectors: array semantics over either a small inline slot array
or, once more items are needed, a copy-on-write SharedBuffer.

The switch from inline to shared storage happens at most once per
vector and is never undone, even if the vector shrinks again.
"""

import py

from cowint.rlib.rarithmetic import POINTER_SIZE, LIMB_SIZE, inline_capacity
from cowint.rlib.rshared import SharedBuffer

log = py.log.Producer("rhybrid")
py.log.setconsumer("rhybrid", None)


class InlineStorage(object):
    """Fixed number of slots kept directly in the owning vector."""
    __slots__ = ('slots',)

    def __init__(self, capacity):
        self.slots = [None] * capacity


class HybridVector(object):
    """Array of items stored inline up to 'capacity' items, in a
    SharedBuffer beyond that.  Copies of a shared vector are O(1)."""

    ITEMSIZE = POINTER_SIZE
    CAPACITY = 0        # 0: as many items as fit in a shared handle

    def __init__(self, items=(), capacity=None):
        items = list(items)
        if capacity is None:
            capacity = self.default_capacity()
        if capacity < 1:
            raise ValueError("inline capacity must be at least 1, got %d"
                             % (capacity,))
        self._capacity = capacity
        self._size = len(items)
        if self._size > capacity:
            self._storage = SharedBuffer(items)
        else:
            storage = InlineStorage(capacity)
            storage.slots[:self._size] = items
            self._storage = storage

    @classmethod
    def default_capacity(cls):
        return cls.CAPACITY or inline_capacity(cls.ITEMSIZE)

    @classmethod
    def fromsize(cls, n, fill=0, capacity=None):
        return cls([fill] * n, capacity)

    def is_inline(self):
        return isinstance(self._storage, InlineStorage)

    @property
    def capacity(self):
        return self._capacity

    def refcount(self):
        """Owners of the storage; always 1 for an inline vector."""
        if self.is_inline():
            return 1
        return self._storage.refcount

    def _promote(self):
        assert self.is_inline()
        storage = self._storage
        shared = SharedBuffer(storage.slots[:self._size])
        storage.slots[:] = [None] * self._capacity
        self._storage = shared
        log.promote("%d items moved to shared storage" % (self._size,))

    # copying

    def copy(self):
        new = self.__class__.__new__(self.__class__)
        new._capacity = self._capacity
        new._size = self._size
        if self.is_inline():
            storage = InlineStorage(self._capacity)
            storage.slots[:self._size] = self._storage.slots[:self._size]
            new._storage = storage
        else:
            new._storage = self._storage.copy()
        return new
    __copy__ = copy

    def swap(self, other):
        """Exchange contents with 'other', whatever mode each one is in."""
        self._storage, other._storage = other._storage, self._storage
        self._size, other._size = other._size, self._size
        self._capacity, other._capacity = other._capacity, self._capacity

    def assign(self, other):
        """Make self equal to other; either fully succeeds or leaves
        both vectors unchanged."""
        if other is self:
            return
        tmp = other.copy()
        self.swap(tmp)
        tmp.release()

    def release(self):
        """Drop the items; the vector stays usable, empty and in the
        same mode."""
        if self.is_inline():
            self._storage.slots[:self._size] = [None] * self._size
        else:
            self._storage.release()
            self._storage = SharedBuffer()
        self._size = 0

    # read access

    def __len__(self):
        return self._size

    def _checkindex(self, i):
        if i < 0:
            i += self._size
        if not 0 <= i < self._size:
            raise IndexError("HybridVector index out of range")
        return i

    def __getitem__(self, i):
        i = self._checkindex(i)
        if self.is_inline():
            return self._storage.slots[i]
        return self._storage[i]

    def __iter__(self):
        if self.is_inline():
            return iter(self._storage.slots[:self._size])
        return iter(self._storage)

    def back(self):
        if not self._size:
            raise IndexError("back() on an empty HybridVector")
        return self[self._size - 1]

    def tolist(self):
        return list(self)

    def __eq__(self, other):
        if not isinstance(other, HybridVector):
            return NotImplemented
        if self._size != other._size:
            return False
        if not self.is_inline() and not other.is_inline():
            return self._storage == other._storage
        for a, b in zip(self, other):
            if a != b:
                return False
        return True

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    __hash__ = None

    # mutating access

    def __setitem__(self, i, value):
        i = self._checkindex(i)
        if self.is_inline():
            self._storage.slots[i] = value
        else:
            self._storage[i] = value

    def append(self, value):
        if self.is_inline():
            if self._size < self._capacity:
                self._storage.slots[self._size] = value
                self._size += 1
                return
            self._promote()
        self._storage.append(value)
        self._size += 1

    def pop(self):
        if not self._size:
            raise IndexError("pop() on an empty HybridVector")
        if self.is_inline():
            slots = self._storage.slots
            value = slots[self._size - 1]
            slots[self._size - 1] = None
        else:
            value = self._storage.pop()
        self._size -= 1
        return value

    def resize(self, n, fill=0):
        if n < 0:
            raise ValueError("negative size %d" % (n,))
        if n == self._size:
            return
        if n > self._size:
            if self.is_inline() and n > self._capacity:
                self._promote()
            if self.is_inline():
                slots = self._storage.slots
                slots[self._size:n] = [fill] * (n - self._size)
            else:
                self._storage.resize(n, fill)
        else:
            if self.is_inline():
                slots = self._storage.slots
                slots[n:self._size] = [None] * (self._size - n)
            else:
                self._storage.resize(n, fill)
        self._size = n

    def __repr__(self):
        if self.is_inline():
            mode = 'inline'
        else:
            mode = 'shared refcount=%d' % (self._storage.refcount,)
        return "<%s %r %s>" % (self.__class__.__name__, self.tolist(), mode)


class LimbVector(HybridVector):
    """Hybrid vector of 32-bit limbs."""
    ITEMSIZE = LIMB_SIZE
