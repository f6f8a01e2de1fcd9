"""
Reference-counted element arrays with copy-on-write.

Several SharedBuffer handles may point to the same storage record.
Reading never copies; every mutating entry point first makes sure
the handle is the only owner of its storage, cloning it otherwise.
"""

import py

log = py.log.Producer("rshared")
py.log.setconsumer("rshared", None)


class _Storage(object):
    __slots__ = ('items', 'refcount')

    def __init__(self, items):
        self.items = items
        self.refcount = 1


class SharedBuffer(object):
    """A handle on a shared, reference-counted list of items.
    Not safe to share between threads: the counter is unsynchronized."""

    def __init__(self, items=()):
        self._data = _Storage(list(items))

    @classmethod
    def _fromstorage(cls, data):
        self = cls.__new__(cls)
        data.refcount += 1
        self._data = data
        return self

    def copy(self):
        """Return a new handle on the same storage."""
        return self._fromstorage(self._check_alive())
    __copy__ = copy

    def release(self):
        data = self.__dict__.get('_data')
        if data is not None:
            data.refcount -= 1
            self._data = None

    def __del__(self):
        self.release()

    def _check_alive(self):
        data = self._data
        if data is None:
            raise ValueError("operation on a released SharedBuffer")
        return data

    @property
    def refcount(self):
        return self._check_alive().refcount

    def is_shared(self):
        return self.refcount > 1

    def _own(self):
        data = self._check_alive()
        if data.refcount > 1:
            # copy first: if this fails the shared record is untouched
            newdata = _Storage(list(data.items))
            data.refcount -= 1
            self._data = newdata
            log.clone("%d items, %d other owner(s) left" % (
                len(newdata.items), data.refcount))
            return newdata
        return data

    # read access

    def __len__(self):
        return len(self._check_alive().items)

    def __getitem__(self, i):
        return self._check_alive().items[i]

    def __iter__(self):
        return iter(self._check_alive().items)

    def back(self):
        items = self._check_alive().items
        if not items:
            raise IndexError("back() on an empty SharedBuffer")
        return items[-1]

    def tolist(self):
        return list(self._check_alive().items)

    def __eq__(self, other):
        if not isinstance(other, SharedBuffer):
            return NotImplemented
        mine = self._check_alive()
        theirs = other._check_alive()
        return mine is theirs or mine.items == theirs.items

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    __hash__ = None

    # mutating access

    def __setitem__(self, i, value):
        items = self._check_alive().items
        items[i]        # IndexError before cloning anything
        self._own().items[i] = value

    def append(self, value):
        self._own().items.append(value)

    def pop(self):
        if not len(self):
            raise IndexError("pop() on an empty SharedBuffer")
        return self._own().items.pop()

    def resize(self, n, fill=0):
        if n < 0:
            raise ValueError("negative size %d" % (n,))
        size = len(self)
        if n == size:
            return
        data = self._own()
        if n < size:
            del data.items[n:]
        else:
            data.items.extend([fill] * (n - size))

    def swap(self, other):
        self._data, other._data = other._data, self._data

    def __repr__(self):
        data = self._data
        if data is None:
            return "<SharedBuffer released>"
        return "<SharedBuffer %r refcount=%d>" % (data.items, data.refcount)
