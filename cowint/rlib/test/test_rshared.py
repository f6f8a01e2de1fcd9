import py
import pytest

from cowint.rlib.rshared import SharedBuffer


def test_new_buffer():
    b = SharedBuffer([1, 2, 3])
    assert len(b) == 3
    assert b.refcount == 1
    assert not b.is_shared()
    assert b.tolist() == [1, 2, 3]
    assert list(b) == [1, 2, 3]
    assert b[0] == 1
    assert b[-1] == 3
    assert b.back() == 3


def test_copy_shares_storage():
    a = SharedBuffer([1, 2, 3])
    b = a.copy()
    assert a.refcount == b.refcount == 2
    assert a.is_shared() and b.is_shared()
    assert a == b
    c = b.copy()
    assert a.refcount == 3
    c.release()
    assert a.refcount == 2


def test_reads_never_clone():
    a = SharedBuffer([5, 6])
    b = a.copy()
    b[0]
    len(b)
    list(b)
    b.back()
    b == a
    assert a.refcount == 2


@pytest.mark.parametrize('mutate', [
    lambda b: b.__setitem__(0, 99),
    lambda b: b.append(7),
    lambda b: b.pop(),
    lambda b: b.resize(5, 0),
    lambda b: b.resize(1),
])
def test_mutation_clones_when_shared(mutate):
    a = SharedBuffer([1, 2, 3])
    b = a.copy()
    mutate(b)
    assert a.tolist() == [1, 2, 3]
    assert a.refcount == 1
    assert b.refcount == 1
    assert not a.is_shared()


def test_mutation_in_place_when_alone():
    a = SharedBuffer([1, 2, 3])
    a[1] = 20
    a.append(4)
    assert a.pop() == 4
    assert a.tolist() == [1, 20, 3]
    assert a.refcount == 1


def test_resize():
    a = SharedBuffer([1, 2])
    a.resize(4, 9)
    assert a.tolist() == [1, 2, 9, 9]
    a.resize(1)
    assert a.tolist() == [1]
    a.resize(1)
    assert a.tolist() == [1]
    with pytest.raises(ValueError):
        a.resize(-1)


def test_empty_errors():
    a = SharedBuffer()
    with pytest.raises(IndexError):
        a.pop()
    with pytest.raises(IndexError):
        a.back()
    with pytest.raises(IndexError):
        a[0]


def test_setitem_out_of_range_does_not_clone():
    a = SharedBuffer([1])
    b = a.copy()
    with pytest.raises(IndexError):
        b[3] = 0
    assert a.refcount == 2


def test_swap():
    a = SharedBuffer([1, 2])
    shared = a.copy()
    b = SharedBuffer([3])
    a.swap(b)
    assert a.tolist() == [3]
    assert b.tolist() == [1, 2]
    assert b.refcount == shared.refcount == 2
    assert a.refcount == 1


def test_release():
    a = SharedBuffer([1])
    b = a.copy()
    b.release()
    b.release()
    assert a.refcount == 1
    with pytest.raises(ValueError):
        len(b)
    with pytest.raises(ValueError):
        b.copy()
    assert repr(b) == "<SharedBuffer released>"


def test_garbage_collected_handle_releases():
    a = SharedBuffer([1])
    b = a.copy()
    assert a.refcount == 2
    del b
    import gc; gc.collect()
    assert a.refcount == 1


def test_unhashable():
    with pytest.raises(TypeError):
        hash(SharedBuffer())


def test_clone_is_logged():
    messages = []
    state = py.log._getstate()
    try:
        py.log.setconsumer("rshared", messages.append)
        a = SharedBuffer([1, 2])
        b = a.copy()
        b.append(3)
        b.append(4)
    finally:
        py.log._setstate(state)
    assert len(messages) == 1
    assert messages[0].keywords == ("rshared", "clone")
    assert "2 items" in messages[0].content()
