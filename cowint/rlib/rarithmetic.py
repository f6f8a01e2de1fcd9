"""
This file defines the limb arithmetic the big integers are built on:

LIMB_BITS     width of one magnitude digit (a limb)
LIMB_MASK     all ones in one limb, also the largest limb value
limbmask      truncate a possibly wider value to one limb
highlimb      the carry part of a double-width value
overflow_add  tell whether a + b + carry does not fit in one limb

and the host word sizes used to decide how many items a hybrid
vector may keep inline:

LONG_BIT      bits of a machine long, big enough for a pointer
HANDLE_SIZE   bytes taken by a shared buffer handle
              (pointer + length + refcount)
"""
import struct


def _get_bitsize(typecode):
    return len(struct.pack(typecode, 1)) * 8

_long_typecode = 'l'
if _get_bitsize('P') > _get_bitsize('l'):
    _long_typecode = 'P'

LONG_BIT = _get_bitsize(_long_typecode)
LONG_MASK = (2**LONG_BIT)-1
LONG_MIN = -2**(LONG_BIT-1)
LONG_MAX = 2**(LONG_BIT-1) - 1

POINTER_SIZE = _get_bitsize('P') // 8
SIZE_T_SIZE = _get_bitsize('N') // 8
# pointer to the elements, their count, and the reference counter
HANDLE_SIZE = POINTER_SIZE + 2 * SIZE_T_SIZE

LIMB_BITS = 32
LIMB_SIZE = LIMB_BITS // 8
LIMB_BASE = 1 << LIMB_BITS
LIMB_MASK = LIMB_BASE - 1


def inline_capacity(itemsize, handle_size=HANDLE_SIZE):
    """Number of items of 'itemsize' bytes that fit where a shared
    handle would be stored; never less than one."""
    if itemsize <= 0:
        raise ValueError("itemsize must be positive, got %d" % (itemsize,))
    return max(1, handle_size // itemsize)


def is_valid_int(n):
    return LONG_MIN <= n <= LONG_MAX


def limbmask(n):
    return n & LIMB_MASK


def highlimb(n):
    """The bits of a double-width value above the low limb."""
    return n >> LIMB_BITS


def overflow_add(a, b, carry):
    """True if a + b + carry, with limbs a and b and carry 0 or 1,
    does not fit in one limb."""
    return a > LIMB_MASK - b or (carry and a + b == LIMB_MASK)


def check_limb(n):
    return 0 <= n <= LIMB_MASK


def bits_in_limb(d):
    # bit length of one limb, 0 for 0
    d_bits = 0
    while d >= 32:
        d_bits += 6
        d >>= 6
    d_bits += [
        0, 1, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4,
        5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5
        ][d]
    return d_bits
