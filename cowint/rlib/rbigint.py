"""
Arbitrary precision signed integers.

A bigint is a sign and a magnitude.  The magnitude is a LimbVector of
32-bit limbs, least significant limb first.  The value zero is a
single zero limb with a positive sign; no other value has a most
significant zero limb.

A bigint never changes once built.  Every operation, the compound
assignment forms included, returns a new bigint; results that only
need the limbs of an operand share them through LimbVector.copy(),
and copy-on-write keeps the operand intact when a result is modified
while being built.  Limb loops that modify a vector in place only run
once the vector has its final size.
"""

import operator
import re

import py

from cowint.rlib.rarithmetic import LIMB_BITS, LIMB_BASE, LIMB_MASK
from cowint.rlib.rarithmetic import LONG_MASK, is_valid_int
from cowint.rlib.rarithmetic import limbmask, highlimb, overflow_add
from cowint.rlib.rarithmetic import check_limb, bits_in_limb
from cowint.rlib.rhybrid import LimbVector

log = py.log.Producer("rbigint")
py.log.setconsumer("rbigint", None)

NULLLIMB = 0
ONELIMB = 1

# Debugging limb vector access.
#
# False == no checking at all
# True == check 0 <= limb <= LIMB_MASK for every vector wrapped in a bigint
CHECK_LIMBS = False


def digits_max_for_base(base):
    dec_per_digit = 1
    while base ** dec_per_digit < LIMB_MASK:
        dec_per_digit += 1
    dec_per_digit -= 1
    return base ** dec_per_digit

DEC_MAX = digits_max_for_base(10)
DEC_PER_LIMB = len(str(DEC_MAX)) - 1

_decimal_re = re.compile(r'[+-]?[0-9]+\Z')


class InvalidFormat(ValueError):
    """A string that is not an optionally signed run of decimal digits."""

    def __init__(self, msg):
        ValueError.__init__(self, msg)
        self.msg = msg


class DivisionByZero(ZeroDivisionError):
    pass


class NegativeShiftCount(ValueError):
    pass


def _check_limbs(limbs):
    for x in limbs:
        assert isinstance(x, int) and check_limb(x), "bad limb %r" % (x,)


def _coerce(x):
    if isinstance(x, bigint):
        return x
    if isinstance(x, int):
        return bigint(x)
    return None


def _shift_count(x):
    if isinstance(x, bigint):
        return x.tolong()
    if isinstance(x, int):
        return x
    return None


class bigint(object):
    """This is an implementation of integers using a vector of limbs."""

    def __init__(self, value=0):
        if isinstance(value, bigint):
            z = value.copy()
        elif isinstance(value, str):
            z = bigint.fromdecimalstr(value)
        elif isinstance(value, int):
            if is_valid_int(value):
                z = bigint.fromint(value)
            else:
                z = bigint.fromlong(value)
        else:
            raise TypeError("cannot make a bigint from %s" %
                            (type(value).__name__,))
        self._limbs = z._limbs
        self.sign = z.sign

    @classmethod
    def _from_limbs(cls, limbs, sign=False):
        if CHECK_LIMBS:
            _check_limbs(limbs)
        self = cls.__new__(cls)
        self._limbs = limbs
        self.sign = sign
        return self

    def _normalize(self):
        _normalize_limbs(self._limbs)
        if self.iszero():
            self.sign = False

    def numlimbs(self):
        return len(self._limbs)

    def limb(self, x):
        """Return the x'th limb, as an int."""
        return self._limbs[x]

    def iszero(self):
        return len(self._limbs) == 1 and self._limbs[0] == NULLLIMB

    # ____________________________________________________________
    # construction

    @staticmethod
    def fromint(intval):
        """Build from a machine-sized integer."""
        if not isinstance(intval, int):
            raise TypeError("fromint() needs an int, got %s" %
                            (type(intval).__name__,))
        if not is_valid_int(intval):
            raise OverflowError("%d does not fit in a machine integer" %
                                (intval,))
        if intval < 0:
            sign = True
            # as an unsigned word, so that the most negative value works too
            ival = -intval & LONG_MASK
        else:
            sign = False
            ival = intval
        limbs = LimbVector()
        limbs.append(limbmask(ival))
        ival = highlimb(ival)
        while ival:
            limbs.append(limbmask(ival))
            ival = highlimb(ival)
        return bigint._from_limbs(limbs, sign)

    @staticmethod
    def fromlong(l):
        if not isinstance(l, int):
            raise TypeError("fromlong() needs an int, got %s" %
                            (type(l).__name__,))
        return bigint._from_limbs(limbs_from_nonneg_long(abs(l)), l < 0)

    @staticmethod
    def fromdecimalstr(s):
        if not isinstance(s, str):
            raise TypeError("fromdecimalstr() needs a str, got %s" %
                            (type(s).__name__,))
        if not _decimal_re.match(s):
            raise InvalidFormat("invalid literal for bigint(): %r" % (s,))
        return _decimalstr_to_bigint(s)

    # ____________________________________________________________
    # conversion

    def tolong(self):
        l = 0
        i = len(self._limbs) - 1
        while i >= 0:
            l = (l << LIMB_BITS) | self._limbs[i]
            i -= 1
        if self.sign:
            return -l
        return l

    def toint(self):
        x = self.tolong()
        if not is_valid_int(x):
            raise OverflowError("bigint too large to convert to a "
                                "machine integer")
        return x

    def str(self):
        if self.iszero():
            return "0"
        chunks = []
        limbs = self._limbs
        while not (len(limbs) == 1 and limbs[0] == NULLLIMB):
            limbs, rem = _divrem1(limbs, DEC_MAX)
            chunks.append(rem)
        output = [str(chunks.pop())]
        while chunks:
            output.append('%0*d' % (DEC_PER_LIMB, chunks.pop()))
        if self.sign:
            output.insert(0, '-')
        return ''.join(output)

    def bit_length(self):
        i = len(self._limbs)
        if self.iszero():
            return 0
        return (i - 1) * LIMB_BITS + bits_in_limb(self._limbs[i - 1])

    def storage_info(self):
        return {
            'mode': 'inline' if self._limbs.is_inline() else 'shared',
            'limbs': len(self._limbs),
            'capacity': self._limbs.capacity,
            'refcount': self._limbs.refcount(),
        }

    def copy(self):
        """O(1) when the limbs live in shared storage."""
        return bigint._from_limbs(self._limbs.copy(), self.sign)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def __str__(self):
        return self.str()

    def __repr__(self):
        return "<bigint limbs=%s, sign=%s, %s, %s>" % (
            self._limbs.tolist(), self.sign,
            'inline' if self._limbs.is_inline() else 'shared',
            self.str())

    def __int__(self):
        return self.tolong()

    def __bool__(self):
        return not self.iszero()

    # ____________________________________________________________
    # comparison

    def eq(self, other):
        return self.sign == other.sign and self._limbs == other._limbs

    def ne(self, other):
        return not self.eq(other)

    def lt(self, other):
        if self.sign != other.sign:
            return self.sign
        if self.sign:
            return _x_cmp(other._limbs, self._limbs) < 0
        return _x_cmp(self._limbs, other._limbs) < 0

    def le(self, other):
        return not other.lt(self)

    def gt(self, other):
        return other.lt(self)

    def ge(self, other):
        return not self.lt(other)

    def _make_cmp(opname):
        def cmp_method(self, other):
            other = _coerce(other)
            if other is None:
                return NotImplemented
            return getattr(self, opname)(other)
        cmp_method.__name__ = '__%s__' % (opname,)
        return cmp_method

    __eq__ = _make_cmp('eq')
    __ne__ = _make_cmp('ne')
    __lt__ = _make_cmp('lt')
    __le__ = _make_cmp('le')
    __gt__ = _make_cmp('gt')
    __ge__ = _make_cmp('ge')

    def __hash__(self):
        # equal to the hash of the int with the same value
        return hash(self.tolong())

    # ____________________________________________________________
    # arithmetic

    def add(self, other):
        return _addsub(self, other, False)

    def sub(self, other):
        return _addsub(self, other, True)

    def mul(self, other):
        z = bigint._from_limbs(_x_mul(self._limbs, other._limbs),
                               self.sign != other.sign)
        z._normalize()
        return z

    def divrem(self, other):
        """Quotient truncated toward zero and the remainder with the
        sign of self, so that self == q * other + r."""
        return _divrem(self, other)

    def divmod(self, other):
        """
        Quotient rounded toward negative infinity and the remainder with
        the sign of other.  _divrem gives a - b*trunc(a/b); to go from
        there to a - b*floor(a/b) we add b to the remainder when a and b
        have different signs and take one from the quotient:
          a   b   a rem b     a mod b
          13  10   3           3
         -13  10  -3           7
          13 -10   3          -7
         -13 -10  -3          -3
        """
        div, mod = _divrem(self, other)
        if not mod.iszero() and mod.sign != other.sign:
            mod = mod.add(other)
            div = div.sub(bigint(1))
        return div, mod

    def floordiv(self, other):
        return self.divmod(other)[0]

    def mod(self, other):
        return self.divmod(other)[1]

    def and_(self, other):
        return _bitwise(self, operator.and_, other)

    def or_(self, other):
        return _bitwise(self, operator.or_, other)

    def xor(self, other):
        return _bitwise(self, operator.xor, other)

    def neg(self):
        """Shares the limbs with self."""
        return bigint._from_limbs(self._limbs.copy(),
                                  not self.sign and not self.iszero())

    def abs(self):
        return bigint._from_limbs(self._limbs.copy(), False)

    def invert(self):
        # ~x == -x - 1
        return self.neg().sub(bigint(1))

    def lshift(self, int_other):
        if int_other < 0:
            raise NegativeShiftCount("negative shift count")
        if int_other == 0 or self.iszero():
            return self.copy()
        wordshift, remshift = divmod(int_other, LIMB_BITS)
        shifted = _muladd1(self._limbs, 1 << remshift)
        size = len(shifted)
        z = LimbVector.fromsize(wordshift + size)
        i = 0
        while i < size:
            z[wordshift + i] = shifted[i]
            i += 1
        return bigint._from_limbs(z, self.sign)

    def rshift(self, int_other):
        """Arithmetic shift: rounds toward negative infinity."""
        if int_other < 0:
            raise NegativeShiftCount("negative shift count")
        if int_other == 0:
            return self.copy()
        wordshift, remshift = divmod(int_other, LIMB_BITS)
        shifted, rem = _divrem1(self._limbs, 1 << remshift)
        lost = rem != 0
        size = len(shifted)
        i = 0
        while not lost and i < wordshift and i < size:
            lost = shifted[i] != NULLLIMB
            i += 1
        newsize = size - wordshift
        if newsize <= 0:
            z = LimbVector([NULLLIMB])
        else:
            z = LimbVector.fromsize(newsize)
            i = 0
            while i < newsize:
                z[i] = shifted[wordshift + i]
                i += 1
        z = bigint._from_limbs(z, self.sign)
        z._normalize()
        if self.sign and lost:
            z = z.sub(bigint(1))
        return z

    # ____________________________________________________________
    # ++ and --

    def increment(self):
        """++x: the value one larger."""
        return self + 1

    def decrement(self):
        return self - 1

    def post_increment(self):
        """x++: the old and the new value, as a tuple."""
        return self, self.increment()

    def post_decrement(self):
        return self, self.decrement()

    # ____________________________________________________________
    # operators
    #
    # The compound forms return a new bigint and leave self alone, so
    # after 'b = a; b += 1' only the name 'b' sees the new value.

    def _make_binop(opname):
        def binop(self, other):
            other = _coerce(other)
            if other is None:
                return NotImplemented
            return getattr(self, opname)(other)

        def rbinop(self, other):
            other = _coerce(other)
            if other is None:
                return NotImplemented
            return getattr(other, opname)(self)

        binop.__name__ = '__%s__' % (opname.rstrip('_'),)
        rbinop.__name__ = '__r%s__' % (opname.rstrip('_'),)
        return binop, rbinop

    __add__, __radd__ = _make_binop('add')
    __sub__, __rsub__ = _make_binop('sub')
    __mul__, __rmul__ = _make_binop('mul')
    __floordiv__, __rfloordiv__ = _make_binop('floordiv')
    __mod__, __rmod__ = _make_binop('mod')
    __divmod__, __rdivmod__ = _make_binop('divmod')
    __and__, __rand__ = _make_binop('and_')
    __or__, __ror__ = _make_binop('or_')
    __xor__, __rxor__ = _make_binop('xor')

    __isub__ = __sub__
    __imul__ = __mul__
    __ifloordiv__ = __floordiv__
    __imod__ = __mod__
    __iand__ = __and__
    __ior__ = __or__
    __ixor__ = __xor__

    def __iadd__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self.sign != other.sign:
            return self.add(other)
        # same sign: add into a copy of our limbs, which clones them
        # before the carry loop if they live in shared storage
        limbs = self._limbs.copy()
        _v_iadd(limbs, other._limbs)
        return bigint._from_limbs(limbs, self.sign)

    def _make_shiftop(opname):
        def shiftop(self, other):
            count = _shift_count(other)
            if count is None:
                return NotImplemented
            return getattr(self, opname)(count)

        def rshiftop(self, other):
            if not isinstance(other, int):
                return NotImplemented
            return getattr(bigint(other), opname)(self.tolong())

        return shiftop, rshiftop

    __lshift__, __rlshift__ = _make_shiftop('lshift')
    __rshift__, __rrshift__ = _make_shiftop('rshift')
    __ilshift__ = __lshift__
    __irshift__ = __rshift__

    del _make_cmp, _make_binop, _make_shiftop

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self.copy()

    def __abs__(self):
        return self.abs()

    def __invert__(self):
        return self.invert()


#_________________________________________________________________

# Helper Functions


def limbs_from_nonneg_long(l):
    limbs = LimbVector()
    while True:
        limbs.append(limbmask(l))
        l = highlimb(l)
        if not l:
            return limbs


def _normalize_limbs(limbs):
    while len(limbs) > 1 and limbs.back() == NULLLIMB:
        limbs.pop()


def _x_cmp(a, b):
    """ Compare two magnitudes, returning -1, 0 or 1. """
    size_a = len(a)
    size_b = len(b)
    if size_a != size_b:
        if size_a < size_b:
            return -1
        return 1
    i = size_a - 1
    while i >= 0:
        da = a[i]
        db = b[i]
        if da != db:
            if da < db:
                return -1
            return 1
        i -= 1
    return 0


def _addsub(a, b, negate_b):
    """ a + b, or a - b if negate_b is true.

    Same effective signs add the magnitudes; different ones subtract
    the smaller magnitude from the larger and take the sign of the
    larger operand.
    """
    bsign = b.sign != negate_b
    if a.sign == bsign:
        z = _x_add(a._limbs, b._limbs)
        sign = a.sign
    else:
        c = _x_cmp(a._limbs, b._limbs)
        if c == 0:
            return bigint()
        elif c > 0:
            z = _x_sub(a._limbs, b._limbs)
            sign = a.sign
        else:
            z = _x_sub(b._limbs, a._limbs)
            sign = bsign
    result = bigint._from_limbs(z, sign)
    result._normalize()
    return result


def _x_add(a, b):
    """ Add the absolute values of two bigints. """
    size_a = len(a)
    size_b = len(b)

    # Ensure a is the larger of the two:
    if size_a < size_b:
        a, b = b, a
        size_a, size_b = size_b, size_a
    z = LimbVector.fromsize(size_a + 1)
    carry = 0
    i = 0
    while i < size_a:
        da = a[i]
        if i < size_b:
            db = b[i]
        else:
            db = NULLLIMB
        s = da + db + carry
        if overflow_add(da, db, carry):
            carry = 1
        else:
            carry = 0
        z[i] = limbmask(s)
        i += 1
    z[i] = carry
    _normalize_limbs(z)
    return z


def _v_iadd(z, b):
    """ Add magnitude b into the limb vector z, in place.  z may be b. """
    size_b = len(b)
    size = max(len(z), size_b)
    # the only step that allocates, and clones z if it is shared
    z.resize(size + 1, NULLLIMB)
    carry = 0
    i = 0
    while i < size:
        dz = z[i]
        if i < size_b:
            db = b[i]
        else:
            db = NULLLIMB
        s = dz + db + carry
        if overflow_add(dz, db, carry):
            carry = 1
        else:
            carry = 0
        z[i] = limbmask(s)
        i += 1
    z[size] = carry
    _normalize_limbs(z)


def _x_sub(a, b):
    """ Subtract the magnitude b from the magnitude a, which must not
    be smaller. """
    size_a = len(a)
    size_b = len(b)
    z = LimbVector.fromsize(size_a)
    borrow = 0
    i = 0
    while i < size_a:
        if i < size_b:
            db = b[i]
        else:
            db = NULLLIMB
        diff = a[i] - db - borrow
        if diff < 0:
            diff += LIMB_BASE
            borrow = 1
        else:
            borrow = 0
        z[i] = diff
        i += 1
    assert borrow == 0
    _normalize_limbs(z)
    return z


def _x_mul(a, b):
    """
    Grade school multiplication, ignoring the signs.
    Returns the absolute value of the product.
    """
    size_a = len(a)
    size_b = len(b)
    z = LimbVector.fromsize(size_a + size_b)
    i = 0
    while i < size_a:
        f = a[i]
        if f == NULLLIMB:
            i += 1
            continue
        carry = 0
        j = 0
        while j < size_b:
            # fits in two limbs: (B-1) + (B-1)**2 + (B-1) == B**2 - 1
            carry += z[i + j] + f * b[j]
            z[i + j] = limbmask(carry)
            carry = highlimb(carry)
            j += 1
        z[i + size_b] = carry
        i += 1
    _normalize_limbs(z)
    return z


def _muladd1(a, n, extra=0):
    """Multiply by a single limb and add a single limb, ignoring the sign.
    """
    size_a = len(a)
    z = LimbVector.fromsize(size_a + 1)
    assert limbmask(extra) == extra
    carry = extra
    i = 0
    while i < size_a:
        carry += a[i] * n
        z[i] = limbmask(carry)
        carry = highlimb(carry)
        i += 1
    z[i] = carry
    _normalize_limbs(z)
    return z


def _divrem1(a, n):
    """
    Divide a magnitude by a non-zero limb, returning the normalized
    quotient and the remainder as a tuple.
    """
    assert 0 < n <= LIMB_MASK
    size = len(a)
    z = LimbVector.fromsize(size)
    rem = 0
    size -= 1
    while size >= 0:
        rem = (rem << LIMB_BITS) | a[size]
        hi = rem // n
        z[size] = hi
        rem -= hi * n
        size -= 1
    _normalize_limbs(z)
    return z, rem


def _trial(hi, lo, top):
    """Estimate one quotient limb from the two leading remainder limbs
    and the leading divisor limb; never too small, at most 2 too big
    once the divisor is normalized."""
    return min(((hi << LIMB_BITS) | lo) // top, LIMB_MASK)


def _window_smaller(r, j, width, dq):
    """Tell whether r[j:j+width] is smaller than the magnitude dq."""
    size_dq = len(dq)
    i = width - 1
    while i >= 0:
        dr = r[j + i]
        if i < size_dq:
            dd = dq[i]
        else:
            dd = NULLLIMB
        if dr != dd:
            return dr < dd
        i -= 1
    return False


def _window_sub(r, j, width, dq):
    """Subtract dq from r[j:j+width] in place; dq must not be larger."""
    size_dq = len(dq)
    borrow = 0
    i = 0
    while i < width:
        if i < size_dq:
            dd = dq[i]
        else:
            dd = NULLLIMB
        diff = r[j + i] - dd - borrow
        if diff < 0:
            diff += LIMB_BASE
            borrow = 1
        else:
            borrow = 0
        r[j + i] = diff
        i += 1
    assert borrow == 0


def _x_divrem(v1, w1):
    """ Unsigned bigint division with remainder -- the algorithm """
    size_w = len(w1)
    assert size_w > 1 and _x_cmp(v1, w1) >= 0

    # normalize: scale both so that the top limb of the divisor is at
    # least half the base
    f = LIMB_BASE // (w1[size_w - 1] + 1)
    log.divide("%d by %d limbs, scale %d" % (len(v1), size_w, f))
    v = _muladd1(v1, f)
    v.append(NULLLIMB)
    w = _muladd1(w1, f)
    assert len(w) == size_w
    size_v = len(v)

    a = LimbVector.fromsize(size_v - size_w)
    wtop = w[size_w - 1]
    j = size_v - size_w - 1
    while j >= 0:
        # v[j:j+size_w+1] < w * LIMB_BASE here, so q fits in one limb
        q = _trial(v[j + size_w], v[j + size_w - 1], wtop)
        wq = _muladd1(w, q)
        while _window_smaller(v, j, size_w + 1, wq):
            q -= 1
            wq = _x_sub(wq, w)
        a[j] = q
        _window_sub(v, j, size_w + 1, wq)
        j -= 1

    _normalize_limbs(a)
    _normalize_limbs(v)
    rem, unscaled = _divrem1(v, f)
    assert unscaled == 0
    return a, rem


def _divrem(a, b):
    """ Long division with remainder, top-level routine """
    if b.iszero():
        raise DivisionByZero("bigint division or modulo by zero")

    if _x_cmp(a._limbs, b._limbs) < 0:
        # |a| < |b|
        return bigint(), a.copy()
    if len(b._limbs) == 1:
        log.divide("%d limbs by a single limb" % (len(a._limbs),))
        z, urem = _divrem1(a._limbs, b._limbs[0])
        rem = LimbVector([urem])
    else:
        z, rem = _x_divrem(a._limbs, b._limbs)
    # The quotient z has the sign of a*b;
    # the remainder r has the sign of a,
    # so a = b*z + r.
    z = bigint._from_limbs(z, a.sign != b.sign)
    z._normalize()
    rem = bigint._from_limbs(rem, a.sign)
    rem._normalize()
    return z, rem


def _complement(limbs):
    """Invert every limb and add one, keeping the carry out of the top
    as one more limb."""
    size = len(limbs)
    z = LimbVector.fromsize(size + 1)
    carry = 1
    i = 0
    while i < size:
        carry += (~limbs[i]) & LIMB_MASK
        z[i] = limbmask(carry)
        carry = highlimb(carry)
        i += 1
    z[size] = carry
    return z


def _twos(a):
    """Two's complement limbs of a, and the value of every limb beyond
    them: NULLLIMB for a >= 0, LIMB_MASK for a < 0."""
    if not a.sign:
        return a._limbs, NULLLIMB
    z = _complement(a._limbs)
    # a != 0, so nothing was carried out of the top
    z.pop()
    return z, LIMB_MASK


def _bitwise(a, op, b):
    """ Bitwise and/or/xor: op is operator.and_, or_ or xor. """
    la, exta = _twos(a)
    lb, extb = _twos(b)
    size_a = len(la)
    size_b = len(lb)
    size_z = max(size_a, size_b)

    z = LimbVector.fromsize(size_z)
    i = 0
    while i < size_z:
        if i < size_a:
            diga = la[i]
        else:
            diga = exta
        if i < size_b:
            digb = lb[i]
        else:
            digb = extb
        z[i] = op(diga, digb)
        i += 1

    negz = bool(op(a.sign, b.sign))
    if negz:
        # back from two's complement to a magnitude
        z = _complement(z)
    result = bigint._from_limbs(z, negz)
    result._normalize()
    return result


def _decimalstr_to_bigint(s):
    # a string that has been already checked to be decimal
    # is turned into a bigint
    p = 0
    lim = len(s)
    sign = False
    if s[p] == '-':
        sign = True
        p += 1
    elif s[p] == '+':
        p += 1

    a = LimbVector([NULLLIMB])
    tens = 1
    dig = 0
    ord0 = ord('0')
    while p < lim:
        dig = dig * 10 + ord(s[p]) - ord0
        p += 1
        tens *= 10
        if tens == DEC_MAX or p == lim:
            a = _muladd1(a, tens, dig)
            tens = 1
            dig = 0
    z = bigint._from_limbs(a, sign)
    z._normalize()
    return z
