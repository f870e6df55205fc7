r"""
Arglet options: typed, repeatable value slots and strict numeric conversion.

Overview
- Kind: the four option kinds (flag, string, integer, float). Fixed at creation.
- Option: one registered flag or option. Every match on the command line appends
  an occurrence; flags only count, the other kinds store a converted value.
  • value() is the last occurrence, or the fallback when nothing matched.
  • values() is an independent list the caller may keep after parsing.
  • Greedy string options drain the rest of the token stream once matched
    (the draining itself is done by the parser).
- parse_integer / parse_float: whole-token conversions in the manner of C's
  strtol(…, 0) and strtod. Leading whitespace is skipped, nothing may trail.

Metadata (sanitized on construction)
- kind: Kind.
- fallback: typed to match kind (str or None, 32-bit int, real number); flags
  take none.
- greedy: bool, string options only.

Faults
- Unparsable numbers raise MalformedNumberError, overflowing or underflowing
  ones raise NumberRangeError. Both are ParserException subclasses, so a parser
  in shell mode turns them into "error: ..." plus exit status 1.

Quick example:
    >>> option = Option(Kind.INTEGER, -1)
    >>> option.append("0x10")
    >>> option.value(), option.count
    (16, 1)
"""
import enum
import functools
import math
import operator
import re
import sys
from numbers import Real

from .containers import Vector
from .faults import FaultCode, MalformedNumberError, NumberRangeError
from .utils import *

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_INTEGER = re.compile(r"[ \t\n\v\f\r]*(?P<sign>[+-]?)(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))")

_FLOAT = re.compile(r"""
    [ \t\n\v\f\r]*
    (?P<literal>
        [+-]?
        (?:
            (?P<infinity>(?i:inf(?:inity)?))
          | (?P<nan>(?i:nan)(?:\([0-9A-Za-z_]*\))?)
          | (?P<hex>0[xX](?P<hexmantissa>[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?)
          | (?P<decmantissa>[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?
        )
    )
""", re.VERBOSE)


class Kind(enum.Enum):
    """
    Type of an option, which decides how its occurrences are stored.
    """
    FLAG = "flag"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"


def parse_integer(token, /):
    """
    Convert a whole token to a 32-bit signed integer.

    Accepted forms
    - optional leading whitespace and sign
    - "0x"/"0X" hexadecimal, "0"-prefixed octal, or decimal digits

    The range check runs before the trailing-characters check, so
    "99999999999x" is reported as out of range rather than malformed.

    Raises
    - NumberRangeError: the value does not fit in [-2**31, 2**31 - 1].
    - MalformedNumberError: no digits, or characters left after the number.
    """
    if not isinstance(token, str):
        raise TypeError("parse_integer() argument must be a string")

    match = _INTEGER.match(token)
    if not match:
        raise MalformedNumberError(
            "cannot parse '%s' as an integer" % token,
            code=FaultCode.MALFORMED_NUMBER,
            input=token,
        )

    if match["hex"] is not None:
        value = int(match["hex"], 16)
    elif match["oct"] is not None:
        value = int(match["oct"], 8)
    else:
        value = int(match["dec"], 10)
    if match["sign"] == "-":
        value = -value

    if not INT_MIN <= value <= INT_MAX:
        raise NumberRangeError(
            "'%s' is out of range" % token,
            code=FaultCode.NUMBER_OUT_OF_RANGE,
            input=token,
        )
    if match.end() != len(token):
        raise MalformedNumberError(
            "cannot parse '%s' as an integer" % token,
            code=FaultCode.MALFORMED_NUMBER,
            input=token,
        )
    return value


def parse_float(token, /):
    """
    Convert a whole token to a float.

    Accepted forms (case-insensitive where letters appear)
    - decimal with optional fraction and exponent: "1", "-2.5", ".5", "1e-3"
    - hexadecimal with optional binary exponent: "0x1.8p3"
    - "inf", "infinity", "nan", "nan(chars)"

    A finite literal that overflows to infinity, or a non-zero literal that
    underflows to zero or to a subnormal, is out of range.

    Raises
    - NumberRangeError, MalformedNumberError (same ordering as parse_integer).
    """
    if not isinstance(token, str):
        raise TypeError("parse_float() argument must be a string")

    match = _FLOAT.match(token)
    if not match:
        raise MalformedNumberError(
            "cannot parse '%s' as a floating-point value" % token,
            code=FaultCode.MALFORMED_NUMBER,
            input=token,
        )

    literal = match["literal"]
    sign = -1.0 if literal.startswith("-") else 1.0
    overflow = False
    if match["infinity"] is not None:
        value = math.copysign(math.inf, sign)
    elif match["nan"] is not None:
        value = math.copysign(math.nan, sign)
    elif match["hex"] is not None:
        try:
            value = float.fromhex(literal)
        except OverflowError:
            value, overflow = math.copysign(math.inf, sign), True
        nonzero = re.search(r"[1-9a-fA-F]", match["hexmantissa"]) is not None
    else:
        value = float(literal)
        nonzero = re.search(r"[1-9]", match["decmantissa"]) is not None

    if match["infinity"] is None and match["nan"] is None:
        overflow = overflow or math.isinf(value)
        underflow = nonzero and abs(value) < sys.float_info.min
        if overflow or underflow:
            raise NumberRangeError(
                "'%s' is out of range" % token,
                code=FaultCode.NUMBER_OUT_OF_RANGE,
                input=token,
            )
    if match.end() != len(token):
        raise MalformedNumberError(
            "cannot parse '%s' as a floating-point value" % token,
            code=FaultCode.MALFORMED_NUMBER,
            input=token,
        )
    return value


_CONVERTERS = {
    Kind.STRING: str,
    Kind.INTEGER: parse_integer,
    Kind.FLOAT: parse_float,
}


def _format(value, /):
    if isinstance(value, float):
        return "%f" % value
    return str(value)


class ArgumentType(type):
    """
    Metaclass giving options a stable repr and read-only metadata properties.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - every name in __introspectable__ becomes a mirror() property over "_name".
    - __displayable__ (if set) narrows which properties __rich_repr__ yields;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise representation, e.g. option(kind=<Kind.FLAG: 'flag'>, ...).
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate kind/fallback/greedy and normalize the fallback in place.

    Raises
    - TypeError: wrong kind type, fallback of the wrong type, fallback on a flag,
      greedy on a non-string kind.
    - ValueError: integer fallback outside the 32-bit signed range.
    """
    if not isinstance(kind := metadata["kind"], Kind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a Kind")

    fallback = metadata["fallback"]
    match kind:
        case Kind.FLAG:
            if fallback is not Unset:
                raise TypeError(f"flag {cls.__typename__} cannot have a 'fallback'")
            fallback = False
        case Kind.STRING:
            if not isinstance(fallback, str | None | Unset):
                raise TypeError(f"string {cls.__typename__} 'fallback' must be a string")
            fallback = coalesce(fallback)
        case Kind.INTEGER:
            if not isinstance(fallback, int | Unset) or isinstance(fallback, bool):
                raise TypeError(f"integer {cls.__typename__} 'fallback' must be an integer")
            elif not INT_MIN <= (fallback := coalesce(fallback, 0)) <= INT_MAX:
                raise ValueError(f"integer {cls.__typename__} 'fallback' is out of range")
        case Kind.FLOAT:
            if not isinstance(fallback, Real | Unset) or isinstance(fallback, bool):
                raise TypeError(f"float {cls.__typename__} 'fallback' must be a real number")
            fallback = float(coalesce(fallback, 0.0))
    metadata["fallback"] = fallback

    if metadata["greedy"] and kind is not Kind.STRING:
        raise TypeError(f"only string {cls.__typename__}s can be greedy")


class Option(metaclass=ArgumentType):
    """
    A typed, repeatable value slot owned by one parser.

    Highlights
    - One Option may be reachable through several aliases of its parser.
    - Occurrences are kept in encounter order; flags keep only a count.
    - Fallbacks: None for strings, 0 for integers, 0.0 for floats unless given.

    Properties
    - kind, fallback, greedy, occurrences (list copy), count, found.
    """

    __introspectable__ = (
        "kind",
        "fallback",
        "greedy",
        "occurrences",
    )
    __displayable__ = (
        "kind",
        "fallback",
        "greedy",
        "count",
        "occurrences",
    )

    def __new__(cls, kind, /, fallback=Unset, *, greedy=False):
        """
        Construct an Option.

        Parameters
        - kind: Kind
        - fallback: value reported while the option has no occurrence. Must be
          omitted for flags.
        - greedy: drain every remaining token once matched (strings only).
        """
        metadata = {
            "kind": kind,
            "fallback": fallback,
            "greedy": bool(greedy),
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._occurrences = Vector(minimum=4)
        self._count = 0
        return self

    @property
    def count(self):
        return self._count

    @property
    def found(self):
        return self._count > 0

    def append(self, token=Unset, /):
        """
        Record one occurrence.

        Flags take no token and only bump the count. Other kinds convert the token
        (strings are stored as-is) and store the result.

        Raises
        - MalformedNumberError / NumberRangeError for bad numeric tokens.
        - CapacityError if the occurrence list cannot grow; the count is unchanged.
        """
        if self._kind is Kind.FLAG:
            if token is not Unset:
                raise TypeError(f"flag {type(self).__typename__} does not take a value")
            self._count += 1
            return

        if not isinstance(token, str):
            raise TypeError(f"{type(self).__typename__} value must be a string")
        self._occurrences.append(_CONVERTERS[self._kind](token))
        self._count += 1

    def value(self):
        """
        Return the last occurrence, or the fallback when there is none.

        For flags this is whether the flag was found at all.
        """
        if self._kind is Kind.FLAG:
            return self.found
        if not self._count:
            return self._fallback
        return self._occurrences[-1]

    def value_at(self, index, /):
        """
        Return occurrence number index; IndexError when out of range.
        """
        if self._kind is Kind.FLAG:
            if not 0 <= operator.index(index) < self._count:
                raise IndexError("occurrence index out of range")
            return True
        return self._occurrences[index]

    def values(self):
        """
        Return every occurrence as a new list (True per match for flags).
        """
        if self._kind is Kind.FLAG:
            return [True] * self._count
        return list(self._occurrences)

    def __str__(self):
        if self._kind is Kind.FLAG:
            return str(self._count)
        return "(%s) [%s]" % (_format(self._fallback), ", ".join(map(_format, self._occurrences)))


__all__ = (
    # Public API surface for consumers of arglet.arguments.

    # Classes
    "Kind",
    "Option",

    # Functions
    "parse_integer",
    "parse_float",

    # Constants
    "INT_MIN",
    "INT_MAX",
)

# Keep the metaclass out of star-imports and documentation.
del ArgumentType
