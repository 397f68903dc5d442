"""
Token model: splitting raw input and classifying what the user typed.

What this module provides
- Token: a str with soft integer conversion ("42", "-7", "0x1f").
- Tokens: the classified argument set handed to a command. It is built by
  pushing raw strings and keeps four views over one input:
    • raw       every pushed token, in input order,
    • positionals tokens not consumed as a flag or a flag value,
    • flags     switches ("-v") not followed by a value,
    • pairs     a switch immediately followed by a value ("-x 10").
- tokenize(statement, tokens): whitespace splitting + flush marker.
- split_statements(expression, delimiter): ';'-separated statement splitting.

Classification
- A token starting with '-' opens a pending flag (closing the previous one as
  a boolean flag).
- Any other token pairs with the pending flag, or becomes a positional.
- The empty string is the flush marker: it closes a pending flag and nothing
  else. tokenize() always pushes one at the end of a statement.
- "$name" tokens are replaced by the decimal value of a known identifier before
  classification.
"""
import re
from collections import deque

from .faults import TokenOrderError

_WHITESPACE = re.compile(r"[^ \t]+")

_DIGITS = {10: frozenset("0123456789"), 16: frozenset("0123456789abcdefABCDEF")}
_MASK = (1 << 64) - 1
_SIGN = 1 << 63


class Token(str):
    """
    One whitespace-delimited unit of user input.

    A Token compares, hashes and prints like the plain string it wraps; it only
    adds integer conversion that fails softly.
    """
    __slots__ = ()

    def as_int(self, *, signed=True):
        """
        Convert to a 64-bit integer, or return None if the text is not a number.

        grammar
        - optional leading '-' (negation),
        - optional '0x' prefix (base 16, digits case-insensitive),
        - at least one digit, nothing else.

        wrapping
        - signed=True  → result in [-2**63, 2**63)
        - signed=False → result in [0, 2**64); negated values wrap (two's complement)
        """
        text = str(self)
        negative = text.startswith("-")
        if negative:
            text = text[1:]
        base = 10
        if text.startswith("0x"):
            base = 16
            text = text[2:]
        if not text or not set(text) <= _DIGITS[base]:
            return None
        value = int(text, base) & _MASK
        if negative:
            value = -value & _MASK
        if signed and value & _SIGN:
            value -= 1 << 64
        return value


class Tokens:
    """
    Classified argument set for one statement.

    Parameters
    - idents: Mapping[str, int] | None
      identifier table used for "$name" substitution (None disables it).

    Consumption
    - front / take() / take_int() read the positional queue in order.
    - flag(name) / pair(name) query switches.
    - find(text) searches the positional queue.
    - pop() is the parser's structural pop; it also advances the raw sequence
      and raises TokenOrderError when the two views disagree.
    """

    def __init__(self, idents=None, /):
        self._idents = idents
        self._raw = deque()
        self._positionals = deque()
        self._flags = set()
        self._pairs = {}
        self._pending = None

    def push(self, input, /):
        """
        Classify one raw string (the empty string flushes a pending flag).
        """
        if not input:
            if self._pending is not None:
                self._flags.add(self._pending)
                self._pending = None
            return

        # unknown identifiers stay literal
        if self._idents is not None and input.startswith("$") and input[1:] in self._idents:
            input = str(self._idents[input[1:]])

        token = Token(input)
        self._raw.append(token)

        if token.startswith("-"):
            if self._pending is not None:
                self._flags.add(self._pending)
            self._pending = token
        elif self._pending is not None:
            self._pairs[self._pending] = token
            self._pending = None
        else:
            self._positionals.append(token)

    @property
    def front(self):
        """
        Next positional token, or None when the queue is empty.
        """
        return self._positionals[0] if self._positionals else None

    def take(self):
        """
        Consume the next positional token; None when there is none left.
        """
        return self._positionals.popleft() if self._positionals else None

    def take_int(self, *, signed=True):
        """
        Consume the next positional token as an integer.

        Returns None (and consumes nothing) when the queue is empty or the
        front token is not a number.
        """
        if not self._positionals:
            return None
        value = self._positionals[0].as_int(signed=signed)
        if value is not None:
            self._positionals.popleft()
        return value

    def aligned(self):
        """
        True when the next positional token is also the next raw token, i.e. no
        switch was typed before it. Only aligned tokens may be pop()ped.
        """
        return bool(self._positionals) and bool(self._raw) and self._raw[0] == self._positionals[0]

    def pop(self):
        """
        Consume the front positional token, which must also front the raw sequence.

        Used while resolving command names and aliases: those tokens were typed
        before any switch, so both views must agree on them.
        """
        if not self._positionals:
            raise TokenOrderError("no positional token left to pop")
        if not self._raw or self._raw[0] != self._positionals[0]:
            raise TokenOrderError(
                "positional token %r is not the front of the raw input" % self._positionals[0],
                token=self._positionals[0],
                raw=list(self._raw),
            )
        self._raw.popleft()
        return self._positionals.popleft()

    def flag(self, name, /):
        return name in self._flags

    def pair(self, name, /):
        return self._pairs.get(name)

    def find(self, text, /):
        return text in self._positionals

    @property
    def positionals(self):
        return tuple(self._positionals)

    @property
    def raw(self):
        return tuple(self._raw)

    @property
    def flags(self):
        return frozenset(self._flags)

    @property
    def pairs(self):
        return dict(self._pairs)

    def __len__(self):
        return len(self._positionals)

    def __iter__(self):
        return iter(tuple(self._positionals))

    def __repr__(self):
        return "Tokens(positionals=%r, flags=%r, pairs=%r)" % (
            list(self._positionals), sorted(self._flags), self._pairs
        )


def tokenize(statement, tokens, /):
    """
    Split one statement on spaces/tabs and push every token, then the flush marker.

    Runs of whitespace collapse; a trailing token needs no trailing space.
    Returns the number of tokens pushed (flush marker excluded), 0 for blank input.
    """
    count = 0
    for match in _WHITESPACE.finditer(statement):
        tokens.push(match.group())
        count += 1
    tokens.push("")
    return count


def split_statements(expression, /, delimiter=";"):
    """
    Split an expression into statements, dropping empty ones.

    Statements are the literal text between delimiters (surrounding whitespace
    included); order is preserved.
    """
    return [statement for statement in expression.split(delimiter) if statement]


__all__ = (
    "Token",
    "Tokens",
    "tokenize",
    "split_statements",
)
