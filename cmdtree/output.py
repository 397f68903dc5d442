"""
Output sink: the only place where cmdtree writes text.

What this module provides
- Output: abstract sink used by the parser, the message catalog and command
  bodies. It brokers every line written during execution so that
  • formatting is uniform ('%' templates + positional arguments),
  • indentation is tracked per sink (indent(n) scopes restore on exit),
  • concurrent producers can claim the sink for a whole block (guard()).
- ConsoleOutput: the default backend, writing through a rich Console.

Backends only implement write(text, style); everything else is shared.

Styling
- ConsoleOutput honors styles only when colorful=True. The palette keys used by
  the message catalog are listed in STYLES and can be overridden by a
  __styles__ mapping defined in __main__.
"""
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager

from rich.console import Console
from rich.text import Text

from .utils import Unset

STYLES = {
    "error": "bold #FF4DA6",  # friendly pinky errors
    "hint": "italic #9CE19C",  # gentle green hints
    "candidate": "bold #36C5F0",  # sky-blue command names
    "usage": "bold #00E6FF",  # cyan usage header
    "description": "italic #A3A3A3",  # neutral gray
    "echo": "#737373",  # dim replayed statement
}


class Output(ABC):
    """
    Abstract output sink.

    Parameters
    - indent: int
      initial indentation level (in spaces); defaults to 2.

    Contract for subclasses
    - write(text, style) emits text verbatim (no newline added).
    """

    def __init__(self, *, indent=2):
        if not isinstance(indent, int) or indent < 0:
            raise ValueError("output indent must be a non-negative integer")
        self._lock = threading.RLock()
        self._level = indent

    @property
    def level(self):
        return self._level

    def lock(self):
        self._lock.acquire()

    def unlock(self):
        self._lock.release()

    @contextmanager
    def guard(self):
        """
        Hold the sink for a multi-line block; released on every exit path.
        """
        self.lock()
        try:
            yield self
        finally:
            self.unlock()

    @contextmanager
    def indent(self, amount=2, /):
        """
        Increase indentation by `amount` for the duration of the block.
        """
        restore = self._level
        self._level += amount
        try:
            yield self
        finally:
            self._level = restore

    @abstractmethod
    def write(self, text, style=""):
        raise NotImplementedError

    def print(self, template, /, *args, indent=True, style=""):
        """
        Emit `template % args` (just `template` without args), no line terminator.
        """
        with self.guard():
            if indent:
                self.write(" " * self._level)
            self.write(template % args if args else template, style)

    def println(self, template="", /, *args, indent=True, style=""):
        """
        Emit `template % args` followed by a line terminator.
        """
        with self.guard():
            self.print(template, *args, indent=indent, style=style)
            self.eol()

    def eol(self):
        self.write("\n")


class ConsoleOutput(Output):
    """
    Output sink backed by a rich Console.

    Parameters
    - console: rich.console.Console | Unset
      target console; defaults to a new Console on stdout.
    - indent: int
      initial indentation level.
    - colorful: bool
      apply the STYLES palette (merged with __main__.__styles__) to styled text.
    """

    def __init__(self, console=Unset, /, *, indent=2, colorful=False):
        super().__init__(indent=indent)
        self.console = console if console is not Unset else Console()
        self.colorful = bool(colorful)
        self.styles = defaultdict(str, STYLES | getattr(__import__("__main__"), "__styles__", {}))

    def write(self, text, style=""):
        style = self.styles[style] if self.colorful and style else ""
        self.console.print(Text(text, style=style, end=""), end="", soft_wrap=True, highlight=False)


__all__ = (
    "STYLES",
    "Output",
    "ConsoleOutput",
)
