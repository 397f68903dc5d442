"""
cmdtree command layer: the nodes of a command tree.

What this module provides
- Command: one node of the tree. It has a name, optional usage/description
  text, an opaque user baton, owned children and a back-reference to its parent.
  Two capabilities can be customized:
  • on_execute(tokens, output) -> bool   what the command does,
  • on_usage(output) -> bool             what "<command> ?" prints.
- command(...): factory/decorator turning a function or a Command subclass into
  a node.

Three ways to define a command
    from cmdtree import Command, Parser

    shell = Parser()

    # 1) a callback; it receives the node itself, the tokens and the output
    @shell.command(usage="[-v]")
    def status(self, tokens, output):
        '''print the engine status'''
        output.println("running%s", " (verbose)" if tokens.flag("-v") else "")
        return True

    # 2) a subclass; metadata is given as class keywords
    class Start(Command, name="start", usage="<unit>"):
        def on_execute(self, tokens, output):
            if (unit := tokens.take()) is None:
                return self.error(output, "missing unit")
            output.println("starting %s", unit)
            return True

    shell.command(Start)

    # 3) a branch with default behavior, filled with children
    disk = shell.group("disk", descr="disk utilities")
    disk.command(Start)

Default behavior
- A node with children lists them (or, when input remains, reports the unknown
  subcommand with suggestions) and succeeds.
- A node without children and without an execute capability fails: leaves must
  be given a behavior to do anything.

Design notes
- Children are owned top-down; the parent link is only used to build paths and
  to reach the owning parser through the root.
- Names need not be unique among siblings; ambiguity is resolved at run time.
"""
import inspect
import re
from operator import attrgetter
from types import MappingProxyType

from .matching import FUZZINESS, suggestions
from .messages import Messages
from .utils import Unset, coalesce, mirror, rename

_NAME = re.compile(r"[^\s;]+")
_name = attrgetter("name")


def _validate_text(cls, field, value):
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{cls.__name__} {field!r} must be a string")
    return value


class Command:
    """
    Node of a command tree.

    Parameters
    - name: str
      command name; non-empty, no whitespace. Subclasses may declare it as a
      class keyword instead (class Start(Command, name="start")).
    - parent: Command | None
      parent node; the new node is appended to its children.
    - user: Any
      opaque baton for the command body; defaults to the parent's baton.
    - usage, descr: str | None
      usage text (after the command path) and one-line description.
    - callback: Callable[[Command, Tokens, Output], bool]
      execute capability, used unless on_execute is overridden.

    Raises
    - TypeError/ValueError on malformed metadata or parents.
    """

    # Class keyword defaults (name/usage/descr), merged along the hierarchy.
    __metadata__ = MappingProxyType({})

    def __init_subclass__(cls, /, name=Unset, usage=Unset, descr=Unset, **options):
        super().__init_subclass__(**options)
        declared = {"name": name, "usage": usage, "descr": descr}
        cls.__metadata__ = MappingProxyType(dict(cls.__metadata__) | {
            key: value for key, value in declared.items() if value is not Unset
        })

    def __init__(self, name=Unset, /, parent=None, user=Unset, usage=Unset, descr=Unset, callback=Unset):
        cls = type(self)
        name = coalesce(name, cls.__metadata__.get("name", Unset))
        if name is Unset:
            raise TypeError(f"{cls.__name__} requires a name")
        if not isinstance(name, str):
            raise TypeError(f"{cls.__name__} 'name' must be a string")
        if not _NAME.fullmatch(name):
            raise ValueError(f"{cls.__name__} name {name!r} must be non-empty and free of whitespace and ';'")
        if parent is not None and not isinstance(parent, Command):
            raise TypeError(f"{cls.__name__} 'parent' must be a command")
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__name__} callback must be callable")

        self._name = name
        self._usage = _validate_text(cls, "usage", coalesce(usage, cls.__metadata__.get("usage")))
        self._descr = _validate_text(cls, "descr", coalesce(descr, cls.__metadata__.get("descr")))
        self._user = coalesce(user, parent.user if parent is not None else None)
        self._parent = parent
        self._children = []
        self._callback = callback
        self._reporter = Unset
        self._parser = None

        if parent is not None:
            parent._children.append(self)

    name = mirror("name")
    usage = mirror("usage")
    descr = mirror("descr")
    parent = mirror("parent")
    children = mirror("children")

    @property
    def user(self):
        """
        Opaque baton given at construction; returned as-is, never copied.
        """
        return self._user

    @property
    def root(self):
        """
        Topmost node of this command's tree.
        """
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def path(self):
        """
        Ancestry from the root to this node, as a tuple.
        """
        path = [node := self]
        while node._parent is not None:
            path.append(node := node._parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        Space-joined command path, as typed by the user ("disk mount").
        """
        return " ".join(node.name for node in self.path)

    @property
    def parser(self):
        """
        Owning parser (reached through the root), or None for detached trees.
        """
        return self.root._parser

    def walk(self):
        """
        Yield this node and all its descendants, depth first, in declaration order.
        """
        yield self
        for child in self._children:
            yield from child.walk()

    def __repr__(self):
        return "command(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "usage", self._usage
        yield "descr", self._descr
        yield "parent", getattr(self._parent, "name", None)
        yield "children", [child.name for child in self._children]

    # ── tree building ───────────────────────────────────────────────────────

    def command(self, source=Unset, /, **metadata):
        """
        Create a child command (see the module-level command()).
        """
        return command(source, parent=self, **metadata)

    def group(self, name, /, **metadata):
        """
        Create a child with default behavior, meant to hold subcommands.
        """
        return Command(name, parent=self, **metadata)

    def remove(self, child, /):
        """
        Detach a child; aliases to it or to any node below it are retired.
        """
        if not any(node is child for node in self._children):
            raise ValueError(f"{child!r} is not a child of {self.route!r}")
        if (parser := self.parser) is not None:
            for node in child.walk():
                parser.alias_discard(node)
        self._children = [node for node in self._children if node is not child]
        child._parent = None
        return child

    def reporter(self, reporter, /):
        """
        Register a one-time usage capability: reporter(command, output) -> bool.

        Returns the same callable, so it can be used as a decorator.
        """
        if not callable(reporter):
            raise TypeError(f"{type(self).__name__} reporter must be callable")
        if self._reporter is not Unset:
            raise TypeError(f"{type(self).__name__} reporter cannot be overridden")
        self._reporter = reporter
        return reporter

    def alias(self, name, /):
        """
        Register `name` as a shortcut to this command in the owning parser.
        """
        if (parser := self.parser) is None:
            raise ValueError(f"command {self.route!r} is not attached to a parser")
        return parser.alias_add(self, name)

    # ── capabilities ────────────────────────────────────────────────────────

    def on_execute(self, tokens, output):
        """
        Execute the command; returns True when the input was handled.

        The default runs the callback when one was given. Otherwise a branch
        node reports its subcommands (success) and a leaf fails. A branch only
        reports an unknown subcommand for a word typed right after its name;
        after a switch it lists its children instead.
        """
        if self._callback is not Unset:
            return bool(self._callback(self, tokens, output))

        if not self._children:
            return False

        messages, fuzziness = self._settings()
        if tokens.aligned():
            token = tokens.front
            messages.no_subcommand(output, token)
            if similar := suggestions(self._children, token, fuzziness, key=_name):
                messages.did_you_mean(output, [node.name for node in similar])
        else:
            self.print_children(output)
        return True

    def on_usage(self, output):
        """
        Print usage for this command: path and usage text, description and
        subcommands. Returns True when written.
        """
        if self._reporter is not Unset:
            return bool(self._reporter(self, output))

        messages, _ = self._settings()
        with output.indent(2):
            messages.usage(output, self.route, self._usage, self._descr)
            if self._children:
                messages.subcommands(output)
                self.print_children(output)
        return True

    # ── helpers for command bodies ──────────────────────────────────────────

    def error(self, output, template, /, *args):
        """
        Report a domain error and return False (return self.error(...)).
        """
        messages, _ = self._settings()
        messages.error(output, template % args if args else template)
        return False

    def print_children(self, output):
        messages, _ = self._settings()
        messages.names(output, [node.name for node in self._children])

    def _settings(self):
        parser = self.parser
        if parser is None:
            return Messages(), FUZZINESS
        return parser.messages, parser.fuzziness


def command(source=Unset, /, **metadata):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Callback:
        node = command(func, parent=..., usage=...)
      The function becomes the execute capability; the name defaults to
      func.__name__ and the description to the first line of its docstring.
    - Subclass:
        node = command(Start, parent=...)
      Instantiates the Command subclass with the given metadata.
    - Decorator:
        @command(parent=..., name="x")
        def func(self, tokens, output): ...

    Returns
    - Command | Callable[[Callable | type[Command]], Command]
    """
    @rename("command")
    def wrapper(source, /):
        options = dict(metadata)
        if isinstance(source, type) and issubclass(source, Command):
            name = options.pop("name", Unset)
            return source(name, **options)
        if callable(source):
            name = options.pop("name", getattr(source, "__name__", Unset))
            if "descr" not in options:
                options["descr"] = (inspect.getdoc(source) or "").partition("\n")[0] or Unset
            return Command(name, callback=source, **options)
        raise TypeError("@command() must be applied to a callable or a command type")

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "command",
)
