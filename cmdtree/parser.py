"""
cmdtree parser: resolves user input to a command and dispatches it.

Pipeline for one call of Parser.execute(expression, output)
1. split the expression into statements on the delimiter (';');
2. for each statement, in order:
   • append it to the history,
   • tokenize it into a Tokens set (a blank statement replays the last
     non-blank one, echoed first as "> statement"),
   • resolve the command:
       - an alias matching the leading token jumps straight to its node,
       - otherwise walk the tree level by level with prefix matching; a tie
         aborts the statement with the list of possible completions,
   • run "<command> ... ?" as a usage request, anything else through
     on_execute(tokens, output);
3. stop at the first failing statement and report it.

Failures are never raised: every step returns a success flag, prints guidance
through the message catalog and records a fault object on Parser.fault.
"""
import logging
from operator import attrgetter

from .aliases import AliasTable
from .commands import Command, command
from .faults import (
    AmbiguousCommandError,
    DelegatedCommandError,
    EmptyHistoryError,
    StatementFailedError,
    UnknownCommandError,
)
from .matching import FUZZINESS, best_matches, suggestions
from .messages import Messages
from .tokens import Tokens, split_statements, tokenize
from .utils import Unset, mirror, rename

logger = logging.getLogger(__name__)

_name = attrgetter("name")


class Parser:
    """
    Root of a command hierarchy and owner of one shell session.

    Parameters
    - user: Any
      baton handed to root commands unless they are given their own.
    - delimiter: str
      statement separator (';' by default).
    - fuzziness: int
      names closer than this edit distance are suggested on a miss.
    - messages: Messages
      message catalog (defaults to the English one).

    Session state (per instance, never shared)
    - commands  root command list, in declaration order,
    - aliases   AliasTable,
    - history   every attempted statement, blank ones included,
    - idents    identifier table for "$name" substitution,
    - fault     fault recorded by the last execute() (None on success).
    """

    def __init__(self, user=None, /, *, delimiter=";", fuzziness=FUZZINESS, messages=Unset):
        if not isinstance(delimiter, str) or not delimiter or delimiter.isspace():
            raise ValueError("parser delimiter must be a non-blank string")
        if not isinstance(fuzziness, int) or fuzziness < 0:
            raise ValueError("parser fuzziness must be a non-negative integer")
        self.user = user
        self.delimiter = delimiter
        self.fuzziness = fuzziness
        self.messages = messages if messages is not Unset else Messages()
        self.idents = {}
        self.fault = None
        self._commands = []
        self._aliases = AliasTable()
        self._history = []

    commands = mirror("commands")
    history = mirror("history")

    @property
    def aliases(self):
        return self._aliases

    @property
    def last(self):
        """
        Last attempted statement, or None before any input.
        """
        return self._history[-1] if self._history else None

    # ── tree building ───────────────────────────────────────────────────────

    def add(self, node, /):
        """
        Adopt a parentless command as a root command.
        """
        if not isinstance(node, Command):
            raise TypeError("parser can only add commands")
        if node.parent is not None:
            raise ValueError(f"command {node.route!r} already has a parent")
        if node._parser is not None:
            raise ValueError(f"command {node.name!r} already belongs to a parser")
        node._parser = self
        self._commands.append(node)
        return node

    def command(self, source=Unset, /, **metadata):
        """
        Create a root command from a callback or a Command subclass, or return a
        decorator doing so (see cmdtree.commands.command).
        """
        metadata.setdefault("user", self.user)

        @rename("command")
        def wrapper(source, /):
            return self.add(command(source, **metadata))

        return wrapper(source) if source is not Unset else wrapper

    def group(self, name, /, **metadata):
        """
        Create a root command with default behavior, meant to hold subcommands.
        """
        metadata.setdefault("user", self.user)
        return self.add(Command(name, **metadata))

    def remove(self, node, /):
        """
        Retire a root command and every alias to it or to its subtree.
        """
        if not any(root is node for root in self._commands):
            raise ValueError(f"{node!r} is not a root command of this parser")
        for child in node.walk():
            self._aliases.discard(child)
        self._commands = [root for root in self._commands if root is not node]
        node._parser = None
        return node

    def find(self, path, /):
        """
        Exact lookup of a space-separated command path ("disk mount").

        Returns the first node matching each name in declaration order, or None.
        """
        node = None
        candidates = self._commands
        for name in path.split():
            node = next((candidate for candidate in candidates if candidate.name == name), None)
            if node is None:
                return None
            candidates = node._children
        return node

    # ── aliases and identifiers ─────────────────────────────────────────────

    def alias_add(self, node, name, /):
        return self._aliases.add(name, node)

    def alias_remove(self, name, /):
        return self._aliases.remove(name)

    def alias_discard(self, node, /):
        return self._aliases.discard(node)

    def alias_find(self, name, /):
        return self._aliases.find(name)

    def print_aliases(self, output):
        with output.guard():
            self.messages.aliases(output, len(self._aliases))
            with output.indent(2):
                for name, node in self._aliases:
                    self.messages.alias_entry(output, name, node.route)
        return True

    def ident(self, name, value, /):
        """
        Bind "$name" to an integer for substitution in later input.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("identifier name must be a non-empty string")
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("identifier value must be an integer")
        self.idents[name] = value

    # ── execution ───────────────────────────────────────────────────────────

    def execute(self, expression, output, /):
        """
        Run every statement of `expression`; returns True when all succeeded.

        Execution stops at the first failing statement, which is reported as
        "command failed: '<statement>'"; later statements are not attempted.
        The empty expression is handled as one blank statement (history replay);
        empty statements between delimiters are skipped, so ";;" does nothing
        and succeeds.
        """
        if not isinstance(expression, str):
            raise TypeError("execute() expression must be a string")

        self.fault = None
        statements = split_statements(expression, self.delimiter)
        if not statements and self.delimiter not in expression:
            statements = [""]
        for index, statement in enumerate(statements):
            if self._execute(statement, output):
                continue
            cause = self.fault
            self.messages.command_failed(output, statement)
            self.fault = StatementFailedError(
                "statement %r failed" % statement,
                statement=statement,
                cause=cause,
                skipped=statements[index + 1:],
            )
            self.fault.__cause__ = cause
            return False
        return True

    def _execute(self, statement, output):
        previous = next((entry for entry in reversed(self._history) if entry.strip(" \t")), None)
        self._history.append(statement)

        tokens = Tokens(self.idents)
        if not tokenize(statement, tokens):
            if previous is None:
                self.messages.no_history(output)
                return self._fail(EmptyHistoryError("no previous statement to repeat"))
            logger.debug("replaying %r", previous)
            self.messages.replay(output, previous)
            return self._execute(previous, output)

        logger.debug("executing %r as %r", statement, tokens)
        if (node := self._resolve(tokens, output)) is None:
            return False

        if tokens and tokens.positionals[-1] == "?":
            logger.debug("usage request for %r", node.route)
            node.on_usage(output)
            return True

        if node.on_execute(tokens, output):
            return True
        return self._fail(DelegatedCommandError(
            "command %r reported failure" % node.route,
            command=node,
            statement=statement,
        ))

    def _resolve(self, tokens, output):
        """
        Map the leading tokens to a command node, consuming them.

        Returns None (after reporting) when the input is ambiguous or nothing
        matches at the root.
        """
        if tokens.aligned() and (node := self._aliases.find(tokens.front)) is not None:
            logger.debug("alias %r resolves to %r", tokens.front, node.route)
            tokens.pop()
            return node

        node = None
        candidates = self._commands
        while tokens.aligned():
            matches = best_matches(candidates, tokens.front, key=_name)
            if not matches:
                break
            if len(matches) > 1:
                names = [match.name for match in matches]
                self.messages.possible_completions(output, names)
                return self._fail(AmbiguousCommandError(
                    "ambiguous command %r" % tokens.front,
                    input=tokens.front,
                    candidates=names,
                    parent=node,
                ), None)
            node, = matches
            tokens.pop()
            logger.debug("descending into %r", node.route)
            candidates = node._children

        if node is not None:
            return node

        token = tokens.raw[0]
        self.messages.invalid_command(output)
        similar = []
        if tokens.aligned():
            similar = [match.name for match in suggestions(self._commands, tokens.front, self.fuzziness, key=_name)]
            if similar:
                self.messages.did_you_mean(output, similar)
        return self._fail(UnknownCommandError(
            "unknown command %r" % token,
            input=token,
            suggestions=similar,
        ), None)

    def _fail(self, fault, result=False, /):
        logger.debug("statement failed: %r", fault)
        self.fault = fault
        return result


__all__ = (
    "Parser",
)
