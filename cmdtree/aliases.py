"""
Alias table: shortcut names resolving straight to a command node.

Aliases never own their targets. Entries are held through weak references, so a
node that is dropped by its tree and garbage collected disappears from the
table as well; retiring a node explicitly goes through discard(node).
"""
import weakref

from .commands import Command


class AliasTable:
    """
    Mapping of alias name → Command, in insertion order.
    """

    def __init__(self):
        self._entries = weakref.WeakValueDictionary()

    def add(self, name, node, /):
        """
        Map `name` to `node`, replacing any previous target of that name.
        """
        if not isinstance(name, str):
            raise TypeError("alias name must be a string")
        if not name or name != name.strip() or any(char in name for char in " \t;"):
            raise ValueError(f"alias name {name!r} must be non-empty and free of whitespace and ';'")
        if not isinstance(node, Command):
            raise TypeError("alias target must be a command")
        self._entries[name] = node
        return True

    def remove(self, name, /):
        """
        Remove one alias by name; returns whether it existed.
        """
        try:
            del self._entries[name]
        except KeyError:
            return False
        return True

    def discard(self, node, /):
        """
        Remove every alias pointing at `node`. Always succeeds, even with no match.
        """
        for name in [name for name, target in self._entries.items() if target is node]:
            del self._entries[name]
        return True

    def find(self, name, /):
        return self._entries.get(name)

    def __contains__(self, name):
        return name in self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries.items()))

    def __repr__(self):
        return "AliasTable(%s)" % ", ".join("%s=%r" % (name, node.route) for name, node in self)


__all__ = (
    "AliasTable",
)
