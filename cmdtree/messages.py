"""
Message catalog: every user-facing phrase the engine prints.

The engine never spells out text itself; it calls a Messages instance, which
renders a template through an Output sink. Hosts localize or rephrase by
- passing their own templates: Messages({"invalid-command": "..."}),
- subclassing Messages and overriding single methods,
- or defining a __messages__ mapping in __main__ (applied to every instance).

Templates use '%' placeholders; the argument order of each entry is fixed and
documented in TEMPLATES. An override must take as many arguments as the entry it
replaces, which Messages checks when it is built.
"""
import re
from types import MappingProxyType

TEMPLATES = MappingProxyType({
    "invalid-command": "invalid command",
    "possible-completions": "possible completions:",
    "no-subcommand": "no subcommand '%s'",  # token
    "did-you-mean": "did you mean:",
    "usage": "usage: %s %s",  # command path, usage text
    "description": "desc:  %s",  # description
    "subcommands": "subcommands:",
    "alias-count": "%d alias:",  # count (exactly one)
    "aliases-count": "%d aliases:",  # count
    "no-aliases": "no aliases",
    "alias-entry": "%s -> %s",  # alias, command path
    "command-failed": "command failed: '%s'",  # statement
    "no-history": "no previous command to repeat",
    "replay": "> %s",  # statement
    "error": "error: %s",  # message
})

# One printf-style conversion ("%%" is a literal percent sign).
_CONVERSION = re.compile(r"%[-#0 +]*(?:\*|\d+)?(?:\.(?:\*|\d+))?[diouxXeEfFgGcrsa%]")


def _placeholders(template):
    """
    Sample arguments matching the conversions of `template` (0 for numbers).
    """
    conversions = [match.group() for match in _CONVERSION.finditer(template) if match.group() != "%%"]
    return tuple(0 if conversion[-1] in "diouxXeEfFgGc" else "" for conversion in conversions)


class Messages:
    """
    Default (English) catalog.

    Parameters
    - templates: Mapping[str, str]
      overrides merged over TEMPLATES and __main__.__messages__.

    Raises
    - ValueError when an override names an unknown entry or takes a different
      number of arguments than the entry it replaces.
    """

    def __init__(self, templates=MappingProxyType({}), /):
        overrides = dict(getattr(__import__("__main__"), "__messages__", {})) | dict(templates)
        for key, template in overrides.items():
            if key not in TEMPLATES:
                raise ValueError(f"unknown message {key!r}")
            if not isinstance(template, str):
                raise TypeError(f"message {key!r} must be a string")
            arguments = _placeholders(TEMPLATES[key])
            problem = f"message {key!r} takes {len(arguments)} argument(s), got template {template!r}"
            if len(_placeholders(template)) != len(arguments):
                raise ValueError(problem)
            try:
                template % arguments
            except (TypeError, ValueError, KeyError) as error:
                raise ValueError(problem) from error
        self.templates = dict(TEMPLATES) | overrides

    def _emit(self, output, key, *args, style=""):
        output.println(self.templates[key], *args, style=style)

    def invalid_command(self, output):
        self._emit(output, "invalid-command", style="error")

    def possible_completions(self, output, names):
        self._emit(output, "possible-completions", style="hint")
        self.names(output, names)

    def no_subcommand(self, output, token):
        self._emit(output, "no-subcommand", token, style="error")

    def did_you_mean(self, output, names):
        self._emit(output, "did-you-mean", style="hint")
        self.names(output, names)

    def usage(self, output, path, usage, descr):
        self._emit(output, "usage", path, usage or "", style="usage")
        if descr:
            self._emit(output, "description", descr, style="description")

    def subcommands(self, output):
        self._emit(output, "subcommands")

    def aliases(self, output, count):
        if count:
            self._emit(output, "alias-count" if count == 1 else "aliases-count", count)
        else:
            self._emit(output, "no-aliases")

    def alias_entry(self, output, name, path):
        self._emit(output, "alias-entry", name, path)

    def command_failed(self, output, statement):
        self._emit(output, "command-failed", statement, style="error")

    def no_history(self, output):
        self._emit(output, "no-history", style="error")

    def replay(self, output, statement):
        self._emit(output, "replay", statement, style="echo")

    def error(self, output, message):
        self._emit(output, "error", message, style="error")

    def names(self, output, names):
        """
        Indented list of command names.
        """
        with output.indent(2):
            for name in names:
                output.println("%s", name, style="candidate")


__all__ = (
    "TEMPLATES",
    "Messages",
)
