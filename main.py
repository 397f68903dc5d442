import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import pprint

from cmdtree import *

engine = {"running": False, "units": []}

shell = Parser(engine)


@shell.command(usage="[-v]")
def status(self, tokens, output):
    """print the engine status"""
    output.println("engine is %s", "running" if self.user["running"] else "stopped")
    if tokens.flag("-v"):
        with output.indent(2):
            for unit in self.user["units"]:
                output.println("unit %s", unit)
    return True


@shell.command(usage="[-n <count>] <unit>...")
def start(self, tokens, output):
    """start one or more units"""
    if not tokens:
        return self.error(output, "missing unit")
    count = Token(tokens.pair("-n") or "1").as_int()
    if count is None or count < 1:
        return self.error(output, "invalid count %r", tokens.pair("-n"))
    while (unit := tokens.take()) is not None:
        self.user["units"].extend([unit] * count)
    self.user["running"] = True
    output.println("started %d unit(s)", len(self.user["units"]))
    return True


@shell.command
def stop(self, tokens, output):
    """stop every unit"""
    self.user["units"].clear()
    self.user["running"] = False
    output.println("stopped")
    return True


disk = shell.group("disk", descr="disk utilities")


@disk.command(usage="<address>")
def read(self, tokens, output):
    """read one word at an address"""
    if (address := tokens.take_int(signed=False)) is None:
        return self.error(output, "missing or invalid address")
    output.println("0x%016x: 0x%08x", address, address * 2654435761 & 0xFFFFFFFF)
    return True


@disk.command(usage="<name>")
def mount(self, tokens, output):
    """mount a volume"""
    if (name := tokens.take()) is None:
        return self.error(output, "missing volume name")
    output.println("mounted %s", name)
    return True


@shell.command
def aliases(self, tokens, output):
    """list the registered aliases"""
    return self.parser.print_aliases(output)


@shell.command(usage="<name> <value>")
def let(self, tokens, output):
    """bind $name to an integer"""
    name, value = tokens.take(), tokens.take_int()
    if name is None or value is None:
        return self.error(output, "expected a name and an integer")
    self.parser.ident(name, value)
    return True


@shell.command
def tree(self, tokens, output):
    """pretty-print the command tree"""
    for root in self.parser.commands:
        pprint(root, console=getattr(output, "console", None), expand_all=True)
    return True


status.alias("s")
shell.find("disk mount").alias("m")


if __name__ == '__main__':
    console = Console()
    if "--debug" in sys.argv[1:]:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, rich_tracebacks=True)],
        )

    output = ConsoleOutput(console, indent=0, colorful=True)
    while True:
        try:
            line = console.input("[bold]cmdtree>[/bold] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if line.strip() in ("exit", "quit"):
            break
        if not shell.execute(line, output) and shell.fault is not None:
            logging.getLogger("cmdtree.main").debug("fault %s: %r", shell.fault.code.normalize(), shell.fault)
