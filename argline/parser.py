"""
Argline parser: declare arguments, scan tokens, read resolved values.

What this module provides
- Parser: owns the ordered registry of ArgumentSpec and the display strings
  (program, usage, description, epilog). One parse pass mutates the specs in
  place; the getters read them back by name.
- new_parser(...): functional alias for Parser(...).

Token shapes (one token per step, no lookahead)
- "--name" / "--name=value": long form, matched by exact name.
- "-xyz" / "-xyz=value": short cluster, every character matched by symbol.
- "name" / "name=value": bare form, matched like the long form; the name part
  is echoed to standard output.
Unknown tokens are ignored. Key-value payloads attach only through "=".

Quick start
    from argline import Parser

    parser = Parser("tool", "usage: tool [options]", "does things", "bye")
    parser.declare_key_value("o", "output", default="out.txt", help="output file")
    parser.declare_flag("v", "verbose", "chatty output")
    parser.parse(["--output=result.txt", "-v"])

    parser.get_key_value("output")  # "result.txt"
    parser.get_flag("verbose")      # True

Compatibility mode (compat=True, the default) keeps two observed behaviours:
- a short cluster "-ab=X" hands X to every key-value symbol in it.
- print_help(group=True) does not group anything.
With compat=False only the last key-value symbol of a cluster receives the
value, and help is grouped by kind.
"""
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.text import Text

from .arguments import ArgumentKind, ArgumentSpec
from .faults import *
from .utils import *

_FLAG_VALUE = "true"


def _split(token):
    # "name=value" -> ("name", "value"); "name" -> ("name", None)
    name, separator, value = token.partition("=")
    return name, value if separator else None


def _sanitize_strings(metadata, /):
    for name, object in metadata.items():
        if not isinstance(object, str | Text | None):
            raise TypeError(f"parser {name!r} must be a string")


class Parser:
    """
    Declarative command-line argument parser.

    Lifecycle
    - constructed empty; with helper=True a ("h", "help") flag is declared first.
    - arguments declared through declare_flag/declare_key_value/declare_positional.
    - parse() scans the tokens once, then validates required specs and
      substitutes defaults.
    - values read through get_flag/get_key_value/get_positional any number of times.
    - close() (or leaving a `with` block) releases the registry.

    Runtime options (keyword-only)
    - shell: print faults on stderr and exit(1) instead of raising them.
    - deferred: report every missing required argument at once (ParseExit).
    - colorful: style help and fault output.
    - compat: keep the cluster-value and help-grouping behaviours (see module doc).
    - styles: mapping of palette overrides for help and faults.
    - console: rich Console used for help and the bare-token echo (stdout by default).
    """

    program = mirror("program")
    usage = mirror("usage")
    description = mirror("description")
    epilog = mirror("epilog")
    arguments = mirror("arguments")
    shell = mirror("shell")
    deferred = mirror("deferred")
    colorful = mirror("colorful")
    compat = mirror("compat")
    styles = mirror("styles")

    def __init__(
            self,
            program,
            usage=None,
            description=None,
            epilog=None,
            helper=True,
            *,
            shell=True,
            deferred=False,
            colorful=True,
            compat=True,
            styles=Unset,
            console=Unset,
    ):
        strings = {
            "program": program,
            "usage": usage,
            "description": description,
            "epilog": epilog,
        }
        _sanitize_strings(strings)
        for name, object in strings.items():
            setattr(self, "_" + name, object)

        if not isinstance(console, Console | UnsetType):
            raise TypeError("parser 'console' must be a rich console")

        self._arguments = []
        self._shell = bool(shell)
        self._deferred = bool(deferred)
        self._colorful = bool(colorful)
        self._compat = bool(compat)
        self._styles = dict(styles or {})
        self._console = coalesce(console, Console())

        if helper:
            self.declare_flag("h", "help", "Shows this help menu")

    # --- declarations ---

    def _declare(self, *args, **kwargs):
        self._arguments.append(spec := ArgumentSpec(*args, **kwargs))
        return spec

    def declare_flag(self, symbol, name, help=None):
        """
        Declare a presence-only switch; returns the new spec.
        """
        return self._declare(ArgumentKind.FLAG, name, symbol, help=help)

    def declare_key_value(self, symbol, name, required=False, default=None, help=None):
        """
        Declare a named option whose value is attached with "=".
        """
        return self._declare(ArgumentKind.KEY_VALUE, name, symbol, required=required, default=default, help=help)

    def declare_positional(self, symbol, name, required=False, arity=1, default=None, help=None):
        """
        Declare a positional argument matched by its literal name.

        arity is stored but only single-value matching is performed: a match
        always fills the first slot.
        """
        return self._declare(
            ArgumentKind.POSITIONAL, name, symbol, required=required, arity=arity, default=default, help=help
        )

    # --- lookup ---

    def _find(self, name):
        for spec in self._arguments:
            if spec.name == name:
                return spec
        return None

    def _find_symbol(self, symbol):
        # positionals are never reachable through a short symbol
        for spec in self._arguments:
            if spec.symbol == symbol and spec.kind is not ArgumentKind.POSITIONAL:
                return spec
        return None

    def __getitem__(self, name):
        if (spec := self._find(name)) is None:
            raise KeyError(name)
        return spec

    def __contains__(self, name):
        return self._find(name) is not None

    def __iter__(self):
        return iter(tuple(self._arguments))

    def __len__(self):
        return len(self._arguments)

    # --- parsing ---

    def _match_name(self, name, value):
        if (spec := self._find(name)) is None:
            return
        spec.assign(_FLAG_VALUE if spec.kind is ArgumentKind.FLAG else value)

    def _match_cluster(self, symbols, value):
        specs = [spec for spec in map(self._find_symbol, symbols) if spec is not None]

        if self._compat:
            owner = None
        else:
            # only the last key-value of the cluster owns the trailing value
            owner = next((spec for spec in reversed(specs) if spec.kind is ArgumentKind.KEY_VALUE), None)

        for spec in specs:
            if spec.kind is ArgumentKind.FLAG:
                spec.assign(_FLAG_VALUE)
            elif owner is None or spec is owner:
                spec.assign(value)

    def _tokenize(self, tokens):
        if tokens is Unset:
            return sys.argv[1:]
        if isinstance(tokens, str):
            return shlex.split(tokens)
        if isinstance(tokens, Iterable):
            tokens = list(tokens)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def parse(self, tokens=Unset, /):
        """
        Scan tokens once, then validate required specs and substitute defaults.

        Parameters
        - tokens:
          • Unset: read sys.argv[1:].
          • str: split with shlex.split.
          • Iterable[str]: used as-is (program name excluded).

        Behavior
        - values from a previous parse are forgotten first.
        - a later token matching the same spec overwrites the earlier value.
        - after the scan, specs are visited in declaration order: a required
          spec without a value is a MissingArgumentError; any other spec
          without a value receives its default.

        Raises
        - MissingArgumentError (shell=False): first missing required argument.
        - ParseExit (shell=False, deferred=True): every missing required argument.
        - SystemExit(1) (shell=True) after printing the diagnostic on stderr.
        """
        tokens = self._tokenize(tokens)

        for spec in self._arguments:
            spec.reset()

        for token in tokens:
            if token.startswith("--"):
                self._match_name(*_split(token[2:]))
            elif token.startswith("-"):
                self._match_cluster(*_split(token[1:]))
            else:
                name, value = _split(token)
                self._console.file.write(name)
                self._match_name(name, value)

        missing = []
        for spec in self._arguments:
            if spec.required and spec.value is None:
                fault = MissingArgumentError(
                    "Missing required argument: %s" % spec.name,
                    name=spec.name,
                    code=FaultCode.MISSING_ARGUMENT,
                )
                if not self._deferred:
                    return self.trigger(fault)
                missing.append(fault)
                continue
            spec.substitute()

        if missing:
            self.trigger(ParseExit(missing))

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.
        """
        trigger(
            fault,
            **options,
            parser=self,
            shell=self._shell,
            deferred=self._deferred,
            colorful=self._colorful,
            styles=self._styles,
        )

    # --- retrieval ---

    def _retrieve(self, name, kind):
        if (spec := self._find(name)) is None or spec.kind is not kind:
            return None
        return spec.value if spec.value is not None else spec.default

    def get_positional(self, name, /):
        """
        Resolved value of a positional, else its default, else None.

        A name declared under another kind yields None.
        """
        return self._retrieve(name, ArgumentKind.POSITIONAL)

    def get_key_value(self, name, /):
        """
        Resolved value of a key-value, else its default, else None.

        A name declared under another kind yields None.
        """
        return self._retrieve(name, ArgumentKind.KEY_VALUE)

    def get_flag(self, name, /):
        """
        True when the flag was set by the last parse.
        """
        if (spec := self._find(name)) is None or spec.kind is not ArgumentKind.FLAG:
            return False
        return spec.resolved

    # --- help ---

    def print_help(self, description=True, usage=True, epilog=True, group=False):
        """
        Render help to the parser console.

        Palette keys
        - usage-label, usage-section, description-section, epilog-section, group-label
        - symbol, name, colon, required, default, help

        Layout per kind
        - flag:       -h --help : shows this help menu
        - key value:  -o --output : output file [required: no, default: out.txt]
        - positional: -f --file (required: yes, [in.txt]) = input file   (unstyled)

        group=True groups specs under per-kind headings, except in
        compatibility mode where it is accepted and ignored.
        """
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",
            "epilog-section": "#737373",
            "group-label": "bold #FFFFFF",

            "symbol": "bold #22C55E",
            "name": "bold #00E6FF",
            "colon": "#3B82F6",
            "required": "#FFD600",
            "default": "#FFD600",
            "help": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}) | self._styles)

        def styler(style):
            return styles[style] if self._colorful else ""

        def text(fragment, style=""):
            if isinstance(fragment, Text):
                return fragment if self._colorful else Text(fragment.plain)
            return Text(str(fragment), styler(style))

        def names(spec, styled):
            line = Text()
            if spec.symbol is not None:
                line.append("-").append(text(spec.symbol, "symbol" if styled else "")).append(" ")
            return line.append("--").append(text(spec.name, "name" if styled else ""))

        def render(spec):
            line = names(spec, spec.kind is not ArgumentKind.POSITIONAL)
            if spec.kind is ArgumentKind.FLAG:
                line.append(" ").append(text(":", "colon"))
                if spec.help:
                    line.append(" ").append(text(spec.help, "help"))
            elif spec.kind is ArgumentKind.KEY_VALUE:
                line.append(" ").append(text(":", "colon"))
                if spec.help:
                    line.append(" ").append(text(spec.help, "help"))
                line.append(" [")
                line.append(text("required: %s" % ("yes" if spec.required else "no"), "required"))
                line.append(", ")
                line.append(text("default: %s" % ("none" if spec.default is None else spec.default), "default"))
                line.append("]")
            else:
                line.append(" (required: %s, [%s])" % ("yes" if spec.required else "no", spec.default))
                line.append(" = ").append(spec.help.plain if isinstance(spec.help, Text) else spec.help or "No description")
            return line

        renders = []

        if usage:
            line = Text().append(text("usage", "usage-label")).append(": ")
            renders.append(line.append(text(self._usage or self._program, "usage-section")))

        if description and self._description:
            renders.append(text(self._description, "description-section"))

        if group and not self._compat:
            for kind in ArgumentKind:
                if not (specs := [spec for spec in self._arguments if spec.kind is kind]):
                    continue
                renders.append(text(pluralize(kind.label), "group-label").append(":"))
                renders.extend(Text("  ") + render(spec) for spec in specs)
        else:
            renders.extend(map(render, self._arguments))

        if epilog and self._epilog:
            renders.append(text(self._epilog, "epilog-section"))

        self._console.print(Group(*renders), soft_wrap=True)

    # --- teardown ---

    def close(self):
        """
        Release every declared spec and the display strings.
        """
        self._arguments.clear()
        self._program = self._usage = self._description = self._epilog = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __rich_repr__(self):
        yield "program", self._program
        yield "arguments", tuple(self._arguments)

    def __repr__(self):
        return "parser(program=%r, arguments=%r)" % (self._program, tuple(self._arguments))


def new_parser(program, usage=None, description=None, epilog=None, helper=True, **options):
    """
    Functional alias for Parser(...).
    """
    return Parser(program, usage, description, epilog, helper, **options)


__all__ = (
    "Parser",
    "new_parser",
)
