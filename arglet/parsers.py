r"""
Arglet parser nodes: registration, the parsing state machine, and inspection.

Overview
- ArgParser is one node of a command tree. The root is built by the host; every
  add_command() creates a child node that takes over the rest of the tokens once
  its name is seen on the command line (git-style "tool cmd --flag value arg").
- Options are registered under space-separated aliases ("help h ?"); one alias
  maps to exactly one Option, one Option may have many aliases.

Token dispatch (first matching rule wins)
1. "--": every remaining token is positional.
2. "--name=value" / "--name": long option or flag. Unknown "--help"/"--version"
   print the help/version text when set and exit with status 0.
3. "-abc" / "-x=value": bundled short flags/options. "-" alone and tokens whose
   second character is a digit ("-5") are positionals.
4. A registered command name, while no positional has been seen: the child
   parses the rest of the stream, then its callback (if any) runs and its return
   value becomes this node's command exit code.
5. "help <command>", while no positional has been seen and the help command is
   enabled: print that command's help text and exit with status 0.
6. Anything else is positional. With first_positional_ends_options() every later
   token is positional too.

Faults
- User-input errors (and inspecting a name that was never registered) go through
  trigger(): in shell mode "error: <message>" on stderr and exit status 1, with
  shell=False the ParserException is raised instead.
- Allocation failures never escape. They set a sticky flag on the node and every
  ancestor; parse() then reports False and had_memory_error() is True.

Quick example:
    >>> parser = ArgParser("usage: tool [--timeout N] FILE", "1.0")
    >>> parser.add_integer_option("timeout t", -1)
    >>> parser.parse(["tool", "-t", "5", "payload"])
    True
    >>> parser.value("timeout"), parser.positionals()
    (5, ['payload'])
"""
import functools
import operator
import re
import shlex
import sys

from rich.console import Console

from .arguments import Kind, Option, parse_float, parse_integer
from .containers import StringMap, Vector
from .faults import *
from .streams import ArgStream
from .utils import *

console = Console(highlight=False)


class ParserType(type):
    """
    Metaclass wiring __typename__, mirrored read-only properties and the
    __repr__/__rich_repr__ pair used by rich.pretty.
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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the parser texts and runtime flags in place.

    - helptext/version: str or None; empty strings and Unset become None.
    - shell: defaults to True. colorful: defaults to False.
    """
    for name in ("helptext", "version"):
        if not isinstance(text := metadata[name], str | None | Unset):
            raise TypeError(f"{cls.__typename__} '{name}' must be a string")
        metadata[name] = coalesce(text) or None

    metadata["shell"] = bool(coalesce(metadata["shell"], True))
    metadata["colorful"] = bool(coalesce(metadata["colorful"], False))


def _sanitize_names(cls, names, /):
    if not isinstance(names, str):
        raise TypeError(f"{cls.__typename__} names must be a string")
    elif not (words := [name for name in names.split(" ") if name]):
        raise ValueError(f"{cls.__typename__} names cannot be empty")
    return words


def _terminate(text, /):
    """
    Write text (when there is any) to stdout unchanged and exit with status 0.
    """
    if text:
        console.file.write(text + "\n")
        console.file.flush()
    sys.exit(0)


class ArgParser(metaclass=ParserType):
    """
    A node of the command tree: registered options, sub-commands and the state
    collected by the last parse.

    Parameters
    - helptext: printed by --help/-h (unless those names are registered).
    - version: printed by --version/-v (unless those names are registered).
    - shell: True to print faults and exit, False to raise them. Inherited by
      commands created afterwards.
    - colorful: style fault output with the rich palette. Inherited likewise.

    Properties
    - helptext, version, parent, callback, shell, colorful
    - options: alias -> Option (a new dict on every access, in table order)
    - commands: alias -> child ArgParser (likewise)
    """

    __introspectable__ = (
        "helptext",
        "version",
        "parent",
        "callback",
        "shell",
        "colorful",
        "options",
        "commands",
    )
    # parent is left out so that printing a child does not walk back up the tree.
    __displayable__ = (
        "helptext",
        "version",
        "callback",
        "shell",
        "colorful",
        "options",
        "commands",
    )

    def __new__(cls, helptext=Unset, version=Unset, *, shell=Unset, colorful=Unset):
        metadata = {
            "helptext": helptext,
            "version": version,
            "shell": shell,
            "colorful": colorful,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._parent = None
        self._callback = None

        self._options = StringMap()
        self._option_list = Vector()
        self._commands = StringMap()
        self._command_list = Vector()
        self._positionals = Vector()

        self._command_name = None
        self._command_parser = None
        self._command_exit_code = 0

        self._help_command = False
        self._first_positional_ends_options = False
        self._faulted = False
        return self

    # ---- faults -----------------------------------------------------------

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime flags (see faults.trigger).
        """
        if (
            not hasattr(fault, "__trigger__") or
            not callable(fault.__trigger__) or
            not hasattr(fault, "__replace__") or
            not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        trigger(fault, **options, parser=self, shell=self._shell, colorful=self._colorful)

    def _fault(self):
        parser = self
        while parser is not None:
            parser._faulted = True
            parser = parser._parent

    def had_memory_error(self):
        return self._faulted

    # ---- registration -----------------------------------------------------

    def _shadow(self, names, registry, label, /):
        for name in names:
            if name in registry:
                # always through warnings.warn, never the console
                trigger(ShadowedNameWarning(
                    "%s '%s' is already registered and will be rebound" % (label, name),
                    code=FaultCode.SHADOWED_NAME,
                    input=name,
                ), parser=self, shell=False, colorful=self._colorful)

    def _register(self, names, kind, /, fallback=Unset, *, greedy=False):
        words = _sanitize_names(type(self), names)
        try:
            option = Option(kind, fallback, greedy=greedy)
        except MemoryError:
            return self._fault()

        self._shadow(words, self._options, "option")
        try:
            self._option_list.append(option)
        except MemoryError:
            return self._fault()
        try:
            self._options.set_split(names, option)
        except MemoryError:
            self._option_list.pop()
            return self._fault()

    def add_flag(self, names, /):
        """
        Register a flag under every space-separated word of names.
        """
        self._register(names, Kind.FLAG)

    def add_string_option(self, names, /, fallback=None):
        self._register(names, Kind.STRING, fallback)

    def add_integer_option(self, names, /, fallback=0):
        self._register(names, Kind.INTEGER, fallback)

    def add_float_option(self, names, /, fallback=0.0):
        self._register(names, Kind.FLOAT, fallback)

    def add_greedy_string_option(self, names, /):
        """
        Register a string option that, once matched, takes every remaining token.
        """
        self._register(names, Kind.STRING, None, greedy=True)

    def add_command(self, names, /):
        """
        Create a child parser reachable through every word of names.

        The child inherits shell/colorful, has its parent set, and this parser
        gains the automatic "help <command>" command. Returns None (without
        setting the sticky fault) when the child cannot be allocated or linked.
        """
        self._shadow(_sanitize_names(type(self), names), self._commands, "command")
        try:
            child = type(self)(shell=self._shell, colorful=self._colorful)
            self._command_list.append(child)
        except MemoryError:
            return None
        try:
            self._commands.set_split(names, child)
        except MemoryError:
            self._command_list.pop()
            return None

        child._parent = self
        self._help_command = True
        return child

    def set_callback(self, callback, /):
        """
        Set the function run after this (command) parser finishes parsing.

        It is called as callback(name, parser) and its return value (0 for None)
        becomes the parent's command_exit_code(). Pass None to remove it.
        """
        if callback is not None and not callable(callback):
            raise TypeError(f"{type(self).__typename__} callback must be callable")
        self._callback = callback

    def set_helptext(self, helptext, /):
        if not isinstance(helptext, str | None):
            raise TypeError(f"{type(self).__typename__} 'helptext' must be a string")
        self._helptext = helptext or None

    def set_version(self, version, /):
        if not isinstance(version, str | None):
            raise TypeError(f"{type(self).__typename__} 'version' must be a string")
        self._version = version or None

    def enable_help_command(self, enable=True, /):
        self._help_command = bool(enable)

    def first_positional_ends_options(self):
        """
        Treat every token after the first positional as positional too.
        """
        self._first_positional_ends_options = True

    # ---- parsing ----------------------------------------------------------

    def parse(self, argv=Unset, /):
        """
        Parse an argument vector.

        Parameters
        - argv
          • Unset: sys.argv.
          • str: a shell-like command line without the program name, split with
            shlex.split.
          • iterable of str: an argument vector whose first element is the
            program name (skipped). An empty vector parses trivially.

        Returns
        - False if an allocation failed (now or during registration), else True.
        User-input errors never return: see the module documentation.
        """
        if self._faulted:
            return False

        match argv:
            case UnsetType():
                tokens = sys.argv[1:]
            case str():
                tokens = shlex.split(argv)
            case _:
                tokens = list(argv)[1:]

        try:
            stream = ArgStream(tokens)
        except MemoryError:
            return False

        self._parse_stream(stream)
        return not self._faulted

    def _parse_stream(self, stream, /):
        if self._faulted:
            return

        for token in stream:
            if token == "--":
                for remainder in stream:
                    self._add_positional(remainder)

            elif token.startswith("--"):
                if "=" in token:
                    self._handle_equals("--", token[2:], stream)
                else:
                    self._handle_long(token[2:], stream)

            elif token.startswith("-"):
                if len(token) == 1 or token[1] in "0123456789":
                    self._add_positional(token)
                elif "=" in token:
                    self._handle_equals("-", token[1:], stream)
                else:
                    self._handle_short(token[1:], stream)

            elif not self._positionals and token in self._commands:
                child = self._commands[token]
                self._command_name = token
                self._command_parser = child
                child._parse_stream(stream)
                if child._callback is not None and not self._faulted:
                    result = child._callback(token, child)
                    self._command_exit_code = 0 if result is None else result

            elif not self._positionals and self._help_command and token == "help":
                self._handle_help_command(stream)

            else:
                self._add_positional(token)
                if self._first_positional_ends_options:
                    for remainder in stream:
                        self._add_positional(remainder)

    def _add_positional(self, token, /):
        try:
            self._positionals.append(token)
        except MemoryError:
            self._fault()

    def _consume(self, option, token, /):
        try:
            option.append(token)
        except MemoryError:
            self._fault()
        except ParserException as fault:
            self.trigger(fault)

    def _drain(self, option, stream, /):
        for token in stream:
            self._consume(option, token)

    def _handle_equals(self, prefix, body, stream, /):
        # The whole text before "=" is the name, so "-ab=1" looks up "ab".
        name, _, value = body.partition("=")

        try:
            option = self._options[name]
        except KeyError:
            return self.trigger(UnknownSwitchError(
                "%s%s is not a recognised option name" % (prefix, name),
                code=FaultCode.UNKNOWN_SWITCH,
                input=prefix + body,
            ))

        if option.kind is Kind.FLAG:
            return self.trigger(FlagAssignmentError(
                "flag %s%s does not accept an argument" % (prefix, name),
                code=FaultCode.FLAG_ASSIGNMENT,
                input=prefix + body,
            ))

        if not value:
            return self.trigger(MissingInlineValueError(
                "missing argument for %s%s" % (prefix, name),
                code=FaultCode.MISSING_INLINE_VALUE,
                input=prefix + body,
            ))

        self._consume(option, value)
        if option.greedy:
            self._drain(option, stream)

    def _handle_long(self, name, stream, /):
        try:
            option = self._options[name]
        except KeyError:
            if name == "help" and self._helptext:
                _terminate(self._helptext)
            if name == "version" and self._version:
                _terminate(self._version)
            return self.trigger(UnknownSwitchError(
                "--%s is not a recognised flag or option name" % name,
                code=FaultCode.UNKNOWN_SWITCH,
                input="--" + name,
            ))

        if option.kind is Kind.FLAG:
            return option.append()

        if not stream.has_next():
            return self.trigger(OptionValueRequiredError(
                "missing argument for --%s" % name,
                code=FaultCode.OPTION_VALUE_REQUIRED,
                input="--" + name,
            ))

        if option.greedy:
            self._drain(option, stream)
        else:
            self._consume(option, next(stream))

    def _handle_short(self, bundle, stream, /):
        for char in bundle:
            try:
                option = self._options[char]
            except KeyError:
                if char == "h" and self._helptext:
                    _terminate(self._helptext)
                if char == "v" and self._version:
                    _terminate(self._version)
                if len(bundle) > 1:
                    message = "'%s' in -%s is not a recognised flag or option name" % (char, bundle)
                else:
                    message = "-%s is not a recognised flag or option name" % bundle
                return self.trigger(UnknownSwitchError(
                    message,
                    code=FaultCode.UNKNOWN_SWITCH,
                    input="-" + bundle,
                ))

            if option.kind is Kind.FLAG:
                option.append()
                continue

            # Values come from the token stream, never from the rest of the bundle.
            if stream.has_next():
                if option.greedy:
                    self._drain(option, stream)
                else:
                    self._consume(option, next(stream))
                continue

            if len(bundle) > 1:
                message = "missing argument for '%s' in -%s" % (char, bundle)
            else:
                message = "missing argument for -%s" % bundle
            return self.trigger(OptionValueRequiredError(
                message,
                code=FaultCode.OPTION_VALUE_REQUIRED,
                input="-" + bundle,
            ))

    def _handle_help_command(self, stream, /):
        if not stream.has_next():
            return self.trigger(MissingCommandError(
                "the 'help' command requires an argument",
                code=FaultCode.MISSING_HELP_TARGET,
            ))

        name = next(stream)
        try:
            child = self._commands[name]
        except KeyError:
            return self.trigger(UnknownCommandError(
                "'%s' is not a recognised command" % name,
                code=FaultCode.UNKNOWN_COMMAND,
                input=name,
            ))
        _terminate(child._helptext)

    # ---- inspection -------------------------------------------------------

    def _lookup(self, name, /):
        try:
            return self._options[name]
        except KeyError:
            return self.trigger(UnregisteredNameError(
                "'%s' is not a registered flag or option name" % name,
                code=FaultCode.UNREGISTERED_NAME,
                input=name,
            ))

    def count(self, name, /):
        """
        Number of times the option or flag named name was matched.
        """
        return self._lookup(name).count

    def found(self, name, /):
        return self._lookup(name).found

    def value(self, name, /):
        """
        Last value given for name, or its fallback (flags: whether it was found).
        """
        return self._lookup(name).value()

    def value_at(self, name, index, /):
        return self._lookup(name).value_at(index)

    def values(self, name, /):
        return self._lookup(name).values()

    def has_positionals(self):
        return len(self._positionals) > 0

    def positional_count(self):
        return len(self._positionals)

    def positional_at(self, index, /):
        return self._positionals[index]

    def positionals(self):
        return list(self._positionals)

    def _convert_positionals(self, converter, /):
        values = []
        for token in self._positionals:
            try:
                values.append(converter(token))
            except ParserException as fault:
                return self.trigger(fault)
        return values

    def positionals_as_integers(self):
        """
        Every positional converted with the integer rules; the first bad one is fatal.
        """
        return self._convert_positionals(parse_integer)

    def positionals_as_floats(self):
        return self._convert_positionals(parse_float)

    def found_command(self):
        return self._command_parser is not None

    def command_name(self):
        return self._command_name

    def command_parser(self):
        return self._command_parser

    def command_exit_code(self):
        return self._command_exit_code

    def dump(self):
        """
        Return a stable, human-readable listing of the parse state.

        Format
            Flags/Options:
              <alias>: <count for flags | (fallback) [values...]>
            <blank>
            Arguments:
              <positional>
            <blank>
            Command:
              <matched command name>

        Empty sections show "[none]". Aliases are listed in hash table order.
        """
        lines = ["Flags/Options:"]
        if self._options:
            lines.extend("  %s: %s" % (name, option) for name, option in self._options.items())
        else:
            lines.append("  [none]")

        lines.extend(("", "Arguments:"))
        if self._positionals:
            lines.extend("  %s" % token for token in self._positionals)
        else:
            lines.append("  [none]")

        lines.extend(("", "Command:"))
        if self.found_command():
            lines.append("  %s" % self._command_name)
        else:
            lines.append("  [none]")
        return "\n".join(lines)


__all__ = (
    # Public API surface for consumers of arglet.parsers.
    "ArgParser",
)

# Keep the metaclass out of star-imports and documentation.
del ParserType
