"""Small declarative CLI framework.

Provides:
- Command registration via decorators
- Automatic argument parsing
- Consistent error handling
- Common arguments (--profile, --config, --verbose, --quiet)
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .applog import configure_logging
from .errors import AuditError, ExitCode, handle_error

CommandFunc = Callable[[argparse.Namespace], int]


@dataclass
class Argument:
    """Definition of a CLI argument."""
    name_or_flags: tuple
    kwargs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CommandDef:
    """Definition of a CLI command."""
    name: str
    func: CommandFunc
    help: str = ""
    description: str = ""
    arguments: List[Argument] = field(default_factory=list)


class CLIApp:
    """Declarative argparse wrapper.

    Example usage:
        app = CLIApp("meeting-audit", "Audit unconfirmed meetings")

        @app.command("run", help="Run the audit now")
        @app.argument("--days", type=int)
        def cmd_run(args):
            return 0

        if __name__ == "__main__":
            app.main()
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        version: Optional[str] = None,
        epilog: Optional[str] = None,
    ):
        self.name = name
        self.description = description
        self.version = version
        self.epilog = epilog
        self._commands: Dict[str, CommandDef] = {}
        self._pending_arguments: List[Argument] = []

    def command(self, name: str, *, help: str = "", description: str = "") -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to register a command."""
        def decorator(func: CommandFunc) -> CommandFunc:
            # Collect any pending arguments from @argument decorators
            arguments = list(reversed(self._pending_arguments))
            self._pending_arguments.clear()
            self._commands[name] = CommandDef(
                name=name,
                func=func,
                help=help,
                description=description or help,
                arguments=arguments,
            )
            return func
        return decorator

    def argument(self, *name_or_flags: str, **kwargs: Any) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator to add an argument to the next command.

        Must be used BEFORE the @command decorator (decorators apply bottom-up).
        """
        def decorator(func: CommandFunc) -> CommandFunc:
            self._pending_arguments.append(Argument(name_or_flags, kwargs))
            return func
        return decorator

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self.name,
            description=self.description,
            epilog=self.epilog,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        if self.version:
            parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {self.version}")
        self._add_common_arguments(parser)

        subparsers = parser.add_subparsers(dest="command", metavar="<command>")
        for cmd_def in self._commands.values():
            cmd_parser = subparsers.add_parser(cmd_def.name, help=cmd_def.help, description=cmd_def.description)
            for arg in cmd_def.arguments:
                cmd_parser.add_argument(*arg.name_or_flags, **arg.kwargs)
            cmd_parser.set_defaults(_cmd_func=cmd_def.func)
        return parser

    def _add_common_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--profile", "-p", help="Credentials profile name ([meeting_audit.<profile>] in credentials.ini)")
        parser.add_argument("--config", "-c", help="YAML config path (default ~/.config/meeting-audit/config.yaml)")
        parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
        parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        parser = self.build_parser()
        args = parser.parse_args(argv)
        configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

        cmd_func = getattr(args, "_cmd_func", None)
        if cmd_func is None:
            parser.print_help()
            return ExitCode.USAGE

        try:
            return int(cmd_func(args))
        except AuditError as e:
            return handle_error(e, verbose=bool(args.verbose))
        except KeyboardInterrupt as e:
            return handle_error(e)
        except Exception as e:
            return handle_error(e, verbose=bool(args.verbose))

    def main(self, argv: Optional[Sequence[str]] = None) -> None:
        """Run the CLI and exit with the return code."""
        sys.exit(self.run(argv))
