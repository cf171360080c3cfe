"""Interactive console for the library lending core.

The shell is an ordinary caller of the registry and ledger: it parses a
command line, calls the core with typed arguments and turns the resulting
``Outcome`` into text. Refused operations are printed and the loop carries
on; nothing a user types ends the session except ``quit``.

Usage:
    library-lending [--member NAME] [--return-policy {explicit,oldest_first}]
                    [--no-seed] [--log-level LEVEL]
"""

import argparse
import logging
import shlex
import sys
from collections.abc import Callable

from pydantic import ValidationError

from .config import LibrarySettings, ReturnPolicy
from .library import Library
from .models import ITEM_KINDS, ItemBase, ItemId, parse_item

logger = logging.getLogger(__name__)

# Field filled by the optional fourth argument of ``add`` for each kind
EXTRA_FIELDS = {
    "ebook": "file_size_mb",
    "audiobook": "duration_minutes",
    "magazine": "issue_number",
}

HELP_TEXT = """Commands:
  list [available]                  show every item, or only those on the shelf
  find TITLE                        look an item up by title
  borrow TITLE|ID                   borrow an item
  return [TITLE|ID]                 return an item (oldest-first libraries take no item)
  held                              show the items you hold
  add KIND TITLE CREATOR [EXTRA]    add a book, ebook, audiobook or magazine
  remove ID                         delete an item that is on the shelf
  register NAME                     register another member
  switch NAME                       act as another registered member
  help                              show this message
  quit                              leave the library"""


def _format_validation_error(exc: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return f"Invalid input: {details}"


def _parse_identifier(text: str) -> ItemId:
    # int() takes decimal digits only; superscripts and the like stay text
    return int(text) if text.isdecimal() else text


class LibraryShell:
    """Command interpreter bound to one library and one active member."""

    def __init__(self, library: Library, member_name: str):
        self.library = library
        self.running = True
        outcome = self.ledger.register_member(member_name)
        self.member_name = outcome.member.name
        self.greeting = outcome.message
        self._commands: dict[str, Callable[[list[str]], str]] = {
            "list": self.do_list,
            "find": self.do_find,
            "borrow": self.do_borrow,
            "return": self.do_return,
            "held": self.do_held,
            "add": self.do_add,
            "remove": self.do_remove,
            "register": self.do_register,
            "switch": self.do_switch,
            "help": self.do_help,
            "quit": self.do_quit,
            "exit": self.do_quit,
        }

    @property
    def registry(self):
        return self.library.registry

    @property
    def ledger(self):
        return self.library.ledger

    def execute(self, line: str) -> str:
        """Run one command line and return the text to show the user."""
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not tokens:
            return ""

        command, args = tokens[0].lower(), tokens[1:]
        handler = self._commands.get(command)
        if handler is None:
            return f"Unknown command '{command}'. Type 'help' for a list of commands."
        logger.debug("Command %s %s by %s", command, args, self.member_name)
        return handler(args)

    def _resolve(self, text: str) -> ItemBase | None:
        """Find an item by identifier first, then by title."""
        identifier = _parse_identifier(text)
        if identifier in self.registry:
            return self.registry.get(identifier)
        return self.registry.find_by_title(text)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def do_list(self, args: list[str]) -> str:
        if args and args != ["available"]:
            return "Usage: list [available]"
        if args:
            lines = [f"{item.identifier}: {item.display_info()}" for item in self.registry.available()]
            if not lines:
                return "Every item is lent out."
            return "Items on the shelf:\n" + "\n".join(lines)

        lines = [f"{identifier}: {item.display_info()}" for identifier, item in self.registry.list_all()]
        if not lines:
            return "The library has no items."
        return "Items in the library:\n" + "\n".join(lines)

    def do_find(self, args: list[str]) -> str:
        if not args:
            return "Usage: find TITLE"
        item = self.registry.find_by_title(" ".join(args))
        if item is None:
            return "No such item in the library."
        return f"{item.identifier}: {item.display_info()}"

    def do_borrow(self, args: list[str]) -> str:
        if not args:
            return "Usage: borrow TITLE|ID"
        text = " ".join(args)
        item = self._resolve(text)
        if item is None:
            return "No such item in the library."
        return self.ledger.borrow(self.member_name, item).message

    def do_return(self, args: list[str]) -> str:
        if self.ledger.return_policy == ReturnPolicy.OLDEST_FIRST:
            if args:
                return "This library takes back your oldest item first; use 'return' on its own."
            return self.ledger.give_back(self.member_name).message

        if not args:
            return "Usage: return TITLE|ID"
        text = " ".join(args)
        item = self._resolve(text)
        if item is None:
            return "No such item in the library."
        return self.ledger.give_back(self.member_name, item).message

    def do_held(self, args: list[str]) -> str:
        items = self.ledger.holdings(self.member_name)
        if not items:
            return f"{self.member_name} holds no items."
        lines = [f"{item.identifier}: {item.display_info()}" for item in items]
        return f"{self.member_name} holds:\n" + "\n".join(lines)

    def do_add(self, args: list[str]) -> str:
        if len(args) < 3:
            return "Usage: add KIND TITLE CREATOR [EXTRA]"
        kind = args[0].lower()
        if kind not in ITEM_KINDS:
            return f"Unknown kind '{kind}'. Choose one of: {', '.join(ITEM_KINDS)}"

        data: dict = {"kind": kind, "title": args[1], "creator": args[2]}
        if len(args) > 3:
            field = EXTRA_FIELDS.get(kind)
            if field is None:
                return f"A {kind} takes no extra value."
            data[field] = args[3]
        try:
            item = parse_item(data)
        except ValidationError as e:
            return _format_validation_error(e)
        return self.registry.add(item).message

    def do_remove(self, args: list[str]) -> str:
        if len(args) != 1:
            return "Usage: remove ID"
        return self.registry.remove(_parse_identifier(args[0])).message

    def do_register(self, args: list[str]) -> str:
        if not args:
            return "Usage: register NAME"
        try:
            return self.ledger.register_member(" ".join(args)).message
        except ValidationError as e:
            return _format_validation_error(e)

    def do_switch(self, args: list[str]) -> str:
        if not args:
            return "Usage: switch NAME"
        member = self.ledger.get_member(" ".join(args))
        if member is None:
            return f"No member named '{' '.join(args)}'"
        self.member_name = member.name
        return f"Now acting as {member.name}"

    def do_help(self, args: list[str]) -> str:
        return HELP_TEXT

    def do_quit(self, args: list[str]) -> str:
        self.running = False
        return "Thank you for using the library!"

    def run(
        self,
        read: Callable[[str], str] | None = None,
        write: Callable[[str], None] | None = None,
    ) -> None:
        """Read commands until ``quit`` or end of input."""
        read = read or input
        write = write or print
        write(self.greeting)
        write(self.do_list([]))
        while self.running:
            try:
                line = read(f"{self.library.name} ({self.member_name})> ")
            except (EOFError, KeyboardInterrupt):
                write(self.do_quit([]))
                break
            output = self.execute(line)
            if output:
                write(output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="library-lending",
        description="Borrow and return items from an in-memory library",
    )
    parser.add_argument(
        "--member",
        help="Name of the member to act as (prompted for when omitted)",
    )
    parser.add_argument(
        "--return-policy",
        choices=[policy.value for policy in ReturnPolicy],
        help="Return semantics: name the item, or give back the oldest first",
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Start with an empty catalog",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level for messages written to stderr",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> LibrarySettings:
    """Settings from the environment, overridden by command-line options."""
    overrides: dict = {}
    if args.return_policy:
        overrides["return_policy"] = args.return_policy
    if args.no_seed:
        overrides["seed_catalog"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    return LibrarySettings(**overrides)


def prompt_member_name(read: Callable[[str], str] | None = None) -> str:
    read = read or input
    first_name = read("Welcome to the library. Enter your first name: ").strip()
    last_name = read("Enter your last name: ").strip()
    return f"{first_name} {last_name}".strip()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        print(_format_validation_error(e), file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    library = Library(settings)
    try:
        member_name = (args.member or prompt_member_name()).strip()
    except (EOFError, KeyboardInterrupt):
        return 0
    if not member_name:
        print("A member name is required.", file=sys.stderr)
        return 2

    try:
        shell = LibraryShell(library, member_name)
    except ValidationError as e:
        print(_format_validation_error(e), file=sys.stderr)
        return 2

    logger.info("Starting %s with %s returns", library.name, settings.return_policy.value)
    shell.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
