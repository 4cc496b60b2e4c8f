"""Command-line entry point — query a note workspace from the shell.

Commands:
  1. `noteref tags` — list every distinct tag.
  2. `noteref search TAG` — locations of `#TAG`.
  3. `noteref link NAME` / `noteref backlinks NAME` — wiki-links to a note.
  4. `noteref files` — note files with their candidate counts.

Options (before the command): `-v` for debug logging, `--workspace DIR`
to override the configured workspace root.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import IndexConfig

USAGE = """\
usage: noteref [-v] [--workspace DIR] <command> [arg]

commands:
  tags              list distinct tags
  search TAG        find occurrences of #TAG
  link NAME         find wiki-links to NAME
  backlinks NAME    same as link, NAME is a file basename
  files             list note files and candidate counts
"""

_COMMANDS_WITH_ARG = {"search", "link", "backlinks"}
_COMMANDS = _COMMANDS_WITH_ARG | {"tags", "files"}


def _parse_args(argv: list[str]) -> tuple[bool, Path | None, list[str]]:
    """Split leading options from the command words."""
    verbose = False
    workspace: Path | None = None
    args = list(argv)
    while args and args[0].startswith("-"):
        opt = args.pop(0)
        if opt in ("-v", "--verbose"):
            verbose = True
        elif opt == "--workspace":
            if not args:
                raise ValueError("--workspace requires a directory")
            workspace = Path(args.pop(0)).expanduser()
        elif opt in ("-h", "--help"):
            return verbose, workspace, []
        else:
            raise ValueError(f"Unknown option: {opt}")
    return verbose, workspace, args


async def _run(command: str, arg: str, config: "IndexConfig") -> int:
    from .index import NoteIndex
    from .types import TAG, WIKI_LINK, ContextWord
    from .workspace import NoteWorkspace

    index = NoteIndex(NoteWorkspace(config))
    parsed_files = await index.hydrate_cache()

    if command == "tags":
        for tag in sorted(await index.distinct_tags()):
            print(tag)
    elif command == "files":
        for pf in parsed_files:
            print(f"{pf.path}\t{len(pf.ref_candidates)}")
    elif command == "search":
        cw = ContextWord(kind=TAG, word=arg.removeprefix("#"))
        for loc in await index.search(cw):
            print(loc)
    elif command == "link":
        for loc in await index.search(ContextWord(kind=WIKI_LINK, word=arg)):
            print(loc)
    elif command == "backlinks":
        for loc in await index.search_backlinks_for(arg):
            print(loc)
    return 0


def main() -> None:
    """Main entry point."""
    try:
        verbose, workspace_dir, args = _parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"Error: {e}\n\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    if not args or args[0] not in _COMMANDS:
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    command = args[0]
    if command in _COMMANDS_WITH_ARG and len(args) < 2:
        print(f"Error: '{command}' needs an argument.\n\n{USAGE}", file=sys.stderr)
        sys.exit(2)
    arg = args[1] if len(args) > 1 else ""

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
    )
    if verbose:
        logging.getLogger("noteref").setLevel(logging.DEBUG)

    from .settings import load_settings

    try:
        config = load_settings(workspace=workspace_dir)
    except ValueError as e:
        print(f"Error: {e}\n", file=sys.stderr)
        print("Check your settings.toml configuration.", file=sys.stderr)
        sys.exit(1)

    sys.exit(asyncio.run(_run(command, arg, config)))


if __name__ == "__main__":
    main()
