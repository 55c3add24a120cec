"""
Command-line entrypoint.

This script:
- Loads a UTF-8 text file
- Replaces every =( ... ) expression with its value
- Writes the result back and prints the new caret position as "START END"

With --watch, the file is polled and processed again each time it changes.
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError, model_validator

from inline_calc.common.logger import logger, set_verbose
from inline_calc.common.models import EngineConfig, PatchResult, Selection
from inline_calc.engine.engine import InlineCalcEngine
from inline_calc.host.document import TextDocument
from inline_calc.host.watcher import FileWatcher, WatcherConfig


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : FilePath
        Path to the document to process.
    cursor : list of int
        Caret start and optional end in the document.
    output : Path, optional
        Destination file, defaults to the document itself.
    """

    file_path: FilePath
    cursor: List[int] = Field(default_factory=list, max_length=2)
    output: Optional[Path] = None
    watch: bool = False
    interval: float = Field(default=0.5, gt=0)
    max_events: Optional[int] = Field(default=None, ge=1)
    max_depth: int = Field(default=32, ge=1, le=200)
    verbose: bool = False

    @model_validator(mode="after")
    def watch_rewrites_in_place(self) -> "CliArgs":
        """Watch mode always rewrites the watched file itself."""
        if self.watch and self.output is not None:
            raise ValueError("--output cannot be combined with --watch")
        return self

    @property
    def start(self) -> Optional[int]:
        return self.cursor[0] if self.cursor else None

    @property
    def end(self) -> Optional[int]:
        return self.cursor[1] if len(self.cursor) > 1 else None


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param list argv: Arguments to parse, defaults to sys.argv[1:]

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        prog="inline-calc",
        description="Evaluate =( ... ) arithmetic expressions inside a text file",
    )

    parser.add_argument("file_path", help="Path to a UTF-8 text file")
    parser.add_argument(
        "--cursor",
        nargs="+",
        type=int,
        metavar=("START", "END"),
        default=[],
        help="Caret (or selection) offsets in the document",
    )
    parser.add_argument("--output", type=Path, help="Write the result here instead of into the document")
    parser.add_argument("--watch", action="store_true", help="Keep polling the file and process every change")
    parser.add_argument("--interval", type=float, default=0.5, help="Seconds between two polls in watch mode")
    parser.add_argument("--max-events", type=int, help="Stop watching after this many processed changes")
    parser.add_argument("--max-depth", type=int, default=32, help="Maximum nesting of =( ... ) expressions")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every evaluated expression")

    args = parser.parse_args(argv)

    try:
        return CliArgs(**vars(args))
    except ValidationError as exc:
        parser.error(str(exc))


def process_once(cli_args: CliArgs, engine: InlineCalcEngine) -> Selection:
    """
    Process the document a single time.

    :param CliArgs cli_args: Validated arguments
    :param InlineCalcEngine engine: Engine to run

    :return: Caret position after processing
    :rtype: Selection
    """
    document = TextDocument.load(Path(cli_args.file_path), cli_args.start, cli_args.end)
    result: PatchResult = document.process(engine)
    if not result.changed:
        logger.info(f"📄 No expression to evaluate in {cli_args.file_path}")
        return result.selection
    return document.write_back(result, cli_args.output)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the inline-calc command.

    :return: Process exit status
    :rtype: int
    """
    cli_args = parse_args(argv)
    set_verbose(cli_args.verbose)
    engine = InlineCalcEngine(settings=EngineConfig(max_depth=cli_args.max_depth))

    if cli_args.watch:
        watcher = FileWatcher(
            settings=WatcherConfig(
                path=cli_args.file_path,
                interval=cli_args.interval,
                start=cli_args.start,
                end=cli_args.end,
            ),
            engine=engine,
        )
        try:
            watcher.run(cli_args.max_events)
        except (OSError, ValueError) as exc:
            logger.error(f"👀❌ Stopped watching {cli_args.file_path}: {exc}")
            return 1
        return 0

    try:
        caret = process_once(cli_args, engine)
    except (OSError, ValueError) as exc:
        logger.error(f"📄❌ Could not process {cli_args.file_path}: {exc}")
        return 1

    print(f"{caret.start} {caret.end}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
