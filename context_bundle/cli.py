from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .bundle import aggregate, write_bundle
from .errors import ContextBundleError, InputFolderError
from .filters import filter_paths
from .repo import STRATEGIES, git_toplevel, list_files, locate_root, marker_toplevel

logger = logging.getLogger(__name__)

DEFAULT_INPUT_FOLDER = "."
DEFAULT_OUTPUT_FILE = "./context.txt"


@dataclass(frozen=True)
class RunConfig:
    input_folder: Path
    output_file: Path
    dry_run: bool = False
    strategy: str = "git"
    text_only: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        return cls(
            input_folder=Path(args.input_folder),
            output_file=Path(args.output_file),
            dry_run=args.dry_run,
            strategy=args.strategy,
            text_only=args.text_only,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-bundle",
        description="Concatenate the text files of a repository folder into one context file.",
    )
    parser.add_argument("--inputFolder", dest="input_folder", default=DEFAULT_INPUT_FOLDER,
                        help="Directory to gather files from (default: %(default)s)")
    parser.add_argument("--outputFile", dest="output_file", default=DEFAULT_OUTPUT_FILE,
                        help="Where to write the bundle (default: %(default)s)")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true",
                        help="Report what would be bundled without writing the output file")
    parser.add_argument("--strategy", choices=STRATEGIES, default="git",
                        help="git: ask git for tracked and unignored files; "
                             "walk: list every file on disk (default: %(default)s)")
    parser.add_argument("--text-only", dest="text_only", action="store_true",
                        help="Skip files whose content type is not textual")
    return parser


def _drop_output_file(root: Path, paths: list[str], output: Path) -> list[str]:
    target = output.resolve()
    kept = []
    for rel in paths:
        if (root / rel).resolve() == target:
            logger.info("Skipping the output file itself: %s", rel)
            continue
        kept.append(rel)
    return kept


def run(config: RunConfig) -> str:
    """Run the whole pipeline for config and return the bundle text."""
    input_folder = config.input_folder.resolve()
    output_file = config.output_file.resolve()
    logger.info(
        "Invoked with inputFolder=%s (absolute: %s), outputFile=%s (absolute: %s), "
        "dryRun=%s, strategy=%s, textOnly=%s",
        config.input_folder, input_folder, config.output_file, output_file,
        config.dry_run, config.strategy, config.text_only,
    )
    if not input_folder.is_dir():
        raise InputFolderError(f"Input folder does not exist or is not a directory: {input_folder}")

    probe = git_toplevel if config.strategy == "git" else marker_toplevel
    root = locate_root(input_folder, probe)
    logger.info("Will gather files from %s (repository root: %s)", input_folder, root)

    paths = list_files(root, input_folder, config.strategy)
    paths = _drop_output_file(root, paths, output_file)
    paths = filter_paths(root, paths, text_only=config.text_only)

    text = aggregate(root, paths)
    write_bundle(text, output_file, dry_run=config.dry_run)
    return text


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s", stream=sys.stderr)
    args = build_parser().parse_args(argv)
    try:
        run(RunConfig.from_args(args))
    except ContextBundleError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
