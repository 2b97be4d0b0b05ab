"""Command line entry point: train, classify and evaluate saved trees."""

from __future__ import annotations

from typing import Sequence
import argparse
import logging
import sys

from incremental_tree.core._config import settings
from incremental_tree.core._exceptions import EmptyTreeError, InvalidArgumentError
from incremental_tree.core._exceptions import MissingExemplarError, ParseError
from incremental_tree.core._exceptions import UnknownFeatureError
from incremental_tree.datasets import load_examples
from incremental_tree.dtree import IncrementalTreeClassifier


logger = logging.getLogger(__name__)


def data_args(parser: argparse.ArgumentParser) -> None:
    """Arguments describing a dataset file"""
    parser.add_argument("data", help="CSV or JSON lines (.jsonl) file of labeled examples")
    parser.add_argument("--label-column", default="label",
                        help="CSV column holding the labels. Default is 'label'.")
    parser.add_argument("--text-column", default=None,
                        help="CSV column holding free text. If set, rows become "
                             "bag-of-words vectors of that column.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="incremental-tree",
        description="Train, apply and evaluate incremental decision trees.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Emit debug log messages")
    commands = parser.add_subparsers(dest="command", required=True)

    train = commands.add_parser("train", help="Fit a tree and save its text form")
    data_args(train)
    train.add_argument("--output", "-o", required=True, help="File to save the tree to")

    classify = commands.add_parser("classify", help="Print one predicted label per example")
    classify.add_argument("tree", help="Saved tree file")
    data_args(classify)

    evaluate = commands.add_parser("evaluate", help="Print accuracy per label")
    evaluate.add_argument("tree", help="Saved tree file")
    data_args(evaluate)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(args: argparse.Namespace) -> int:
    vectors, labels = load_examples(
        args.data, label_column=args.label_column, text_column=args.text_column
    )

    if args.command == "train":
        tree = IncrementalTreeClassifier.fit(vectors, labels)
        tree.save_file(args.output)
        print(f"Saved tree with {tree.n_leaves} leaves to {args.output}")
        return 0

    tree = IncrementalTreeClassifier.load_file(args.tree)
    if args.command == "classify":
        for label in tree.predict(vectors):
            print(label)
        return 0

    accuracy = tree.calculate_accuracy(vectors, labels)
    for label, value in accuracy.items():
        print(f"{label}: {value:.4f}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return run(args)
    except (
        InvalidArgumentError,
        ParseError,
        EmptyTreeError,
        MissingExemplarError,
        UnknownFeatureError,
        FileNotFoundError,
    ) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
