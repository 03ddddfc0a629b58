"""
Command line interface.

Usage:
    nl2dmn convert rules.txt -o decision.dmn [--excel decision.xlsx]
    nl2dmn batch rules-input dmn-output --threads 8 --max-rules 500
    nl2dmn generate rules-input --files 100 --seed 42
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from nl_to_dmn import __version__
from nl_to_dmn.batch import BatchConfig, BatchError, BatchRuleEngine, convert_rules, decision_names
from nl_to_dmn.excel_writer import write_excel
from nl_to_dmn.generators import generate_sample_files
from nl_to_dmn.rule_parser import RuleParser


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nl2dmn",
        description="Convert plain-English business rules to DMN decision tables.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert one rule text file")
    convert.add_argument("input", type=Path, help="Rule text file (one rule per line)")
    convert.add_argument("-o", "--output", type=Path, help="DMN output path (default: <input>.dmn)")
    convert.add_argument("--name", help="Decision name (default: from file name)")
    convert.add_argument("--id", dest="decision_id", help="Decision id (default: from file name)")
    convert.add_argument("--excel", type=Path, help="Also write an Excel view of the table")
    convert.add_argument("--max-rules", type=int, default=0,
                         help="Split into several tables of at most N rules (default: no split)")
    convert.add_argument("--no-validate", action="store_true", help="Skip DMN sanity checks")

    batch = subparsers.add_parser("batch", help="Convert every .txt file in a directory")
    batch.add_argument("input_dir", type=Path, help="Directory containing .txt rule files")
    batch.add_argument("output_dir", type=Path, nargs="?", default=Path("dmn-output"),
                       help="Directory for generated DMN files (default: dmn-output)")
    batch.add_argument("--threads", type=int, default=os.cpu_count() or 4,
                       help="Number of worker threads (default: CPU count)")
    batch.add_argument("--max-rules", type=int, default=1000,
                       help="Max rules per DMN file (default: 1000)")
    batch.add_argument("--no-validate", action="store_true", help="Skip DMN sanity checks")

    generate = subparsers.add_parser("generate", help="Write sample rule files")
    generate.add_argument("output_dir", type=Path, help="Directory to write rule files to")
    generate.add_argument("--files", type=int, default=100, help="Number of files (default: 100)")
    generate.add_argument("--rules", type=int, help="Rules per file (default: random 5-20)")
    generate.add_argument("--seed", type=int, help="Random seed for reproducible output")

    return parser


def run_convert(args: argparse.Namespace) -> int:
    output = args.output or args.input.with_suffix(".dmn")
    config = BatchConfig(
        output_dir=output.parent,
        max_rules_per_table=args.max_rules,
        validate_output=not args.no_validate,
    )
    default_name, default_id = decision_names(args.input.stem)
    decision_name = args.name or default_name

    report = RuleParser().parse_text(args.input.read_text(encoding="utf-8"))
    if report.diagnostics:
        logger.warning("%d line(s) could not be parsed", len(report.diagnostics))

    documents = convert_rules(
        report.rules,
        output.stem,
        config,
        decision_name=decision_name,
        decision_id=args.decision_id or default_id,
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    for document in documents:
        output_path = output.parent / document.file_name
        output_path.write_text(document.xml, encoding="utf-8")
        logger.info("Wrote %s (%d rules)", output_path, document.rule_count)

    if args.excel:
        write_excel(report.rules, args.excel, decision_name)
        logger.info("Wrote %s", args.excel)

    return 0


def run_batch(args: argparse.Namespace) -> int:
    if not args.input_dir.is_dir():
        logger.error("Input directory '%s' does not exist", args.input_dir)
        return 1

    config = BatchConfig(
        output_dir=args.output_dir,
        max_workers=args.threads,
        max_rules_per_table=args.max_rules,
        validate_output=not args.no_validate,
    )
    result = BatchRuleEngine(config).process_directory(args.input_dir)
    print(result.summary())

    if result.total_files == 0:
        logger.error("No .txt files found in '%s'", args.input_dir)
        return 1
    return 1 if result.failed_files else 0


def run_generate(args: argparse.Namespace) -> int:
    paths = generate_sample_files(args.output_dir, args.files, args.rules, args.seed)
    print(f"Generated {len(paths)} rule files in {args.output_dir}/")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    handlers = {
        "convert": run_convert,
        "batch": run_batch,
        "generate": run_generate,
    }
    try:
        return handlers[args.command](args)
    except (BatchError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
