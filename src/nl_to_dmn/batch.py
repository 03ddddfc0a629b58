"""
Batch conversion of rule text files to DMN.

Each input file goes through parse → partition → build (→ validate) on its
own worker thread. Files are independent of each other, so the only shared
structures are the executor's work queue and the stream of completed futures.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from nl_to_dmn.dmn_writer import DMNWriter, DecisionTableConfig
from nl_to_dmn.ir import Rule
from nl_to_dmn.partitioner import partition, partition_names
from nl_to_dmn.rule_parser import RuleParser
from nl_to_dmn.validator import DMNValidator


logger = logging.getLogger(__name__)

PROGRESS_EVERY = 10


class BatchError(Exception):
    """Raised when a single file cannot be converted."""


class NoValidRulesError(BatchError):
    """The file contains no parseable rule line."""


class DMNValidationError(BatchError):
    """Generated DMN failed the sanity checks."""

    def __init__(self, message: str, errors: list[str]):
        super().__init__(message)
        self.errors = errors


@dataclass(frozen=True)
class BatchConfig:
    """Settings for a batch run."""
    output_dir: Path = Path("dmn-output")
    max_workers: int = field(default_factory=lambda: os.cpu_count() or 4)
    max_rules_per_table: int = 1000
    validate_output: bool = True
    pattern: str = "*.txt"


@dataclass
class FileResult:
    """Outcome of converting one input file."""
    file_name: str
    success: bool
    rules_processed: int = 0
    dmn_files: list[Path] = field(default_factory=list)
    error: str | None = None
    duration: float = 0.0

    @classmethod
    def succeeded(
        cls, file_name: str, rules_processed: int, dmn_files: list[Path], duration: float
    ) -> "FileResult":
        return cls(file_name, True, rules_processed, dmn_files, None, duration)

    @classmethod
    def failed(cls, file_name: str, error: str, duration: float) -> "FileResult":
        return cls(file_name, False, error=error, duration=duration)


@dataclass
class BatchResult:
    """Totals over all files of a batch run."""
    file_results: list[FileResult] = field(default_factory=list)
    duration: float = 0.0

    @property
    def total_files(self) -> int:
        return len(self.file_results)

    @property
    def successful_files(self) -> int:
        return sum(1 for r in self.file_results if r.success)

    @property
    def failed_files(self) -> int:
        return self.total_files - self.successful_files

    @property
    def total_rules(self) -> int:
        return sum(r.rules_processed for r in self.file_results if r.success)

    @property
    def total_dmn_files(self) -> int:
        return sum(len(r.dmn_files) for r in self.file_results if r.success)

    def summary(self) -> str:
        """Human-readable report of the run."""
        average = (
            _format_duration(self.duration / self.total_files)
            if self.total_files else "N/A"
        )
        lines = [
            "=" * 60,
            "BATCH PROCESSING SUMMARY",
            "=" * 60,
            f"Total Files Processed:    {self.total_files}",
            f"Successful:               {self.successful_files}",
            f"Failed:                   {self.failed_files}",
            f"Total Rules Converted:    {self.total_rules}",
            f"Total DMN Files Created:  {self.total_dmn_files}",
            f"Total Processing Time:    {_format_duration(self.duration)}",
            f"Average Time per File:    {average}",
            "=" * 60,
        ]
        failures = [r for r in self.file_results if not r.success]
        if failures:
            lines.append("")
            lines.append("Failed Files:")
            for r in failures:
                lines.append(f"  - {r.file_name}: {r.error}")
        return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.3f}s"
    return f"{int(seconds * 1000)}ms"


@dataclass(frozen=True)
class DMNDocument:
    """One generated decision table."""
    file_name: str
    xml: str
    rule_count: int


def decision_names(base_name: str) -> tuple[str, str]:
    """Decision name and id derived from a file stem."""
    name = base_name.replace("-", " ").replace("_", " ")
    decision_id = base_name.lower().replace(" ", "_")
    return name, decision_id


def convert_rules(
    rules: Sequence[Rule],
    base_name: str,
    config: BatchConfig | None = None,
    decision_name: str | None = None,
    decision_id: str | None = None,
) -> list[DMNDocument]:
    """
    Build one DMN document per partition of ``rules``.

    The decision name and id default to values derived from ``base_name``.

    Raises:
        NoValidRulesError: ``rules`` is empty
        DMNValidationError: a generated document failed validation
    """
    config = config or BatchConfig()
    if not rules:
        raise NoValidRulesError("No valid rules found")

    default_name, default_id = decision_names(base_name)
    writer = DMNWriter(DecisionTableConfig(
        decision_name=decision_name or default_name,
        decision_id=decision_id or default_id,
    ))
    validator = DMNValidator()

    chunks = partition(rules, config.max_rules_per_table)
    names = partition_names(base_name, len(chunks))

    documents = []
    for file_name, chunk in zip(names, chunks):
        dmn_xml = writer.write(chunk)
        if config.validate_output:
            validation = validator.validate(dmn_xml)
            if not validation.is_valid:
                raise DMNValidationError(
                    f"Validation failed: {validation.errors}", validation.errors
                )
        documents.append(DMNDocument(file_name, dmn_xml, len(chunk)))

    return documents


def convert_text(
    text: str,
    base_name: str,
    config: BatchConfig | None = None,
    parser: RuleParser | None = None,
) -> list[DMNDocument]:
    """
    Convert the rule lines of one file to DMN documents.

    Lines that fail to parse are skipped; a file with no parseable line at
    all raises NoValidRulesError.
    """
    parser = parser or RuleParser()
    report = parser.parse_text(text)
    return convert_rules(report.rules, base_name, config)


class BatchRuleEngine:
    """Converts every rule file under a directory, one worker per file."""

    def __init__(self, config: BatchConfig | None = None):
        self.config = config or BatchConfig()

    def discover(self, input_dir: str | Path) -> list[Path]:
        """Rule files under ``input_dir``, recursively, in path order."""
        return sorted(p for p in Path(input_dir).rglob(self.config.pattern) if p.is_file())

    def process_directory(self, input_dir: str | Path) -> BatchResult:
        start = time.perf_counter()
        config = self.config

        logger.info("Input directory: %s", input_dir)
        logger.info("Output directory: %s", config.output_dir)
        logger.info(
            "Workers: %d, max rules per DMN: %d",
            config.max_workers, config.max_rules_per_table,
        )

        input_files = self.discover(input_dir)
        logger.info("Found %d input files", len(input_files))

        result = BatchResult()
        if not input_files:
            return result

        Path(config.output_dir).mkdir(parents=True, exist_ok=True)

        with ThreadPoolExecutor(max_workers=max(config.max_workers, 1)) as executor:
            futures = [
                executor.submit(self.process_file, path, input_dir) for path in input_files
            ]
            for done, future in enumerate(as_completed(futures), start=1):
                file_result = future.result()
                result.file_results.append(file_result)
                if not file_result.success:
                    logger.warning("Failed %s: %s", file_result.file_name, file_result.error)
                if done % PROGRESS_EVERY == 0 or done == len(futures):
                    logger.info("Progress: %d/%d files processed", done, len(futures))

        result.file_results.sort(key=lambda r: r.file_name)
        result.duration = time.perf_counter() - start
        return result

    def process_file(
        self, input_file: str | Path, input_dir: str | Path | None = None
    ) -> FileResult:
        """Convert one file. Conversion problems become a failed result.

        When ``input_dir`` is given, the file's subdirectory below it is kept
        under the output directory and in the reported file name.
        """
        path = Path(input_file)
        relative_dir = path.parent.relative_to(input_dir) if input_dir else Path()
        file_name = (relative_dir / path.name).as_posix()
        start = time.perf_counter()

        try:
            text = path.read_text(encoding="utf-8")
            documents = convert_text(text, path.stem, self.config)

            output_dir = Path(self.config.output_dir) / relative_dir
            output_dir.mkdir(parents=True, exist_ok=True)
            written = []
            for document in documents:
                output_path = output_dir / document.file_name
                output_path.write_text(document.xml, encoding="utf-8")
                written.append(output_path)

        except (BatchError, OSError, UnicodeDecodeError) as e:
            return FileResult.failed(file_name, str(e), time.perf_counter() - start)

        rule_count = sum(d.rule_count for d in documents)
        return FileResult.succeeded(file_name, rule_count, written, time.perf_counter() - start)


def process_directory(input_dir: str | Path, config: BatchConfig | None = None) -> BatchResult:
    """Convenience function to run a batch over ``input_dir``."""
    return BatchRuleEngine(config).process_directory(input_dir)
