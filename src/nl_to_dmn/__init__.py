# Natural Language to DMN Converter
# Turns plain-English "If ..., ..." business rules into DMN decision tables

__version__ = "0.1.0"

from nl_to_dmn.ir import (
    Operator,
    Condition,
    Action,
    Rule,
    ALWAYS_TRUE,
    normalize_variable_name,
)
from nl_to_dmn.rule_parser import (
    RuleParser,
    RuleParseError,
    EmptyRuleError,
    MissingKeywordError,
    MissingSeparatorError,
    UnparseableClauseError,
    ParseResult,
    ParseReport,
    parse_rule,
    parse_many,
    parse_file,
)
from nl_to_dmn.dmn_writer import DMNWriter, DecisionTableConfig, build, write_dmn
from nl_to_dmn.partitioner import partition, partition_names
from nl_to_dmn.validator import DMNValidator, ValidationResult, validate_dmn
from nl_to_dmn.excel_writer import ExcelWriter, ExcelWriterConfig, write_excel
from nl_to_dmn.batch import (
    BatchConfig,
    BatchRuleEngine,
    BatchResult,
    FileResult,
    DMNDocument,
    BatchError,
    NoValidRulesError,
    DMNValidationError,
    convert_rules,
    convert_text,
    process_directory,
)
from nl_to_dmn.generators import generate_rule_lines, generate_sample_files

__all__ = [
    # Version
    "__version__",
    # Core IR
    "Operator",
    "Condition",
    "Action",
    "Rule",
    "ALWAYS_TRUE",
    "normalize_variable_name",
    # Parser
    "RuleParser",
    "RuleParseError",
    "EmptyRuleError",
    "MissingKeywordError",
    "MissingSeparatorError",
    "UnparseableClauseError",
    "ParseResult",
    "ParseReport",
    "parse_rule",
    "parse_many",
    "parse_file",
    # Writers
    "DMNWriter",
    "DecisionTableConfig",
    "build",
    "write_dmn",
    "ExcelWriter",
    "ExcelWriterConfig",
    "write_excel",
    # Partitioning and validation
    "partition",
    "partition_names",
    "DMNValidator",
    "ValidationResult",
    "validate_dmn",
    # Batch
    "BatchConfig",
    "BatchRuleEngine",
    "BatchResult",
    "FileResult",
    "DMNDocument",
    "BatchError",
    "NoValidRulesError",
    "DMNValidationError",
    "convert_rules",
    "convert_text",
    "process_directory",
    # Generators
    "generate_rule_lines",
    "generate_sample_files",
]
