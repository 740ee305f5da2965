"""Command-line entry point: rank a record file against a free-text query."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
import uuid
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import yaml

from search_score.config.environment import EnvironmentConfig
from search_score.config.exceptions import ConfigurationError
from search_score.config.loader import load_config
from search_score.config.models import AppConfig
from search_score.logging import get_logger
from search_score.logging.config import configure_logging
from search_score.logging.context import log_context
from search_score.scoring import MatchScorer, ScoreResult, ScoringError

logger = get_logger(__name__, component="cli")

RankedRecord = Tuple[Any, ScoreResult]


def split_query(text: Optional[str], case_sensitive: bool = False) -> List[str]:
    """Split free text into keywords on whitespace.

    Keywords are lowercased unless case_sensitive is set, since record values
    are always compared lowercased.
    """
    if not text:
        return []
    if not case_sensitive:
        text = text.lower()
    return text.split()


def load_records(records_path: Path) -> List[Any]:
    """
    Load the records to rank from a JSON or YAML file.

    Files ending in .json are parsed as JSON, everything else as YAML. The
    document must be a list of mappings.

    Raises:
        ConfigurationError: If the file is missing, unparsable or not a list of mappings
    """
    records_path = Path(records_path)
    try:
        with open(records_path, "r", encoding="utf-8") as f:
            if records_path.suffix.lower() == ".json":
                records = json.load(f)
            else:
                records = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Records file not found: {records_path}",
            suggestions=["Check the --records path"],
        ) from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to parse records file {records_path}: {e}",
            suggestions=["Records must be a JSON or YAML list of mappings"],
        ) from e
    except UnicodeDecodeError as e:
        raise ConfigurationError(
            f"Records file {records_path} is not valid UTF-8: {e}",
            suggestions=["Save the records file with UTF-8 encoding"],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read records file {records_path}: {e}",
            suggestions=[
                "Check that --records points to a file, not a directory",
                "Check file permissions",
            ],
        ) from e

    if records is None:
        return []

    if not isinstance(records, list):
        raise ConfigurationError(
            f"Records file must contain a list, got {type(records).__name__}",
            suggestions=["Wrap the records in a top-level list"],
        )

    errors = [
        f"Record {idx} is a {type(record).__name__}, expected a mapping"
        for idx, record in enumerate(records)
        if not isinstance(record, dict)
    ]
    if errors:
        raise ConfigurationError(
            "Records file contains invalid entries",
            errors=errors,
            suggestions=["Every record must be a mapping of field name to value"],
        )
    return records


def rank_records(
    scorer: MatchScorer,
    records: Sequence[Any],
    keywords: Sequence[str],
    min_score: float = 0.0,
    limit: int = 0,
) -> List[RankedRecord]:
    """
    Score every record and keep the best ones, highest score first.

    Records scoring at or below min_score are dropped. Ties keep their input
    order. A limit of 0 keeps every remaining record.
    """
    ranked = []
    for record in records:
        result = scorer.evaluate(record, list(keywords))
        if result.score > min_score:
            ranked.append((record, result))

    ranked.sort(key=lambda item: item[1].score, reverse=True)
    if limit:
        ranked = ranked[:limit]
    return ranked


def format_results(ranked: Sequence[RankedRecord], display_field: str = "name") -> str:
    """Format ranked records as aligned ``score  label`` lines."""
    if not ranked:
        return "No matching records"

    lines = []
    for position, (record, result) in enumerate(ranked, 1):
        label = record.get(display_field) if isinstance(record, dict) else None
        if label is None:
            label = json.dumps(record, ensure_ascii=False, default=str)
        lines.append(f"{position:>3}. {result.score:>8.2f}  {label}")
    return "\n".join(lines)


def format_results_json(ranked: Sequence[RankedRecord]) -> str:
    """Format ranked records as a JSON array of score/record objects."""
    payload = [
        {
            "score": result.score,
            "penalized": result.penalized,
            "matched_keywords": result.matched_keywords,
            "record": record,
        }
        for record, result in ranked
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level and format.

    Log level priority: CLI > environment > config file.
    Log format priority: environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    if not env_config.log_format:
        env_config.log_format = app_config.logging.format or "key-value"

    return app_config, env_config


def non_negative_int(value: str) -> int:
    """argparse type for counts where 0 means unlimited."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def non_negative_float(value: str) -> float:
    """argparse type for score thresholds."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'")
    if not number >= 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search Score - rank records by keyword relevance"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the condition file (default: search_score.yaml)",
    )
    parser.add_argument(
        "--records",
        type=Path,
        required=True,
        help="JSON or YAML file holding a list of records",
    )
    parser.add_argument(
        "--query",
        default="",
        help="Free-text search query, split into keywords on whitespace",
    )
    parser.add_argument(
        "--min-score",
        type=non_negative_float,
        default=None,
        help="Only list records scoring above this value (overrides config)",
    )
    parser.add_argument(
        "--limit",
        type=non_negative_int,
        default=None,
        help="Maximum number of records to list, 0 for all (overrides config)",
    )
    parser.add_argument(
        "--display-field",
        default="name",
        help="Record field printed next to each score (default: name)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the search scorer.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=env_config.log_format,
            environment=env_config.environment,
        )

        records = load_records(args.records)
        keywords = split_query(args.query, case_sensitive=app_config.search.case_sensitive)
        min_score = args.min_score if args.min_score is not None else app_config.search.min_score
        limit = args.limit if args.limit is not None else app_config.search.limit

        scorer = MatchScorer(app_config.conditions)

        with log_context(query_id=uuid.uuid4().hex[:12]):
            logger.info(
                "Ranking records",
                extra={
                    "event": "search.started",
                    "record_count": len(records),
                    "keyword_count": len(keywords),
                    "condition_count": len(scorer.conditions),
                },
            )

            ranked = rank_records(scorer, records, keywords, min_score=min_score, limit=limit)

            logger.info(
                f"Ranking completed: {len(ranked)} of {len(records)} records listed",
                extra={
                    "event": "search.completed",
                    "listed_count": len(ranked),
                    "duration_seconds": round(time.time() - start_time, 4),
                },
            )

        if args.json:
            print(format_results_json(ranked))
        else:
            print(format_results(ranked, display_field=args.display_field))
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            "Configuration error",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except ScoringError as e:
        print(f"Scoring Error: {e}", file=sys.stderr)
        logger.error(
            "Scoring failed",
            extra={"event": "search.failed", "error_type": type(e).__name__, "error": str(e)},
        )
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during search",
            extra={"event": "search.fatal", "error_type": type(e).__name__, "error": str(e)},
            exc_info=True,
        )
        return 1


def cli() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
