"""CLI tool for donor code generation and validation."""

import argparse
import sys
from pathlib import Path

import pandas as pd
import structlog

from donorcodes.config import CodeGenConfig
from donorcodes.generator import CodeGenerator, GenerationError
from donorcodes.io import read_donors, read_entity_names, write_results
from donorcodes.logging import configure_logging
from donorcodes.types import CodeGenerationResult, DonorRecord
from donorcodes.validation import find_duplicate_codes


def _load_donors(args: argparse.Namespace, required: bool = False) -> list[DonorRecord]:
    """Load the donor registry; exit with status 1 if it is required but missing."""
    log = structlog.get_logger()
    path = Path(args.donors)
    if not path.exists():
        if required:
            log.error("donors_file_not_found", path=str(path))
            print(f"Error: donor file '{path}' not found", file=sys.stderr)
            sys.exit(1)
        log.warning("donors_file_not_found", path=str(path))
        print(f"Warning: donor file '{path}' not found, validating against an empty registry")
        return []
    return read_donors(path)


def _build_generator(args: argparse.Namespace, required: bool = False) -> CodeGenerator:
    config = CodeGenConfig()
    if getattr(args, "preferred_length", None) is not None:
        config.defaults.preferred_length = args.preferred_length
    if getattr(args, "max_suggestions", None) is not None:
        config.defaults.max_suggestions = args.max_suggestions
    return CodeGenerator(_load_donors(args, required), config)


def cmd_generate(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    names: list[str] = list(args.names or [])
    if args.input:
        names.extend(read_entity_names(args.input, column=args.column))
    if not names:
        print("No entity names given (pass names or --input FILE)")
        return

    generator = _build_generator(args)
    log.info("generate_start", entities=len(names), donors=len(generator.donors))

    results: list[tuple[str, CodeGenerationResult]] = []
    failures = 0
    for name in names:
        try:
            result = generator.generate_code(name)
        except GenerationError as e:
            failures += 1
            print(f"\n=== {name} ===\n  ERROR: {e}")
            continue
        results.append((name, result))
        _show_result(name, result)

    print(f"\nGenerated codes for {len(results)} of {len(names)} names ({failures} failed)")
    if args.output and results:
        write_results(results, args.output)
        print(f"Saved to: {args.output}")


def _show_result(name: str, result: CodeGenerationResult) -> None:
    """Display a generation result on screen."""
    rows = [
        {
            "rank": rank,
            "code": s.code,
            "confidence": s.confidence,
            "unique": s.is_unique,
            "pattern": s.pattern.kind.value,
        }
        for rank, s in enumerate([result.primary, *result.alternatives], start=1)
    ]
    print(f"\n=== {name} ===")
    print(pd.DataFrame(rows).to_string(index=False))
    print(f"  {result.primary.reasoning}")
    s = result.stats
    print(
        f"  generated={s.total_generated} unique={s.unique_count} "
        f"avg_confidence={s.average_confidence} time_ms={s.processing_time_ms}"
    )


def cmd_validate(args: argparse.Namespace) -> None:
    generator = _build_generator(args, required=True)
    for code in args.codes:
        v = generator.validate_custom_code(code)
        status = "AVAILABLE" if v.is_available else "TAKEN"
        if not v.is_valid and v.is_available:
            status = "INVALID"
        print(f"\n=== {code} ({status}) ===")
        for issue in v.issues:
            print(f"  issue: {issue}")
        if v.suggestions:
            print(f"  suggestions: {', '.join(v.suggestions)}")
        for rec in v.recommendations:
            print(f"  tip: {rec}")


def cmd_dupes(args: argparse.Namespace) -> None:
    donors = _load_donors(args, required=True)
    dupes = find_duplicate_codes(donors)

    print("=== Duplicate codes in donor registry ===")
    if not dupes:
        print("  No duplicates found.")
        return
    for code, names in dupes.items():
        print(f"  {code} (x{len(names)})")
        for name in names:
            print(f"    - {name}")
    print(f"\n  Total: {len(dupes)} duplicated codes, {sum(len(n) for n in dupes.values())} donors")


def cmd_serve(args: argparse.Namespace) -> None:
    """Serve the HTTP API."""
    import uvicorn

    from donorcodes.server import create_app

    log = structlog.get_logger()
    log.info("server_start", donors=args.donors, port=args.port)

    app = create_app(donors_path=args.donors)
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


def main() -> None:
    # Parent parser with global options (inherited by all subcommands)
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: LOG_LEVEL env or INFO)",
    )
    parent_parser.add_argument(
        "--donors",
        default="localdata/DONORS.csv",
        help="Donor registry file (.csv, .xlsx or .jsonl)",
    )

    parser = argparse.ArgumentParser(
        description="Donor code generation CLI",
        parents=[parent_parser],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate subcommand
    gen_parser = subparsers.add_parser("generate", parents=[parent_parser], help="Generate codes for entity names")
    gen_parser.add_argument("names", nargs="*", help="Entity names")
    gen_parser.add_argument("--input", "-i", help="File of entity names (.csv, .xlsx or .txt)")
    gen_parser.add_argument("--column", default="name", help="Name column in --input (default: name)")
    gen_parser.add_argument("--preferred-length", type=int, help="Preferred code length (default: 5)")
    gen_parser.add_argument("--max-suggestions", type=int, help="Alternatives per name (default: 5)")
    gen_parser.add_argument("--output", "-o", help="Write results to .csv or .jsonl")
    gen_parser.set_defaults(func=cmd_generate)

    # validate subcommand
    val_parser = subparsers.add_parser("validate", parents=[parent_parser], help="Validate custom codes")
    val_parser.add_argument("codes", nargs="+", help="Codes to check")
    val_parser.set_defaults(func=cmd_validate)

    # dupes subcommand
    dupes_parser = subparsers.add_parser("dupes", parents=[parent_parser], help="Find duplicate codes in the registry")
    dupes_parser.set_defaults(func=cmd_dupes)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", parents=[parent_parser], help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8765, help="Server port (default: 8765)")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
