"""Donor registry input and generation result output."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pandas as pd
import structlog

from donorcodes.types import CodeGenerationResult, DonorRecord, GeneratedCodeSuggestion

log = structlog.get_logger()

EXCEL_SUFFIXES = {".xlsx", ".xls"}


def read_donors(path: str | Path) -> list[DonorRecord]:
    """Read donor records from CSV, Excel or JSONL.

    Column headers may be the registry's own ("NAME", "CEB CODE",
    "CONTRIBUTOR TYPE", "TYPE") or snake_case field names. Rows without
    a name are skipped.
    """
    path = Path(path)

    if path.suffix == ".jsonl":
        rows = _read_jsonl(path)
    elif path.suffix in EXCEL_SUFFIXES:
        df = pd.read_excel(path, dtype=str, keep_default_na=False).fillna("")
        df.columns = [str(c).strip() for c in df.columns]
        rows = df.to_dict(orient="records")
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        df.columns = [str(c).strip() for c in df.columns]
        rows = df.to_dict(orient="records")

    donors = [DonorRecord.from_mapping(row) for row in rows]
    donors = [d for d in donors if d.name]
    log.info("donors_loaded", path=str(path), count=len(donors))
    return donors


def _read_jsonl(path: Path) -> list[dict]:
    rows: list[dict] = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            rows.append(json.loads(line))
    return rows


def read_entity_names(path: str | Path, column: str = "name") -> list[str]:
    """Read entity names to generate codes for from a CSV, Excel or text file."""
    path = Path(path)

    if path.suffix == ".txt":
        lines = path.read_text(encoding="utf-8").splitlines()
        return [line.strip() for line in lines if line.strip()]

    if path.suffix in EXCEL_SUFFIXES:
        df = pd.read_excel(path, dtype=str, keep_default_na=False)
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    return [n.strip() for n in df[column].fillna("").tolist() if n.strip()]


def write_results(
    results: list[tuple[str, CodeGenerationResult]],
    path: str | Path,
) -> None:
    """Write generation results to CSV (one row per suggestion) or JSONL."""
    path = Path(path)

    if path.suffix == ".jsonl":
        _write_jsonl(results, path)
    else:
        _write_csv(results, path)
    log.info("results_written", path=str(path), entities=len(results))


def _write_csv(results: list[tuple[str, CodeGenerationResult]], path: Path) -> None:
    fieldnames = [
        "entity_name", "rank", "code", "confidence", "is_unique", "pattern", "reasoning",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for entity_name, result in results:
            for rank, s in enumerate([result.primary, *result.alternatives], start=1):
                writer.writerow({
                    "entity_name": entity_name,
                    "rank": rank,
                    "code": s.code,
                    "confidence": s.confidence,
                    "is_unique": s.is_unique,
                    "pattern": s.pattern.kind.value,
                    "reasoning": s.reasoning,
                })


def _suggestion_record(s: GeneratedCodeSuggestion) -> dict:
    return {
        "code": s.code,
        "confidence": s.confidence,
        "reasoning": s.reasoning,
        "is_unique": s.is_unique,
        "pattern": s.pattern.kind.value,
        "strategy": s.strategy.value,
    }


def _write_jsonl(results: list[tuple[str, CodeGenerationResult]], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        for entity_name, result in results:
            record = {
                "entity_name": entity_name,
                "primary": _suggestion_record(result.primary),
                "alternatives": [_suggestion_record(s) for s in result.alternatives],
                "stats": {
                    "total_generated": result.stats.total_generated,
                    "unique_count": result.stats.unique_count,
                    "average_confidence": result.stats.average_confidence,
                    "processing_time_ms": result.stats.processing_time_ms,
                },
            }
            f.write(json.dumps(record) + "\n")
