# /scripts/seed_records.py
# Load medicine master data into the configured RecordStore.
#
# Input: a JSON object keyed by product code (the shape of the original
# `drugs` tree), or a JSON list of records that each carry an `id`.
#
# Usage:
#   python scripts/seed_records.py data/drugs.json
#   python scripts/seed_records.py data/drugs.json --dry-run

from __future__ import annotations
import argparse, asyncio, json, logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from mediscan.domain.models import Record

log = logging.getLogger("mediscan.seed")


def iter_raw(data: Any) -> Iterable[Tuple[str, Dict[str, Any]]]:
    if isinstance(data, dict):
        for code, body in data.items():
            if isinstance(body, dict):
                yield str(code), body
    elif isinstance(data, list):
        for body in data:
            if isinstance(body, dict) and body.get("id"):
                yield str(body["id"]), body
    else:
        raise ValueError("expected a JSON object or list")


def load_records(path: Path) -> Tuple[List[Record], int]:
    data = json.loads(path.read_text(encoding="utf-8"))
    ok: List[Record] = []
    bad = 0
    for code, body in iter_raw(data):
        try:
            ok.append(Record.from_wire(code.strip(), body))
        except ValidationError as e:
            bad += 1
            log.warning("skip %r: %s", code, e.errors(include_url=False))
    return ok, bad


async def seed(records: List[Record]) -> None:
    from mediscan.container import get_record_store
    store = get_record_store()
    for r in records:
        await store.put(r)


def main():
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    ap = argparse.ArgumentParser(description="Seed medicine records")
    ap.add_argument("path", type=Path)
    ap.add_argument("--dry-run", action="store_true", help="Validate only, write nothing")
    args = ap.parse_args()

    records, bad = load_records(args.path)
    log.info("parsed %d records (%d skipped) from %s", len(records), bad, args.path)
    if args.dry_run:
        return
    asyncio.run(seed(records))
    log.info("seeded %d records", len(records))


if __name__ == "__main__":
    main()
