"""Run the diary duplication once from the command line (cron or manual use)."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

from backend.app.config import load_settings
from backend.app.domain.diary import DiaryDuplicationError, DiaryDuplicationService
from backend.app.infra.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--profile", help="Config profile name (default: dev).")
    parser.add_argument("--config-dir", help="Directory holding <profile>.yaml.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the page that would be created instead of creating it.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(profile=args.profile, config_dir=args.config_dir)
    configure_logging(settings)
    service = DiaryDuplicationService(settings)

    try:
        if args.dry_run:
            preview = service.preview()
            print(
                json.dumps(
                    {
                        "source_entry_id": preview.source_entry_id,
                        "exists_for_today": preview.exists_for_today,
                        "properties": preview.properties,
                        "block_count": len(preview.children),
                    },
                    indent=2,
                )
            )
            return 0
        outcome = service.duplicate()
    except DiaryDuplicationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if outcome.status == "exists":
        print("Diary entry for today already exists.")
    else:
        print(f"Created diary page {outcome.created_entry_id} ({outcome.block_count} blocks).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
