from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillproof.adapters import build_default_registry, parse_timestamp  # noqa: E402
from skillproof.core.config import settings  # noqa: E402
from skillproof.schemas import PlatformCredentials  # noqa: E402
from skillproof.services import SkillVerificationService  # noqa: E402


def file_payload_loader(base_dir: Path):
    """Loader that reads ``payload_file`` relative to the input file, else the inline payload."""

    def _load(credentials: PlatformCredentials) -> Any:
        payload_file = credentials.value("payload_file")
        if not payload_file:
            return credentials.payload
        path = (base_dir / str(payload_file)).resolve()
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return text

    return _load


def main() -> None:
    parser = argparse.ArgumentParser(description="Build a skill profile from pre-fetched platform payloads.")
    parser.add_argument("--input", required=True, help="JSON file: {user_id, credentials: {platform_id: {...}}}")
    parser.add_argument("--out", default="", help="Output JSON path (stdout when omitted)")
    parser.add_argument("--now", default="", help="Fixed ISO-8601 'now' for reproducible scoring")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")

    input_path = Path(args.input).resolve()
    request = json.loads(input_path.read_text(encoding="utf-8"))
    credentials = {
        platform_id: PlatformCredentials.model_validate(entry)
        for platform_id, entry in (request.get("credentials") or {}).items()
    }

    fixed_now = parse_timestamp(args.now) if args.now else None
    if args.now and fixed_now is None:
        raise SystemExit(f"Invalid --now value: {args.now!r}")

    def clock() -> datetime:
        return fixed_now or datetime.now(timezone.utc)

    registry = build_default_registry(
        settings.enabled_platforms,
        loader=file_payload_loader(input_path.parent),
        clock=clock,
    )
    service = SkillVerificationService(registry, clock=clock)
    result = asyncio.run(service.verify(str(request.get("user_id") or "anonymous"), credentials))

    output = result.model_dump_json(indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output + "\n", encoding="utf-8")
        print(f"Wrote {len(result.skills)} skills to {out_path}")
    else:
        print(output)


if __name__ == "__main__":
    main()
