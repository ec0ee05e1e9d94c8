"""CLI entrypoint for synthetic ADT^A01 generation.

Builds field values with Faker, encodes them and writes `.hl7` files.
"""

from __future__ import annotations

import argparse
import logging
import os
import random
from datetime import datetime
from typing import Any, Dict, List

from faker import Faker

from .delimiters import SEGMENT_TERMINATOR
from .generators import gen_event_values, gen_header_values, gen_patient_values, gen_visit_values
from .messages import ADT_A01, build_adt_a01
from .registry import SegmentRegistry, build_default_registry
from .utils import safe_for_filename

logger = logging.getLogger(__name__)

TERMINATORS = {"cr": "\r", "lf": "\n", "crlf": "\r\n"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def generate_run(
    *,
    n_messages: int,
    seed: int | None,
    out_dir: str,
    per_message: bool,
    layouts: str | None = None,
    include_visit: bool = True,
    terminator: str = SEGMENT_TERMINATOR,
) -> Dict[str, Any]:
    if seed is not None:
        random.seed(seed)
        Faker.seed(seed)

    # A layout file replaces the built-in MSH/EVN/PID/PV1 layouts wholesale.
    if layouts:
        registry = SegmentRegistry()
        registry.load_yaml(layouts)
    else:
        registry = build_default_registry()

    os.makedirs(out_dir, exist_ok=True)

    run_ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = f"run_{run_ts}"

    count = 0
    written_files: List[str] = []

    for _ in range(n_messages):
        header = gen_header_values(ADT_A01)
        msg = build_adt_a01(
            header,
            gen_event_values(ADT_A01),
            gen_patient_values(),
            gen_visit_values() if include_visit else None,
            registry=registry,
            terminator=terminator,
        )
        count += 1

        if per_message:
            path = os.path.join(out_dir, f"ADT_{safe_for_filename(header['message_control_id'])}_{run_ts}.hl7")
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(msg)
            written_files.append(path)
            logger.info("Wrote %s", path)
        else:
            path = os.path.join(out_dir, f"ADT_{run_ts}.hl7")
            # only append to a file this run started; an older run's file is replaced
            mode = "a" if path in written_files else "w"
            with open(path, mode, encoding="utf-8", newline="") as f:
                if mode == "a":
                    f.write(terminator)
                f.write(msg)
            if mode == "w":
                written_files.append(path)
                logger.info("Writing %s", path)

    return {"run_id": run_id, "count": count, "written_files": written_files}

def _log_level(value: str) -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(f"invalid log level {value!r} (choose from {', '.join(LOG_LEVELS)})")
    return level

def _parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Generate synthetic HL7 v2 ADT^A01 messages.")
    ap.add_argument("--n", type=int, default=10, help="Number of messages")
    ap.add_argument("--seed", type=int, default=None, help="Seed for deterministic runs")
    ap.add_argument("--out", type=str, default=os.getenv("HL7SEG_OUT_DIR", "out"), help="Output folder")
    ap.add_argument("--per-message", action="store_true", help="Write one file per message")
    ap.add_argument("--no-visit", action="store_true", help="Leave out the PV1 segment")
    ap.add_argument(
        "--layouts",
        default=os.getenv("HL7SEG_LAYOUTS"),
        help="YAML file with site-specific MSH/EVN/PID/PV1 layouts (or HL7SEG_LAYOUTS env var)",
    )
    ap.add_argument("--terminator", choices=sorted(TERMINATORS), default="cr", help="Segment terminator")
    ap.add_argument(
        "--log-level",
        type=_log_level,
        default=os.getenv("HL7SEG_LOG_LEVEL", "WARNING"),
        help=f"Logging level: {', '.join(LOG_LEVELS)} (or HL7SEG_LOG_LEVEL env var)",
    )
    return ap.parse_args(argv)

def main(argv=None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    res = generate_run(
        n_messages=int(args.n),
        seed=args.seed,
        out_dir=args.out,
        per_message=bool(args.per_message),
        layouts=args.layouts,
        include_visit=not args.no_visit,
        terminator=TERMINATORS[args.terminator],
    )
    print("[DONE]", {"run_id": res["run_id"], "count": res["count"], "written_files": len(res["written_files"])})
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
