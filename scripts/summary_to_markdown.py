from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, List, Mapping, Optional

from lotto_sim.report import run_result_to_markdown


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a markdown summary from a lottery simulation result.json")
    parser.add_argument("result_json", type=Path, help="Path to result.json")
    parser.add_argument("--out", type=Path, default=None, help="Optional output markdown path")
    parser.add_argument("--event-limit", type=int, default=200, help="Max events listed in the appendix (default: 200)")

    args = parser.parse_args(argv)

    payload: Mapping[str, Any] = json.loads(args.result_json.read_text(encoding="utf-8-sig"))
    md = run_result_to_markdown(payload, event_limit=args.event_limit)

    if args.out is None:
        print(md)
    else:
        args.out.write_text(md, encoding="utf-8")


if __name__ == "__main__":
    main()
