# skills_server/cli.py
"""
Command line entry point for the skills server.

  serve        run the MCP server on stdio
  api          run the browsing HTTP API
  build-index  scan a skills checkout and write skills_index.json
  rank         rank one query, or a CSV/XLSX batch with a Query column
  simulate     run the sandbox scenarios through auto_skill
  setup        register the server with an MCP client
"""

from __future__ import annotations
import argparse
import re
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd
from loguru import logger

from .catalog import Catalog, build_index, load_catalog
from .config import AUTO_SKILL_TOP_K, LOG_LEVEL, SIMULATION_SCENARIOS, SKILLS_INDEX_PATH
from .normalize import normalize_whitespace
from .ranker import rank


def _configure_logging(level: str = LOG_LEVEL) -> None:
    # stdout belongs to the MCP transport
    logger.remove()
    logger.add(sys.stderr, level=level)


def load_queries(path: Path) -> List[str]:
    ext = path.suffix.lower()
    df = pd.read_excel(path) if ext in {".xlsx", ".xls"} else pd.read_csv(path)
    cols = {c.lower(): c for c in df.columns}
    qcol = cols.get("query")
    if not qcol:
        raise ValueError(f"Expected column 'Query' in {path}. Found: {list(df.columns)}")
    return df[qcol].fillna("").astype(str).apply(normalize_whitespace).tolist()


def _dedup_preserve_order(seq: List[str]) -> List[str]:
    return list(dict.fromkeys(seq))


def write_two_column_csv(preds: Dict[str, List[str]], out_path: Path) -> None:
    """One ``(Query, Skill_id)`` row per predicted skill."""
    rows: List[Tuple[str, str]] = [(q, sid) for q, ids in preds.items() for sid in ids]
    df = pd.DataFrame(rows, columns=["Query", "Skill_id"])
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)


def rank_batch(catalog: Catalog, queries: List[str], top_k: int) -> Dict[str, List[str]]:
    unique_preds: Dict[str, List[str]] = {}
    for uq in _dedup_preserve_order(queries):
        unique_preds[uq] = [h.record.id for h in rank(uq, catalog, top_k=top_k)]
    return {q: unique_preds[q] for q in queries}


def _cmd_serve(args) -> int:
    from .mcp_server import run

    run()
    return 0


def _cmd_api(args) -> int:
    import uvicorn

    uvicorn.run("skills_server.api:app", host=args.host, port=args.port)
    return 0


def _cmd_build_index(args) -> int:
    out = build_index(Path(args.root), Path(args.out))
    print(f"Wrote skills index to {out}")
    return 0


def _cmd_rank(args) -> int:
    catalog = load_catalog(Path(args.index) if args.index else None)
    if args.inp:
        queries = load_queries(Path(args.inp))
        print(f"Loaded {len(queries)} queries from {args.inp}")
        preds = rank_batch(catalog, queries, args.topk)
        out = Path(args.out or "artifacts/rank_predictions.csv")
        write_two_column_csv(preds, out)
        print(f"Wrote {sum(len(v) for v in preds.values())} rows to {out}")
        return 0
    if not args.query:
        print("Provide a query or --in FILE", file=sys.stderr)
        return 2
    hits = rank(args.query, catalog, top_k=args.topk)
    if not hits:
        print("No matching skills.")
    for hit in hits:
        print(f"{hit.score:>3}  {hit.record.id}  ({hit.record.category})")
    return 0


def _cmd_simulate(args) -> int:
    from .tools import auto_skill

    catalog = load_catalog(Path(args.index) if args.index else None)
    print("Starting skills sandbox simulation...")
    for task in args.tasks or SIMULATION_SCENARIOS:
        result = auto_skill(catalog, task)
        print(f'\nUSER TASK: "{task}"')
        print("DETECTED SKILLS:")
        headers = re.findall(r"^## (.+)$", result.text, flags=re.MULTILINE)
        if result.is_error:
            print(f"   error: {result.text}")
        elif headers:
            for h in headers:
                print(f"   - {h}")
        else:
            print("   no specific skills found (general fallback)")
    return 0


def _cmd_setup(args) -> int:
    from .clients import install_clients

    for p in install_clients(args.client):
        print(f"Configured {p}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="skills-mcp-server")
    sub = ap.add_subparsers(dest="command")

    sub.add_parser("serve", help="run the MCP server on stdio").set_defaults(func=_cmd_serve)

    p = sub.add_parser("api", help="run the browsing HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.set_defaults(func=_cmd_api)

    p = sub.add_parser("build-index", help="scan SKILL.md files and write the index")
    p.add_argument("root", help="checkout of the skills repository")
    p.add_argument("--out", default=str(SKILLS_INDEX_PATH))
    p.set_defaults(func=_cmd_build_index)

    p = sub.add_parser("rank", help="rank skills for a query or a batch file")
    p.add_argument("query", nargs="?", default="")
    p.add_argument("--topk", type=int, default=AUTO_SKILL_TOP_K)
    p.add_argument("--index", default=None, help="explicit skills_index.json")
    p.add_argument("--in", dest="inp", default=None, help="CSV/XLSX with a Query column")
    p.add_argument("--out", dest="out", default=None)
    p.set_defaults(func=_cmd_rank)

    p = sub.add_parser("simulate", help="run sandbox tasks through auto_skill")
    p.add_argument("tasks", nargs="*")
    p.add_argument("--index", default=None)
    p.set_defaults(func=_cmd_simulate)

    p = sub.add_parser("setup", help="register the server with an MCP client")
    p.add_argument("--client", required=True, choices=["gemini", "claude", "cursor", "vscode", "copilot", "opencode", "all"])
    p.set_defaults(func=_cmd_setup)
    return ap


def main(argv: List[str] | None = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    if not getattr(args, "func", None):
        # bare invocation, as MCP clients launch it
        return _cmd_serve(args)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
