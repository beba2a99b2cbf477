from __future__ import annotations
import argparse, json
from contact_search import Engine
from contact_search import config as CFG
from contact_search.models import SortState
from contact_search.normalize import format_phone_number

def _print_rows(rows) -> None:
    if not rows:
        print("(no matches)"); return
    print(f"{'#':<3} {'Name':<28} {'Email':<32} {'Phone':<16} Company")
    for i, c in enumerate(rows, 1):
        print(f"{i:<3} {c.name:<28} {c.email or '':<32} {format_phone_number(c.phone):<16} {c.company or ''}")

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Contact search CLI (Engine-backed)")
    p.add_argument("--contacts", nargs="+", default=[], help="Contact .json/.csv files or folders")
    p.add_argument("--db", default=None, help='Store DSN: "memory://" or "sqlite:///path"')
    p.add_argument("--q", default=None, help="Single query to run once")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--sort", choices=sorted(CFG.SORT_COMPARATORS), default=None, help="Column sort")
    p.add_argument("--desc", action="store_true", help="Sort descending")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--explain", action="store_true", help="Show tier and tie-break field per match")
    p.add_argument("--serve", action="store_true", help="Run the Flask UI instead of querying")
    p.add_argument("--host", default=CFG.WEB_HOST)
    p.add_argument("--port", type=int, default=CFG.WEB_PORT)
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    if args.serve:
        from .web import main as serve
        mode = ["--build", "--contacts", *args.contacts] if args.contacts else ["--load"]
        extra = (["--db", args.db] if args.db else []) + ["--host", args.host, "--port", str(args.port)]
        return serve(mode + extra + (["--verbose"] if args.verbose else []))

    eng = Engine()
    try:
        if args.contacts:
            eng.build(args.contacts, db_dsn=args.db, verbose=args.verbose)
        elif args.db:
            eng.load(db_dsn=args.db, verbose=args.verbose)
        else:
            p.error("provide --contacts and/or --db")

        sort = SortState(args.sort, "desc" if args.desc else "asc") if args.sort else None

        def run_query(q: str):
            if args.explain:
                matches = eng.explain(q)
                if args.json:
                    print(json.dumps([{"tier": m.tier, "bestField": m.best_field, **m.record.to_dict()}
                                      for m in matches], ensure_ascii=False, indent=2))
                    return
                if not matches:
                    print("(no matches, or query too short to filter)"); return
                for i, m in enumerate(matches, 1):
                    print(f"{i:<3} tier={m.tier} field={m.best_field:<8} {m.record.name}")
                return
            rows = eng.search(q, sort=sort)
            if args.json:
                print(json.dumps([c.to_dict() for c in rows], ensure_ascii=False, indent=2))
            else:
                _print_rows(rows)

        if args.q is not None:
            run_query(args.q)

        if args.repl:
            print("Type a query (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                run_query(q)

        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
