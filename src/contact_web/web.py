from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify, Response
from contact_search.engine import Engine, EngineNotReady
from contact_search.models import SortState
from contact_search import config as CFG

log = logging.getLogger(__name__)

app = Flask(__name__)
_engine: Engine | None = None


def _json_error(message: str, status: int):
    return jsonify({"message": message}), status


def _engine_or_503() -> Engine:
    if _engine is None or not _engine.ready:
        raise EngineNotReady("Engine not initialized")
    return _engine


@app.errorhandler(EngineNotReady)
def _not_ready(exc: EngineNotReady):
    log.error("request failed: %s", exc)
    return _json_error("Engine not initialized", 503)


def _sort_from_args() -> SortState | None:
    key = request.args.get("sort", "", type=str)
    if key not in CFG.SORT_COMPARATORS:
        return None
    direction = request.args.get("dir", "asc", type=str)
    return SortState(key=key, dir="desc" if direction == "desc" else "asc")


def _filters_from_args() -> dict[str, list[str]]:
    return {c: request.args.getlist(c) for c in CFG.FILTER_COLUMNS if request.args.getlist(c)}


# ---------- API ----------
@app.get("/api/health")
def api_health():
    eng = _engine_or_503()
    return jsonify({"ok": True, "contacts": eng.count()})


@app.get("/api/contacts")
def api_contacts():
    eng = _engine_or_503()
    q = request.args.get("q", "", type=str)
    rows = eng.search(q, sort=_sort_from_args(), filters=_filters_from_args())
    return jsonify([c.to_dict() for c in rows])


@app.get("/api/contacts/search")
def api_contacts_search():
    eng = _engine_or_503()
    q = request.args.get("q", "", type=str)
    if not q:
        return _json_error("Search query is required", 400)
    return jsonify([c.to_dict() for c in eng.search(q)])


@app.get("/api/contacts/<cid>")
def api_contact_get(cid: str):
    eng = _engine_or_503()
    try:
        return jsonify(eng.get(cid).to_dict())
    except KeyError:
        return _json_error("Contact not found", 404)


@app.post("/api/contacts")
def api_contact_create():
    eng = _engine_or_503()
    try:
        contact = eng.create(request.get_json(silent=True))
    except ValueError as exc:
        return _json_error(str(exc), 400)
    return jsonify(contact.to_dict()), 201


@app.patch("/api/contacts/<cid>")
def api_contact_update(cid: str):
    eng = _engine_or_503()
    try:
        contact = eng.update(cid, request.get_json(silent=True))
    except KeyError:
        return _json_error("Contact not found", 404)
    except ValueError as exc:
        return _json_error(str(exc), 400)
    return jsonify(contact.to_dict())


@app.delete("/api/contacts/<cid>")
def api_contact_delete(cid: str):
    eng = _engine_or_503()
    if not eng.delete(cid):
        return _json_error("Contact not found", 404)
    return Response(status=204)


@app.get("/api/cache/stats")
def api_cache_stats():
    st = _engine_or_503().cache_stats()
    return jsonify({"size": st.size, "keys": st.keys, "hits": st.hits,
                    "misses": st.misses, "evictions": st.evictions})


# ---------- UI ----------
@app.get("/")
def home():
    # A tiny SPA: CSS variables + minimal JS, no external deps.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Contacts • Search</title>
<style>
:root{
  --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6;
  --accent:#6ee7ff; --border:#1c2530; --mark-bg:rgba(110,231,255,.2);
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:15px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
}
.container{ max-width:1100px; margin:24px auto; padding:0 16px }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px }
h1{ font-size:20px; margin:0 0 8px 0 }
input{
  width:100%; padding:12px 14px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); outline:none; font-size:16px;
}
input:focus{ border-color:var(--accent) }
.meta{ color:var(--muted); font-size:13px; margin:8px 0 }
table{ width:100%; border-collapse:collapse; margin-top:8px }
th,td{ text-align:left; padding:9px 10px; border-top:1px solid var(--border) }
th{ color:var(--muted); cursor:pointer; user-select:none }
tr:hover td{ background:#0d131a }
.err{ color:#ffb0b0 }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Contacts</h1>
      <input id="q" type="text" placeholder="Search name, email, company or phone…" autocomplete="off" autofocus />
      <div class="meta" id="stats">Loading…</div>
      <table>
        <thead><tr>
          <th data-key="name">Name</th><th data-key="email">Email</th><th data-key="phone">Phone</th>
          <th data-key="company">Company</th><th data-key="city">City</th><th data-key="state">State</th>
          <th data-key="contactType">Type</th>
        </tr></thead>
        <tbody id="out"></tbody>
      </table>
    </div>
  </div>
<script>
const $ = (s) => document.querySelector(s);
const q = $("#q"), out = $("#out"), stats = $("#stats");
let t, sort = null; // {key, dir}
const esc = (s) => String(s ?? "").replace(/[&<>"]/g, c => ({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;"}[c]));

async function load(){
  const params = new URLSearchParams({q: q.value});
  if(sort){ params.set("sort", sort.key); params.set("dir", sort.dir); }
  const t0 = performance.now();
  try{
    const resp = await fetch(`/api/contacts?${params}`);
    if(!resp.ok) throw new Error(`HTTP ${resp.status}`);
    const rows = await resp.json();
    stats.textContent = `${rows.length} contacts • ~${Math.max(1, Math.round(performance.now() - t0))} ms`;
    out.innerHTML = rows.map(r => `<tr><td>${esc(r.name)}</td><td>${esc(r.email)}</td><td>${esc(r.phone)}</td>
      <td>${esc(r.company)}</td><td>${esc(r.city)}</td><td>${esc(r.state)}</td><td>${esc(r.contactType)}</td></tr>`).join("");
  }catch(e){
    stats.innerHTML = `<span class="err">Error: ${esc(e.message ?? e)}</span>`;
  }
}

q.addEventListener("input", () => { clearTimeout(t); t = setTimeout(load, __DEBOUNCE__); });
document.querySelectorAll("th").forEach(th => th.addEventListener("click", () => {
  const key = th.dataset.key;
  // other column -> asc, asc -> desc, desc -> off
  if(!sort || sort.key !== key) sort = {key, dir:"asc"};
  else if(sort.dir === "asc") sort = {key, dir:"desc"};
  else sort = null;
  load();
}));
window.addEventListener("keydown", (ev) => { if(ev.key === "Escape"){ q.value = ""; load(); } });
load();
</script>
</body>
</html>
""".replace("__DEBOUNCE__", str(CFG.DEBOUNCE_MS))
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the contacts Flask UI on top of Engine")
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("--build", action="store_true", help="Load contacts from --contacts")
    mode.add_argument("--load", action="store_true", help="Open an existing sqlite store")
    ap.add_argument("--contacts", nargs="+", default=[], help="Contact .json/.csv files or folders")
    ap.add_argument("--db", dest="db", default=None)  # DSN: "sqlite:///path" or "memory://"
    ap.add_argument("--host", default=CFG.WEB_HOST)
    ap.add_argument("--port", type=int, default=CFG.WEB_PORT)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine()
    if args.build:
        if not args.contacts:
            ap.error("--build requires --contacts")
        _engine.build(args.contacts, db_dsn=args.db, verbose=args.verbose)
    else:
        if not args.db:
            ap.error("--load requires --db")
        _engine.load(db_dsn=args.db, verbose=args.verbose)

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
