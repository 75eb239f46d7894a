"""
webapp.py — Local bidding tracker dashboard.

Run:  python webapp.py
Open: http://localhost:5001
"""

import logging
import threading
from dataclasses import asdict
from datetime import date
from typing import Callable

from flask import Flask, Response, jsonify, request, send_file

import config
from analytics.aggregates import summarize
from filters.tracker_filter import RecordFilter, filter_options, filter_records
from ingest.loader import TrackerState, initial_state
from ingest.models import BidRecord
from ingest.sources import SampleSource, TextSource, source_for_upload
from output_engine.excel_exporter import export_to_excel

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger("webapp")

app = Flask(__name__)

# ── Global state ──────────────────────────────────────────────────────────────
# One immutable snapshot, replaced wholesale on every load.
state: TrackerState = initial_state()
_lock = threading.Lock()


def _update_state(change: Callable[[TrackerState], TrackerState]) -> TrackerState:
    """Derive the next state from the current one under the lock."""
    global state
    with _lock:
        state = change(state)
        return state

# ── Serialiser ────────────────────────────────────────────────────────────────

def _iso(d: date | None) -> str | None:
    return d.isoformat() if d else None


def _to_dict(r: BidRecord) -> dict:
    return {
        "id": r.record_id,
        "authority": r.authority_name, "authority_level": r.authority_level,
        "tender_capacity_mw": r.tender_capacity_mw,
        "category": r.category, "type": r.type, "connectivity": r.connectivity,
        "rfs_no": r.rfs_no, "rfs_date": _iso(r.rfs_date), "rfs_fy": r.rfs_financial_year,
        "era_date": _iso(r.era_date), "era_fy": r.era_financial_year,
        "company": r.company, "group_company": r.group_company,
        "bid_capacity_mw": r.bid_capacity_mw, "won_capacity_mw": r.won_capacity_mw,
        "initial_tariff": r.initial_tariff, "final_tariff": r.final_tariff,
        "signed_ppa_capacity_mw": r.signed_ppa_capacity_mw,
        "status": r.status_raw, "stage": r.stage,
        "bidding_result": r.bidding_result, "any_success": r.any_success,
        "remarks": r.remarks,
    }


def _visible(current: TrackerState):
    """Apply the filter from the query string to the current record set."""
    record_filter = RecordFilter.from_mapping(request.args)
    return filter_records(current.records, record_filter)


def _status_dict(current: TrackerState) -> dict:
    return {
        "source":    current.source,
        "loaded_at": current.loaded_at.strftime("%d %b %Y %H:%M") if current.loaded_at else "",
        "records":   len(current.records),
        "error":     current.error or "",
    }

# ── Routes ────────────────────────────────────────────────────────────────────

@app.get("/api/status")
def api_status():
    return jsonify(_status_dict(state))

@app.get("/api/options")
def api_options():
    return jsonify(asdict(filter_options(state.records)))

@app.get("/api/records")
def api_records():
    return jsonify([_to_dict(r) for r in _visible(state)])

@app.get("/api/summary")
def api_summary():
    return jsonify(asdict(summarize(_visible(state))))

@app.post("/api/load")
def api_load():
    """Load a tracker from an uploaded file or from pasted text."""
    upload = request.files.get("file")
    if upload is not None and upload.filename:
        try:
            src = source_for_upload(upload.filename, upload.read())
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
    else:
        body = request.get_json(silent=True) or {}
        text = request.form.get("text") or body.get("text") or ""
        src = TextSource(text)

    new_state = _update_state(lambda current: current.with_source(src))
    if new_state.error:
        return jsonify(_status_dict(new_state)), 400
    return jsonify(_status_dict(new_state))

@app.post("/api/sample")
def api_sample():
    new_state = _update_state(lambda current: current.with_source(SampleSource()))
    return jsonify(_status_dict(new_state))

@app.get("/api/export")
def api_export():
    """Write the visible rows to Excel and send the file."""
    visible = _visible(state)
    try:
        filepath = export_to_excel(visible, summarize(visible))
    except Exception as exc:
        log.error("Excel export failed: %s", exc, exc_info=True)
        return jsonify({"error": str(exc)}), 500
    return send_file(filepath, as_attachment=True)

@app.get("/")
def index():
    return Response(HTML, mimetype="text/html")

# ── HTML + CSS + JS (single-file dashboard) ───────────────────────────────────

HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Bidding Tracker</title>
<style>
*{box-sizing:border-box;margin:0;padding:0}
body{font-family:'Segoe UI',Arial,sans-serif;background:#f0f4f8;color:#222}
header{background:#1b3a6b;color:#fff;padding:14px 24px;display:flex;align-items:center;justify-content:space-between}
header h1{font-size:1.25rem;font-weight:700}
header button,label.btn{background:#f0a500;color:#000;border:none;padding:7px 14px;border-radius:6px;font-weight:700;cursor:pointer;font-size:.85rem;margin-left:6px}
#source{opacity:.8;font-size:.85rem;margin-right:10px}
.paste{padding:12px 24px;background:#fff;border-bottom:1px solid #dde3ec}
.paste textarea{width:100%;min-height:90px;border:1px solid #c5cdd8;border-radius:6px;padding:8px;font-size:.8rem}
#error{color:#c62828;font-weight:600;font-size:.88rem;margin-top:6px}
.controls{display:flex;gap:10px;padding:12px 24px;background:#fff;border-bottom:1px solid #dde3ec;flex-wrap:wrap}
.controls select,.controls input{padding:7px 10px;border:1px solid #c5cdd8;border-radius:6px;font-size:.88rem}
.kpis{display:grid;grid-template-columns:repeat(auto-fit,minmax(160px,1fr));gap:10px;padding:16px 24px}
.kpi{background:#fff;border-radius:8px;padding:12px 14px;box-shadow:0 1px 4px rgba(0,0,0,.1)}
.kpi .v{font-size:1.3rem;font-weight:700;color:#1b3a6b}
.kpi .l{font-size:.78rem;color:#666}
.panels{display:grid;grid-template-columns:1fr 1fr;gap:14px;padding:0 24px}
.panel{background:#fff;border-radius:8px;padding:12px 16px;box-shadow:0 1px 4px rgba(0,0,0,.1)}
.panel h3{font-size:.95rem;color:#1b3a6b;margin-bottom:8px}
.bar{height:10px;background:#3b82f6;border-radius:4px}
.table-wrap{overflow-x:auto;padding:16px 24px}
table{width:100%;border-collapse:collapse;background:#fff;font-size:.83rem}
thead tr{background:#1b3a6b;color:#fff}
th,td{padding:8px 10px;text-align:left;border-bottom:1px solid #eef1f6;white-space:nowrap}
.stage{display:inline-block;padding:2px 8px;border-radius:10px;font-weight:700;font-size:.75rem;color:#fff;background:#90a4ae}
.stage.COD{background:#1a7a3c}.stage.PPA{background:#4caf50}.stage.LOA{background:#ffc107;color:#333}.stage.e-RA{background:#2563eb}
</style>
</head>
<body>
<header>
  <h1>Bidding Tracker</h1>
  <div>
    <span id="source"></span>
    <button onclick="useSample()">Use sample</button>
    <label class="btn">Upload CSV/TSV/XLSX<input type="file" id="file" accept=".csv,.tsv,.txt,.xlsx" style="display:none" onchange="upload(this)"></label>
    <button onclick="exportXlsx()">Export Excel</button>
  </div>
</header>
<div class="paste">
  <textarea id="raw" placeholder="Paste CSV/TSV here (with header row)…"></textarea>
  <button onclick="loadText()">Load</button>
  <div id="error"></div>
</div>
<div class="controls">
  <select id="authority" onchange="refresh()"></select>
  <select id="category" onchange="refresh()"></select>
  <select id="stage" onchange="refresh()"></select>
  <input id="q" placeholder="Search company, RFS, remarks…" oninput="refresh()">
</div>
<div class="kpis" id="kpis"></div>
<div class="panels">
  <div class="panel"><h3>Top winners (won MW)</h3><div id="winners"></div></div>
  <div class="panel"><h3>Weighted tariff by e-RA month</h3><div id="trend"></div></div>
</div>
<div class="table-wrap"><table><thead><tr>
  <th>Authority</th><th>Category</th><th>RFS No.</th><th>e-RA</th><th>Company</th>
  <th>Bid MW</th><th>Won MW</th><th>Tariff</th><th>Stage</th><th>Result</th>
</tr></thead><tbody id="rows"></tbody></table></div>
<script>
const fmt = (n, d=2) => n == null ? '—' : Number(n).toLocaleString(undefined,{maximumFractionDigits:d});
const esc = s => String(s ?? '').replace(/[&<>"]/g, c => ({'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;'}[c]));

function query() {
  const p = new URLSearchParams();
  for (const k of ['authority','category','stage','q']) {
    const v = document.getElementById(k).value;
    if (v && v !== 'All') p.set(k, v);
  }
  return p.toString();
}

function fillSelect(id, label, values) {
  const el = document.getElementById(id), cur = el.value;
  el.innerHTML = `<option value="All">All ${label}</option>` +
    values.map(v => `<option>${esc(v)}</option>`).join('');
  if (values.includes(cur)) el.value = cur;
}

async function loadMeta() {
  const [st, opt] = await Promise.all([fetch('/api/status'), fetch('/api/options')].map(p => p.then(r => r.json())));
  document.getElementById('source').textContent = `${st.source} · ${st.records} rows · ${st.loaded_at}`;
  document.getElementById('error').textContent = st.error;
  fillSelect('authority', 'authorities', opt.authorities);
  fillSelect('category', 'categories', opt.categories);
  fillSelect('stage', 'stages', opt.stages);
}

async function refresh() {
  const q = query();
  const [s, rows] = await Promise.all([fetch('/api/summary?' + q), fetch('/api/records?' + q)].map(p => p.then(r => r.json())));
  const k = [
    ['Unique tenders', s.tender_count], ['Tendered MW (approx.)', fmt(s.tendered_capacity_mw)],
    ['Visible rows', s.row_count], ['Bid MW', fmt(s.total_bid_mw)], ['Won MW', fmt(s.total_won_mw)],
    ['Wtd. avg. tariff', fmt(s.weighted_avg_tariff, 3)], ['Win rate', fmt(s.win_rate, 1) + '%'],
  ];
  document.getElementById('kpis').innerHTML = k.map(([l, v]) => `<div class="kpi"><div class="v">${v}</div><div class="l">${l}</div></div>`).join('');
  const max = Math.max(1, ...s.top_winners.map(w => w.won_mw));
  document.getElementById('winners').innerHTML = s.top_winners.map(w =>
    `<div>${esc(w.name)} — ${fmt(w.won_mw)}<div class="bar" style="width:${100 * w.won_mw / max}%"></div></div>`).join('') || '—';
  document.getElementById('trend').innerHTML = '<table>' + s.monthly_trend.map(p =>
    `<tr><td>${p.month}</td><td>${fmt(p.weighted_avg_tariff, 3)}</td><td>${fmt(p.won_mw)} MW</td></tr>`).join('') + '</table>';
  document.getElementById('rows').innerHTML = rows.map(r => `<tr>
    <td>${esc(r.authority)}</td><td>${esc(r.category)}</td><td>${esc(r.rfs_no)}</td><td>${r.era_date || '—'}</td>
    <td>${esc(r.company)}</td><td>${fmt(r.bid_capacity_mw)}</td><td>${fmt(r.won_capacity_mw)}</td>
    <td>${fmt(r.final_tariff)}</td><td><span class="stage ${r.stage}">${r.stage}</span></td><td>${esc(r.bidding_result)}</td></tr>`).join('');
}

async function afterLoad(resp) {
  const d = await resp.json();
  document.getElementById('error').textContent = d.error || '';
  await loadMeta();
  await refresh();
}

function loadText() {
  const text = document.getElementById('raw').value;
  fetch('/api/load', {method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify({text})}).then(afterLoad);
}

function upload(input) {
  const f = input.files[0];
  if (!f) return;
  const fd = new FormData();
  fd.append('file', f);
  fetch('/api/load', {method:'POST', body: fd}).then(afterLoad);
  input.value = '';
}

function useSample() {
  document.getElementById('raw').value = '';
  fetch('/api/sample', {method:'POST'}).then(afterLoad);
}

function exportXlsx() { window.location = '/api/export?' + query(); }

loadMeta().then(refresh);
</script>
</body>
</html>"""

# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print()
    print("  Bidding Tracker dashboard is running.")
    print(f"  Open this link in your browser:  http://localhost:{config.WEB_PORT}")
    print("  Press Ctrl+C to stop.")
    print()
    app.run(debug=False, host=config.WEB_HOST, port=config.WEB_PORT)
