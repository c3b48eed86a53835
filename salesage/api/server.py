from __future__ import annotations
from flask import Flask, request, jsonify, Response
from salesage.api.orchestrator import EXPORT_FORMATS, build_bundle
from salesage.config.env import get_calculator_config, get_email_config
from salesage.exports.chart import CHART_KINDS, build_figure
from salesage.exports.formatting import format_inr, format_signed_rate
from salesage.exports.pdf import report_filename
from salesage.forecasting.assumptions import InvalidInputError, parse_input
from salesage.forecasting.engine import compute_forecast, growth_direction
from salesage.messaging.composer import InvalidEmailError, compose_email
from salesage.messaging.outbox import Outbox

import os
import json
import logging
import time
from collections import deque, defaultdict
from pathlib import Path

logger = logging.getLogger(__name__)

app = Flask(__name__)

OPENAPI_PATH = Path(__file__).with_name("openapi.json")
OUTBOX = Outbox()

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return os.environ.get('API_KEY')


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '5'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '1.0'))
    return int(n), float(w)


def _get_email_delay() -> float:
    d = app.config.get('EMAIL_SEND_DELAY_SEC')
    if d is None:
        return get_email_config().send_delay_sec
    return float(d)

_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None

@app.before_request
def _auth_and_rate_limit():
    if request.path.startswith('/forecast'):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        # Only the simulated email send is rate limited
        if request.method == 'POST' and request.path == '/forecast/email':
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


@app.errorhandler(InvalidInputError)
def _invalid_input(e: InvalidInputError):
    logger.info("rejected %s %s: %s (field=%s)", request.method, request.path, e, e.field)
    return jsonify({'error': 'invalid_input', 'field': e.field, 'message': str(e)}), 400


@app.errorhandler(InvalidEmailError)
def _invalid_email(e: InvalidEmailError):
    logger.info("rejected %s %s: %s", request.method, request.path, e)
    return jsonify({'error': 'invalid_email', 'message': str(e)}), 400


def _payload() -> dict:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object.")
    return payload


@app.get('/forecast/defaults')
def get_defaults():
    cfg = get_calculator_config()
    return jsonify({
        'initial_sales': cfg.default_initial_sales,
        'growth_rate': cfg.default_growth_rate,
        'timeframe': cfg.default_timeframe,
        'growth_rate_range': {
            'min': cfg.growth_rate_min,
            'max': cfg.growth_rate_max,
            'step': cfg.growth_rate_step,
        },
        'timeframes': list(cfg.timeframes),
    })


@app.post('/forecast')
def post_forecast():
    inp = parse_input(_payload())
    result = compute_forecast(inp)
    return jsonify({
        'input': {
            'initial_sales': inp.initial_sales,
            'growth_rate': inp.growth_rate,
            'timeframe': inp.timeframe,
        },
        'result': result.to_dict(),
        'formatted': {
            'total': format_inr(result.total),
            'average': format_inr(result.average),
            'growth_rate': format_signed_rate(inp.growth_rate),
            'points': [{'label': p.label, 'value': format_inr(p.value)} for p in result.points],
        },
        'direction': growth_direction(inp.growth_rate),
        'message': f"Your {inp.timeframe}-month sales forecast has been generated.",
    })


@app.post('/forecast/chart')
def post_chart():
    kind = request.args.get('kind', 'area')
    if kind not in CHART_KINDS:
        return jsonify({'error': 'unknown_chart_kind', 'kinds': list(CHART_KINDS)}), 400
    inp = parse_input(_payload())
    fig = build_figure(compute_forecast(inp), kind=kind)
    return Response(fig.to_json(), mimetype='application/json')


@app.post('/forecast/export/<fmt>')
def post_export(fmt: str):
    if fmt not in EXPORT_FORMATS:
        return jsonify({'error': 'unknown_format'}), 404
    inp = parse_input(_payload())
    bundle = build_bundle(inp, formats=[fmt])
    name, mimetype = EXPORT_FORMATS[fmt]
    download = report_filename(bundle.generated_on) if fmt == 'pdf' else name
    return Response(bundle.artifacts[name], mimetype=mimetype, headers={
        'Content-Disposition': f'attachment; filename="{download}"'
    })


@app.post('/forecast/export.zip')
def post_export_zip():
    inp = parse_input(_payload())
    bundle = build_bundle(inp)
    stem = report_filename(bundle.generated_on).rsplit('.', 1)[0]
    return Response(bundle.zip_bytes(), mimetype='application/zip', headers={
        'Content-Disposition': f'attachment; filename="{stem}.zip"'
    })


@app.post('/forecast/email')
def post_email():
    payload = _payload()
    inp = parse_input(payload)
    result = compute_forecast(inp)
    email = compose_email(
        payload.get('to') or '',
        inp,
        result,
        subject=payload.get('subject'),
        message=payload.get('message'),
    )
    sent = OUTBOX.send(email, delay_sec=_get_email_delay())
    return jsonify({
        'id': sent.id,
        'to': sent.to,
        'subject': sent.subject,
        'sent_at': sent.sent_at,
        'message': f"The forecast report has been sent to {sent.to}",
    })


@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
    except FileNotFoundError:
        return jsonify({'error': 'openapi_not_found'}), 404
    return jsonify(spec)


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'))
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '8000')))
