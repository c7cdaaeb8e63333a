from __future__ import annotations
from typing import Any, Dict

from flask import Flask, Response, request, jsonify

from devex_roi.calculator import CalculationError, ScenarioValidationError, calculate, validate_field, validate_scenario
from devex_roi.calculator.formatting import (
    format_tooltip,
    generate_alternative_scenarios,
    get_roi_context_message,
    get_scale_warning_message,
)
from devex_roi.calculator.models import BUSINESS_TYPES, ORGANIZATION_SIZES, scenario_from_dict, scenario_to_dict
from devex_roi.calculator.validator import FIELD_DESCRIPTIONS, get_validation_ranges
from devex_roi.config.env import get_api_config
from devex_roi.logging_utils import configure_logging
from devex_roi.scenarios.comparison import compare_scenarios, comparison_to_dict
from devex_roi.scenarios.presets import all_presets, all_presets_for_size, benchmark_indicators, compare_to_benchmarks
from devex_roi.scenarios.store import EDITABLE_FIELDS, ScenarioImportError, ScenarioStore

import os
import time
from collections import deque, defaultdict

app = Flask(__name__)

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_api_config().api_key


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None or w is None:
        cfg = get_api_config()
        n = cfg.rate_limit_n if n is None else n
        w = cfg.rate_limit_window_sec if w is None else w
    return int(n), float(w)


def _get_store() -> ScenarioStore:
    return ScenarioStore(app.config.get('STORE_PATH'))


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
    # Allow if rate limiting disabled or N <= 0
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
    # Only the catalog is guarded; calculation routes are read-only
    if request.path.startswith('/scenarios'):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        if request.method in ('POST', 'PUT', 'DELETE'):
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


def _payload() -> Dict[str, Any] | None:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else None


def _bad_business_type(data: Dict[str, Any]):
    bt = data.get('business_type', 'traditional')
    if bt not in BUSINESS_TYPES:
        return jsonify({'error': f"business_type must be one of: {', '.join(BUSINESS_TYPES)}"}), 400
    size = data.get('organization_size')
    if size is not None and size not in ORGANIZATION_SIZES:
        return jsonify({'error': f"organization_size must be one of: {', '.join(ORGANIZATION_SIZES)}"}), 400
    return None


def _calculation_error(e: CalculationError):
    errors = e.errors if isinstance(e, ScenarioValidationError) else {'general': str(e)}
    return jsonify({'error': str(e), 'errors': errors}), 422


def _parse_scenario(data: Dict[str, Any]):
    # Returns (scenario, None) or (None, error response)
    try:
        return scenario_from_dict(data), None
    except ValueError as e:
        return None, (jsonify({'error': f"invalid scenario: {e}"}), 400)


def _results_body(scenario, results) -> Dict[str, Any]:
    warning = get_scale_warning_message(results.cost_avoidance)
    body = {
        'results': results.to_dict(),
        'context': get_roi_context_message(results.roi_multiple),
        'scale_warning': warning,
        'tooltips': {
            'total_developer_cost': format_tooltip(results.total_developer_cost, 'Total Developer Cost'),
            'cost_avoidance': format_tooltip(results.cost_avoidance, 'Cost Avoidance'),
        },
        'benchmarks': compare_to_benchmarks(scenario, results),
    }
    if warning:
        body['alternatives'] = generate_alternative_scenarios(
            scenario.developer_count,
            scenario.annual_cost_per_developer,
            scenario.cts_sw_improvement_percent,
            scenario.solution_cost,
        )
    return body


# -- catalog ---------------------------------------------------------------

@app.get('/scenarios')
def list_scenarios():
    store = _get_store()
    q = request.args.get('q')
    limit = request.args.get('limit', type=int)
    if q:
        items = store.search(q)
    else:
        items = store.recent(limit)
    return jsonify({'scenarios': [scenario_to_dict(s) for s in items]})


@app.post('/scenarios')
def post_scenario():
    data = _payload()
    if data is None:
        return jsonify({'error': 'JSON object body is required'}), 400
    if not data.get('name'):
        return jsonify({'error': 'name is required'}), 400
    bad = _bad_business_type(data)
    if bad is not None:
        return bad
    scenario, err = _parse_scenario(data)
    if err is not None:
        return err
    created = _get_store().create(scenario)
    return jsonify(scenario_to_dict(created)), 201


@app.get('/scenarios/export')
def export_scenarios():
    body = _get_store().export_json()
    return Response(body, mimetype='application/json', headers={
        'Content-Disposition': 'attachment; filename="scenarios.json"'
    })


@app.post('/scenarios/import')
def import_scenarios():
    overwrite = request.args.get('overwrite', '').lower() in ('1', 'true', 'yes')
    try:
        added = _get_store().import_json(request.get_data(as_text=True), overwrite=overwrite)
    except ScenarioImportError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({'imported': added})


@app.get('/scenarios/stats')
def scenario_stats():
    return jsonify(_get_store().stats())


@app.get('/scenarios/<sid>')
def get_scenario(sid: str):
    s = _get_store().get(sid)
    if s is None:
        return jsonify({'error': 'not_found'}), 404
    return jsonify(scenario_to_dict(s))


@app.put('/scenarios/<sid>')
def put_scenario(sid: str):
    data = _payload()
    if data is None:
        return jsonify({'error': 'JSON object body is required'}), 400
    changes = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
    if 'business_type' in changes or 'organization_size' in changes:
        bad = _bad_business_type({'business_type': changes.get('business_type', 'traditional'),
                                  'organization_size': changes.get('organization_size')})
        if bad is not None:
            return bad
    updated = _get_store().update(sid, **changes)
    if updated is None:
        return jsonify({'error': 'not_found'}), 404
    return jsonify(scenario_to_dict(updated))


@app.delete('/scenarios/<sid>')
def delete_scenario(sid: str):
    if not _get_store().delete(sid):
        return jsonify({'error': 'not_found'}), 404
    return jsonify({'deleted': sid})


@app.post('/scenarios/<sid>/duplicate')
def duplicate_scenario(sid: str):
    data = _payload() or {}
    copy = _get_store().duplicate(sid, data.get('name'))
    if copy is None:
        return jsonify({'error': 'not_found'}), 404
    return jsonify(scenario_to_dict(copy)), 201


@app.get('/scenarios/<sid>/results')
def scenario_results(sid: str):
    s = _get_store().get(sid)
    if s is None:
        return jsonify({'error': 'not_found'}), 404
    try:
        results = calculate(s)
    except CalculationError as e:
        return _calculation_error(e)
    return jsonify(_results_body(s, results))


# -- calculation -----------------------------------------------------------

@app.post('/calculate')
def post_calculate():
    data = _payload()
    if data is None:
        return jsonify({'error': 'JSON object body is required'}), 400
    bad = _bad_business_type(data)
    if bad is not None:
        return bad
    scenario, err = _parse_scenario(data)
    if err is not None:
        return err
    try:
        results = calculate(scenario)
    except CalculationError as e:
        return _calculation_error(e)
    return jsonify(_results_body(scenario, results))


@app.post('/validate')
def post_validate():
    data = _payload()
    if data is None:
        return jsonify({'error': 'JSON object body is required'}), 400
    bad = _bad_business_type(data)
    if bad is not None:
        return bad
    scenario, err = _parse_scenario(data)
    if err is not None:
        return err
    errors = validate_scenario(scenario)
    return jsonify({'valid': not errors, 'errors': errors})


@app.post('/validate/field')
def post_validate_field():
    data = _payload()
    if data is None or not data.get('field'):
        return jsonify({'error': 'field is required'}), 400
    if not isinstance(data['field'], str):
        return jsonify({'error': 'field must be a string'}), 400
    msg = validate_field(data['field'], data.get('value'), data.get('business_type'))
    return jsonify({'field': data['field'], 'error': msg})


@app.post('/compare')
def post_compare():
    data = _payload() or {}
    ids = data.get('ids')
    if not isinstance(ids, list) or not ids:
        return jsonify({'error': 'ids must be a non-empty list'}), 400
    store = _get_store()
    scenarios = []
    for sid in ids:
        s = store.get(sid)
        if s is None:
            return jsonify({'error': 'not_found', 'id': sid}), 404
        scenarios.append(s)
    return jsonify(comparison_to_dict(compare_scenarios(scenarios)))


# -- reference data --------------------------------------------------------

@app.get('/presets')
def get_presets():
    size = request.args.get('size')
    if size:
        if size not in ORGANIZATION_SIZES:
            return jsonify({'error': f"size must be one of: {', '.join(ORGANIZATION_SIZES)}"}), 400
        groups = all_presets_for_size(size)
    else:
        groups = all_presets()
    return jsonify({name: [scenario_to_dict(s) for s in group] for name, group in groups.items()})


@app.get('/ranges')
def get_ranges():
    return jsonify({
        'ranges': get_validation_ranges(),
        'fields': FIELD_DESCRIPTIONS,
        'benchmarks': benchmark_indicators(),
    })


if __name__ == '__main__':  # pragma: no cover
    configure_logging()
    app.run(port=int(os.environ.get('PORT', '5000')))
