import os
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, redirect, render_template, request, url_for

import dashboard
import insight_service
from analysis_explanations import ANALYSIS_DETAILS, find_analysis, render_analysis_html
from data_service import EXPORT_FILENAME, make_rng, to_csv
from metrics import HYPOTHESIS_METRICS, REGRESSION_X_METRICS, REGRESSION_Y_METRICS


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"[WARN] Ignoring invalid {name}={raw!r}, using {default}.")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return float(default)
    try:
        return float(raw)
    except ValueError:
        print(f"[WARN] Ignoring invalid {name}={raw!r}, using {default}.")
        return float(default)


class InvalidPayload(ValueError):
    pass


app = Flask(__name__)
app.secret_key = os.environ.get('FLASK_SECRET_KEY', os.urandom(24))
app.config['DATASET_SIZE'] = _env_int('DATASET_SIZE', 200)
app.config['MAX_DATASET_SIZE'] = _env_int('MAX_DATASET_SIZE', 10000)
app.config['DATASET_SEED'] = _env_int('DATASET_SEED', None)
app.config['PREVIEW_ROWS'] = _env_int('PREVIEW_ROWS', dashboard.DEFAULT_PREVIEW_ROWS)
app.config['GEMINI_API_KEY'] = insight_service.get_api_key()
app.config['GEMINI_MODEL'] = os.environ.get('GEMINI_MODEL', insight_service.DEFAULT_MODEL)
app.config['INSIGHT_TIMEOUT'] = _env_float('INSIGHT_TIMEOUT', insight_service.DEFAULT_TIMEOUT)


# --- Dashboard state (one reference, replaced on every change) ---
def get_state() -> dashboard.DashboardState:
    return app.config['DASHBOARD_STATE']


def set_state(state: dashboard.DashboardState) -> dashboard.DashboardState:
    app.config['DASHBOARD_STATE'] = state
    return state


def _regenerate(size: Optional[int] = None, seed: Optional[int] = None) -> dashboard.DashboardState:
    size = size if size is not None else app.config['DATASET_SIZE']
    seed = seed if seed is not None else app.config['DATASET_SEED']
    if size > app.config['MAX_DATASET_SIZE']:
        raise ValueError(f"Dataset size {size} is above the limit of {app.config['MAX_DATASET_SIZE']}.")
    return set_state(dashboard.regenerate(get_state(), size, rng=make_rng(seed)))


set_state(dashboard.DashboardState())
_regenerate()


def _bad_request(message: str):
    return jsonify({"response": message}), 400


def _payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidPayload("Request body must be a JSON object.")
    return payload


@app.errorhandler(InvalidPayload)
def invalid_payload(e):
    return _bad_request(str(e))


def _optional_int(payload: Dict[str, Any], key: str) -> Optional[int]:
    if payload.get(key) in (None, ''):
        return None
    return int(payload[key])


# --- Flask Routes ---
@app.route("/")
def home():
    state = get_state()
    return render_template("index.html",
                           overview=dashboard.overview(state),
                           preview=dashboard.preview_html(state, app.config['PREVIEW_ROWS']),
                           modules=dashboard.MODULES,
                           active_module=state.active_module,
                           insight=state.general_insight)


@app.route("/regenerate", methods=["POST"])
def regenerate():
    if not request.is_json:
        # Plain form posts come from the page; regenerate and go back to it.
        _regenerate()
        return redirect(url_for("home"))
    payload = _payload()
    try:
        size, seed = _optional_int(payload, 'size'), _optional_int(payload, 'seed')
        state = _regenerate(size, seed)
    except (TypeError, ValueError) as e:
        return _bad_request(f"Could not regenerate the dataset: {e}")
    return jsonify({"overview": dashboard.overview(state),
                    "preview": dashboard.preview_html(state, app.config['PREVIEW_ROWS'])})


@app.route("/module", methods=["POST"])
def module():
    try:
        state = set_state(dashboard.select_module(get_state(), _payload().get('module', '')))
    except ValueError as e:
        return _bad_request(str(e))
    return jsonify({"active_module": state.active_module})


@app.route("/overview")
def overview():
    state = get_state()
    return jsonify({"overview": dashboard.overview(state), "insight": state.general_insight})


@app.route("/data")
def data():
    state = get_state()
    rows = request.args.get('rows', default=app.config['PREVIEW_ROWS'], type=int)
    return jsonify({"preview": dashboard.preview_html(state, rows), "total_rows": len(state.records)})


@app.route("/download_csv")
def download_csv():
    state = get_state()
    if not state.records:
        return _bad_request("No data to download. Regenerate the dataset first.")
    return Response(to_csv(state.records), mimetype="text/csv",
                    headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"})


@app.route("/distributions")
def distributions():
    try:
        result = dashboard.distributions(get_state(), request.args.getlist('department'))
    except ValueError as e:
        return _bad_request(str(e))
    return jsonify(result)


@app.route("/correlations")
def correlations():
    return jsonify({"correlations": dashboard.correlations(get_state())})


@app.route("/hypothesis", methods=["POST"])
def hypothesis():
    payload = _payload()
    try:
        view = dashboard.hypothesis_view(get_state(), payload.get('metric', 'salary'),
                                         payload.get('dept1', 'Engineering'), payload.get('dept2', 'Sales'))
    except ValueError as e:
        return _bad_request(str(e))
    return jsonify({
        "metric": view['metric'], "label": view['label'],
        "dept1": view['dept1'], "dept2": view['dept2'], "n1": view['n1'], "n2": view['n2'],
        "result": dashboard.t_test_to_dict(view['result']),
        "chart_data": view['chart_data'],
        "metric_options": [m.field_name for m in HYPOTHESIS_METRICS],
    })


@app.route("/regression", methods=["POST"])
def regression():
    payload = _payload()
    try:
        view = dashboard.regression_view(get_state(), payload.get('x_metric', 'yearsExperience'),
                                         payload.get('y_metric', 'salary'))
    except ValueError as e:
        return _bad_request(str(e))
    return jsonify({
        "x_metric": view['x_metric'], "y_metric": view['y_metric'],
        "result": dashboard.regression_to_dict(view['result']),
        "points": view['points'],
        "x_options": [m.field_name for m in REGRESSION_X_METRICS],
        "y_options": [m.field_name for m in REGRESSION_Y_METRICS],
    })


@app.route("/explain", methods=["POST"])
def explain():
    payload = _payload()
    state = get_state()
    module_name = payload.get('module', 'overview')
    try:
        generation = _optional_int(payload, 'generation')
        generation = state.generation if generation is None else generation
        if module_name == 'overview':
            context, summary = dashboard.overview_insight_request(state, payload.get('metric', 'average_salary'))
        elif module_name == 'hypothesis':
            view = dashboard.hypothesis_view(state, payload.get('metric', 'salary'),
                                             payload.get('dept1', 'Engineering'), payload.get('dept2', 'Sales'))
            context, summary = dashboard.hypothesis_insight_request(view)
        elif module_name == 'regression':
            view = dashboard.regression_view(state, payload.get('x_metric', 'yearsExperience'),
                                             payload.get('y_metric', 'salary'))
            context, summary = dashboard.regression_insight_request(view)
        else:
            return _bad_request(f"No AI insight available for module '{module_name}'.")
    except (TypeError, ValueError) as e:
        return _bad_request(str(e))

    insight = insight_service.generate_statistical_insight(
        context, summary,
        api_key=app.config['GEMINI_API_KEY'],
        model=app.config['GEMINI_MODEL'],
        timeout=app.config['INSIGHT_TIMEOUT'],
    )
    # A regeneration while the call was in flight makes this insight stale.
    current = get_state()
    stale = generation != current.generation
    if module_name == 'overview':
        set_state(dashboard.attach_insight(current, generation, insight))
    return jsonify({"response": insight, "generation": generation, "stale": stale})


@app.route("/analysis_info/<name>")
def analysis_info(name):
    details = find_analysis(name)
    if details is None:
        return jsonify({"response": f"Sorry, I don't have detailed information for '{name}' right now.",
                        "available": list(ANALYSIS_DETAILS)}), 404
    return jsonify({"response": render_analysis_html(details), "title": details['title']})


# --- Main Execution ---
if __name__ == "__main__":
    app.run(debug=True)
