import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from data_service import Department, Employee, generate_dataset, records_to_dataframe
from metrics import (HYPOTHESIS_METRICS, NUMERIC_METRICS, REGRESSION_X_METRICS, REGRESSION_Y_METRICS,
                     Metric, churn_rate, filter_by_department)
from stats_service import (DescriptiveStats, RegressionResult, TTestResult, correlation_pairs,
                           descriptive_stats, linear_regression, t_test)

MODULES = ('overview', 'distributions', 'correlations', 'hypothesis', 'regression')
CHURN_TARGET_PERCENT = 15.0
DEFAULT_PREVIEW_ROWS = 10

OVERVIEW_INSIGHT_METRICS = {
    'average_salary': "Average Salary",
    'churn_rate': "Churn Rate",
    'median_experience': "Median Experience",
}


@dataclass(frozen=True)
class DashboardState:
    """Everything the dashboard shows, owned by the controller and replaced, never mutated."""
    records: Tuple[Employee, ...] = ()
    generation: int = 0
    active_module: str = 'overview'
    general_insight: Optional[str] = None


# --- State transitions ---
def regenerate(state: DashboardState, size: int, rng=None) -> DashboardState:
    records = tuple(generate_dataset(size, rng=rng))
    print(f"[INFO] Generated {len(records)} synthetic employees (generation {state.generation + 1}).")
    return replace(state, records=records, generation=state.generation + 1, general_insight=None)


def select_module(state: DashboardState, module: str) -> DashboardState:
    if module not in MODULES:
        raise ValueError(f"Unknown module: '{module}'. Choose one of: {', '.join(MODULES)}.")
    return replace(state, active_module=module)


def attach_insight(state: DashboardState, generation: int, insight: str) -> DashboardState:
    """Keeps the insight only if it was requested for the dataset currently on screen."""
    if generation != state.generation:
        print(f"[INFO] Dropping insight for stale generation {generation} (current {state.generation}).")
        return state
    return replace(state, general_insight=insight)


def _require_data(state: DashboardState) -> None:
    if not state.records:
        raise ValueError("No data loaded. Regenerate the dataset first.")


# --- Display helpers ---
def finite_or_none(value: Any) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def format_number(value: Optional[float], digits: int = 2) -> str:
    if value is None or not math.isfinite(value):
        return "n/a"
    return f"{value:.{digits}f}"


def stats_to_dict(stats: DescriptiveStats) -> Dict[str, Optional[float]]:
    return {
        'mean': finite_or_none(stats.mean), 'median': finite_or_none(stats.median),
        'std_dev': finite_or_none(stats.std_dev), 'min': finite_or_none(stats.min),
        'max': finite_or_none(stats.max), 'skewness': finite_or_none(stats.skewness),
    }


def preview_html(state: DashboardState, rows: int = DEFAULT_PREVIEW_ROWS) -> str:
    if not state.records:
        return "<p>No data available to preview.</p>"
    df = records_to_dataframe(state.records[:rows])
    return df.to_html(classes="preview-table", index=False, border=0)


# --- Views ---
def overview(state: DashboardState) -> Dict[str, Any]:
    salary_stats = descriptive_stats(Metric.SALARY.extract(state.records)) if state.records else None
    experience = Metric.YEARS_EXPERIENCE.extract(state.records)
    rate = churn_rate(state.records)
    return {
        'total_employees': len(state.records),
        'salary': stats_to_dict(salary_stats) if salary_stats else None,
        'churn_rate': rate,
        'churn_above_target': rate > CHURN_TARGET_PERCENT,
        'median_experience': descriptive_stats(experience).median if experience else None,
        'generation': state.generation,
    }


def parse_departments(names: Optional[Iterable[str]]) -> List[Department]:
    if not names:
        return list(Department)
    return [Department.from_name(name) for name in names]


def distributions(state: DashboardState, departments: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    selected = parse_departments(departments)
    records = filter_by_department(state.records, selected)
    summary = {}
    for metric in NUMERIC_METRICS:
        values = metric.extract(records)
        summary[metric.field_name] = {
            'label': metric.label,
            'count': len(values),
            'stats': stats_to_dict(descriptive_stats(values)) if values else None,
        }
    return {'departments': [d.value for d in selected], 'metrics': summary}


def correlations(state: DashboardState) -> List[Dict[str, Any]]:
    columns = [(metric.field_name, metric.extract(state.records)) for metric in NUMERIC_METRICS]
    return [{'feature_a': pair.feature_a, 'feature_b': pair.feature_b,
             'correlation': finite_or_none(pair.correlation)}
            for pair in correlation_pairs(columns)]


def hypothesis_view(state: DashboardState, metric_name: str, dept1_name: str, dept2_name: str) -> Dict[str, Any]:
    _require_data(state)
    metric = Metric.from_name(metric_name)
    if metric not in HYPOTHESIS_METRICS:
        raise ValueError(f"'{metric.field_name}' can't be compared with a t-test here. "
                         f"Choose one of: {', '.join(m.field_name for m in HYPOTHESIS_METRICS)}.")
    dept1, dept2 = Department.from_name(dept1_name), Department.from_name(dept2_name)
    if dept1 == dept2:
        raise ValueError("Pick two different departments to compare.")

    group1 = metric.extract(filter_by_department(state.records, [dept1]))
    group2 = metric.extract(filter_by_department(state.records, [dept2]))
    result = t_test(group1, group2)
    return {
        'metric': metric.field_name,
        'label': metric.label,
        'dept1': dept1.value,
        'dept2': dept2.value,
        'n1': len(group1),
        'n2': len(group2),
        'result': result,
        'chart_data': [{'name': dept1.value, 'value': finite_or_none(result.group1_mean)},
                       {'name': dept2.value, 'value': finite_or_none(result.group2_mean)}],
    }


def regression_view(state: DashboardState, x_name: str, y_name: str) -> Dict[str, Any]:
    _require_data(state)
    x_metric, y_metric = Metric.from_name(x_name), Metric.from_name(y_name)
    if x_metric not in REGRESSION_X_METRICS:
        raise ValueError(f"'{x_metric.field_name}' isn't offered as a predictor. "
                         f"Choose one of: {', '.join(m.field_name for m in REGRESSION_X_METRICS)}.")
    if y_metric not in REGRESSION_Y_METRICS:
        raise ValueError(f"'{y_metric.field_name}' isn't offered as an outcome. "
                         f"Choose one of: {', '.join(m.field_name for m in REGRESSION_Y_METRICS)}.")

    xs, ys = x_metric.extract(state.records), y_metric.extract(state.records)
    if len(xs) < 2 or min(xs) == max(xs):
        raise ValueError(f"Regression needs at least two distinct values of '{x_metric.field_name}'.")
    result = linear_regression(xs, ys)
    return {
        'x_metric': x_metric.field_name,
        'y_metric': y_metric.field_name,
        'result': result,
        'points': [{'x': x, 'y': y, 'id': r.id} for x, y, r in zip(xs, ys, state.records)],
    }


def t_test_to_dict(result: TTestResult) -> Dict[str, Any]:
    return {
        't_stat': finite_or_none(result.t_stat), 'p_value': result.p_value,
        'group1_mean': finite_or_none(result.group1_mean), 'group2_mean': finite_or_none(result.group2_mean),
        'significant': result.significant,
    }


def regression_to_dict(result: RegressionResult) -> Dict[str, Any]:
    return {
        'slope': finite_or_none(result.slope), 'intercept': finite_or_none(result.intercept),
        'correlation': finite_or_none(result.correlation), 'r_squared': finite_or_none(result.r_squared),
        'line_data': [{'x': finite_or_none(x), 'y': finite_or_none(y)} for x, y in result.line_points],
    }


# --- Narration requests (context, summary) ---
def overview_insight_request(state: DashboardState, metric_key: str) -> Tuple[str, str]:
    _require_data(state)
    if metric_key not in OVERVIEW_INSIGHT_METRICS:
        raise ValueError(f"Unknown overview metric: '{metric_key}'. "
                         f"Choose one of: {', '.join(OVERVIEW_INSIGHT_METRICS)}.")
    summary = overview(state)
    if metric_key == 'average_salary':
        value = f"${format_number(summary['salary']['mean'])}"
    elif metric_key == 'churn_rate':
        value = f"{format_number(summary['churn_rate'])}%"
    else:
        value = f"{format_number(summary['median_experience'], 1)} years"
    context = f"Overall dataset statistics for a Tech Company. Metric: {OVERVIEW_INSIGHT_METRICS[metric_key]}"
    stats_summary = (f"Value: {value}. This is a descriptive statistic summarizing the central tendency "
                     f"or spread of the data.")
    return context, stats_summary


def hypothesis_insight_request(view: Dict[str, Any]) -> Tuple[str, str]:
    result: TTestResult = view['result']
    stats_summary = (
        f"Comparing: {view['dept1']} vs {view['dept2']} on metric: {view['metric']}.\n"
        f"Group 1 Mean: {format_number(result.group1_mean)}.\n"
        f"Group 2 Mean: {format_number(result.group2_mean)}.\n"
        f"T-Statistic: {format_number(result.t_stat, 3)}.\n"
        f"P-Value: {'< 0.05' if result.p_value < 0.05 else '> 0.05'}.\n"
        f"Significant Difference: {str(result.significant).lower()}."
    )
    return "Independent Samples T-Test (Hypothesis Testing)", stats_summary


def regression_insight_request(view: Dict[str, Any]) -> Tuple[str, str]:
    result: RegressionResult = view['result']
    stats_summary = (
        f"Predicting: {view['y_metric']} from {view['x_metric']}.\n"
        f"Slope: {format_number(result.slope, 3)}.\n"
        f"Intercept: {format_number(result.intercept, 3)}.\n"
        f"Correlation (r): {format_number(result.correlation, 3)}.\n"
        f"R-Squared: {format_number(result.r_squared, 3)}."
    )
    return "Simple Linear Regression (Ordinary Least Squares)", stats_summary
