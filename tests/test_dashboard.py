"""
Unit tests for the dashboard controller and its state transitions.
"""

import math

import pytest

import dashboard
from data_service import Department, make_rng
from dashboard import DashboardState


@pytest.fixture
def state():
    return dashboard.regenerate(DashboardState(), 120, rng=make_rng(11))


@pytest.fixture
def two_department_state(make_employee):
    records = tuple(
        [make_employee(id=i, department=Department.ENGINEERING, salary=s, years_experience=float(i))
         for i, s in enumerate([99000, 100000, 101000] * 10, start=1)] +
        [make_employee(id=100 + i, department=Department.SALES, salary=s, years_experience=float(i))
         for i, s in enumerate([59000, 60000, 61000] * 10, start=1)]
    )
    return DashboardState(records=records, generation=1)


class TestStateTransitions:
    """Test cases for regenerate, select_module and attach_insight."""

    def test_regenerate_replaces_records_and_bumps_generation(self, state):
        assert len(state.records) == 120
        new_state = dashboard.regenerate(state, 10, rng=make_rng(2))
        assert len(new_state.records) == 10
        assert new_state.generation == state.generation + 1
        assert len(state.records) == 120

    def test_regenerate_clears_insight(self, state):
        with_insight = dashboard.attach_insight(state, state.generation, "Salaries look fine.")
        assert with_insight.general_insight == "Salaries look fine."
        assert dashboard.regenerate(with_insight, 5, rng=make_rng(3)).general_insight is None

    def test_stale_insight_is_dropped(self, state):
        newer = dashboard.regenerate(state, 5, rng=make_rng(4))
        assert dashboard.attach_insight(newer, state.generation, "old news") is newer
        assert newer.general_insight is None

    def test_select_module(self, state):
        assert dashboard.select_module(state, 'regression').active_module == 'regression'
        with pytest.raises(ValueError, match="Unknown module"):
            dashboard.select_module(state, 'forecasting')


class TestViews:
    """Test cases for the overview, distribution and correlation views."""

    def test_overview(self, make_employee):
        records = (make_employee(id=1, salary=50000, years_experience=2.0, churned=True),
                   make_employee(id=2, salary=70000, years_experience=4.0),
                   make_employee(id=3, salary=90000, years_experience=9.0),
                   make_employee(id=4, salary=110000, years_experience=1.0))
        summary = dashboard.overview(DashboardState(records=records))
        assert summary['total_employees'] == 4
        assert summary['salary']['mean'] == 80000
        assert summary['churn_rate'] == 25.0
        assert summary['churn_above_target'] is True
        assert summary['median_experience'] == 3.0

    def test_overview_empty(self):
        summary = dashboard.overview(DashboardState())
        assert summary['total_employees'] == 0
        assert summary['salary'] is None
        assert summary['median_experience'] is None
        assert summary['churn_rate'] == 0

    def test_distributions_filter(self, two_department_state):
        result = dashboard.distributions(two_department_state, ['Sales'])
        assert result['departments'] == ['Sales']
        salary = result['metrics']['salary']
        assert salary['count'] == 30
        assert salary['stats']['mean'] == pytest.approx(60000)
        assert salary['stats']['min'] == 59000

    def test_distributions_empty_selection(self, two_department_state):
        result = dashboard.distributions(two_department_state, ['HR'])
        assert result['metrics']['age']['stats'] is None

    def test_distributions_unknown_department(self, state):
        with pytest.raises(ValueError):
            dashboard.distributions(state, ['Legal'])

    def test_correlations_cover_all_pairs(self, state):
        pairs = dashboard.correlations(state)
        assert len(pairs) == 10
        for pair in pairs:
            assert -1.0 <= pair['correlation'] <= 1.0

    def test_preview_html(self, state):
        html = dashboard.preview_html(state, rows=3)
        assert 'preview-table' in html
        assert html.count('<tr') == 4
        assert 'No data' in dashboard.preview_html(DashboardState())


class TestHypothesisView:
    """Test cases for the two-department t-test view."""

    def test_significant_difference(self, two_department_state):
        view = dashboard.hypothesis_view(two_department_state, 'salary', 'Engineering', 'Sales')
        assert view['n1'] == 30 and view['n2'] == 30
        assert view['result'].significant is True
        assert view['chart_data'][0] == {'name': 'Engineering', 'value': pytest.approx(100000)}

    def test_same_department_rejected(self, two_department_state):
        with pytest.raises(ValueError, match="two different departments"):
            dashboard.hypothesis_view(two_department_state, 'salary', 'Sales', 'Sales')

    def test_metric_outside_allowed_set(self, two_department_state):
        with pytest.raises(ValueError, match="can't be compared"):
            dashboard.hypothesis_view(two_department_state, 'age', 'Engineering', 'Sales')

    def test_requires_data(self):
        with pytest.raises(ValueError, match="No data"):
            dashboard.hypothesis_view(DashboardState(), 'salary', 'Engineering', 'Sales')

    def test_insight_summary(self, two_department_state):
        view = dashboard.hypothesis_view(two_department_state, 'salary', 'Engineering', 'Sales')
        context, summary = dashboard.hypothesis_insight_request(view)
        assert context == "Independent Samples T-Test (Hypothesis Testing)"
        assert "Comparing: Engineering vs Sales on metric: salary." in summary
        assert "Group 1 Mean: 100000.00." in summary
        assert "P-Value: < 0.05." in summary
        assert "Significant Difference: true." in summary

    def test_empty_group_renders_as_null(self, two_department_state):
        view = dashboard.hypothesis_view(two_department_state, 'salary', 'Engineering', 'HR')
        assert view['n2'] == 0
        as_dict = dashboard.t_test_to_dict(view['result'])
        assert as_dict['group2_mean'] == 0


class TestRegressionView:
    """Test cases for the regression view."""

    def test_fit(self, two_department_state):
        view = dashboard.regression_view(two_department_state, 'yearsExperience', 'salary')
        result = view['result']
        assert math.isfinite(result.slope)
        assert len(view['points']) == 60
        line = dashboard.regression_to_dict(result)['line_data']
        assert line[0]['x'] == 1.0 and line[1]['x'] == 30.0

    def test_zero_variance_predictor_rejected(self, make_employee):
        records = tuple(make_employee(id=i, years_experience=5.0, salary=50000 + i) for i in range(1, 6))
        with pytest.raises(ValueError, match="two distinct values"):
            dashboard.regression_view(DashboardState(records=records), 'yearsExperience', 'salary')

    def test_constant_float_predictor_rejected(self, make_employee):
        # The mean of repeated 0.1 is not exactly 0.1, so the spread is not exactly 0.
        records = tuple(make_employee(id=i, years_experience=0.1, salary=40000 + 1000 * i) for i in range(1, 11))
        with pytest.raises(ValueError, match="two distinct values"):
            dashboard.regression_view(DashboardState(records=records), 'yearsExperience', 'salary')

    def test_axis_restrictions(self, two_department_state):
        with pytest.raises(ValueError, match="predictor"):
            dashboard.regression_view(two_department_state, 'salary', 'performanceScore')
        with pytest.raises(ValueError, match="outcome"):
            dashboard.regression_view(two_department_state, 'age', 'yearsExperience')

    def test_insight_summary(self, two_department_state):
        view = dashboard.regression_view(two_department_state, 'yearsExperience', 'salary')
        context, summary = dashboard.regression_insight_request(view)
        assert "Linear Regression" in context
        assert summary.startswith("Predicting: salary from yearsExperience.")


class TestDisplayHelpers:
    """Test cases for non-finite formatting."""

    @pytest.mark.parametrize("value", [float('nan'), float('inf'), float('-inf'), None])
    def test_non_finite(self, value):
        assert dashboard.finite_or_none(value) is None
        assert dashboard.format_number(value) == "n/a"

    def test_finite(self):
        assert dashboard.finite_or_none(1.5) == 1.5
        assert dashboard.format_number(2.0 / 3, 3) == "0.667"

    def test_overview_insight_request(self, state):
        context, summary = dashboard.overview_insight_request(state, 'churn_rate')
        assert context == "Overall dataset statistics for a Tech Company. Metric: Churn Rate"
        assert summary.startswith("Value: ") and "%" in summary
        with pytest.raises(ValueError):
            dashboard.overview_insight_request(state, 'headcount')
