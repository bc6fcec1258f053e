from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Iterable, List, Sequence

from data_service import Department, Employee


class Metric(Enum):
    """Numeric employee fields that can be analysed, keyed by their export name."""

    AGE = ('age', 'Age (Years)', 'age')
    YEARS_EXPERIENCE = ('yearsExperience', 'Experience (Years)', 'years_experience')
    SALARY = ('salary', 'Annual Salary ($)', 'salary')
    PERFORMANCE_SCORE = ('performanceScore', 'Performance Score (0-100)', 'performance_score')
    HOURS_WORKED = ('hoursWorkedPerWeek', 'Weekly Hours', 'hours_worked_per_week')

    def __init__(self, field_name: str, label: str, attribute: str):
        self.field_name = field_name
        self.label = label
        self.attribute = attribute
        self.accessor: Callable[[Employee], Any] = attrgetter(attribute)

    def value_of(self, record: Employee) -> float:
        return float(self.accessor(record))

    def extract(self, records: Iterable[Employee]) -> List[float]:
        return [self.value_of(record) for record in records]

    @classmethod
    def from_name(cls, name: str) -> 'Metric':
        key = str(name or '').strip()
        for metric in cls:
            if key in (metric.field_name, metric.name, metric.attribute):
                return metric
        raise ValueError(f"Unknown metric: '{name}'. Choose one of: {', '.join(m.field_name for m in cls)}.")


NUMERIC_METRICS = list(Metric)
HYPOTHESIS_METRICS = (Metric.SALARY, Metric.PERFORMANCE_SCORE, Metric.HOURS_WORKED, Metric.YEARS_EXPERIENCE)
REGRESSION_X_METRICS = (Metric.YEARS_EXPERIENCE, Metric.AGE, Metric.HOURS_WORKED)
REGRESSION_Y_METRICS = (Metric.SALARY, Metric.PERFORMANCE_SCORE, Metric.HOURS_WORKED)


def filter_by_department(records: Sequence[Employee], departments: Iterable[Department]) -> List[Employee]:
    wanted = set(departments)
    return [record for record in records if record.department in wanted]


def churn_rate(records: Sequence[Employee]) -> float:
    """Churned share in percent; 0 for an empty collection."""
    if not records:
        return 0.0
    return sum(1 for record in records if record.churned) / len(records) * 100
