import pytest

from data_service import Department, Employee


class ConstantRng:
    """Returns the same uniform draw every time and counts the draws."""

    def __init__(self, value=0.5):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class SequenceRng:
    """Plays back fixed draws, then repeats `fallback`."""

    def __init__(self, values, fallback=0.5):
        self.values = list(values)
        self.fallback = fallback
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.fallback


@pytest.fixture
def make_employee():
    def _make(id=1, department=Department.ENGINEERING, salary=80000, years_experience=5.0,
              age=30, performance_score=70.0, hours_worked_per_week=40.0, churned=False):
        return Employee(id=id, age=age, years_experience=years_experience, salary=salary,
                        performance_score=performance_score, hours_worked_per_week=hours_worked_per_week,
                        department=department, churned=churned)
    return _make
