import io
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd


class Department(str, Enum):
    ENGINEERING = 'Engineering'
    SALES = 'Sales'
    HR = 'HR'
    MARKETING = 'Marketing'
    DATA_SCIENCE = 'Data Science'

    @classmethod
    def from_name(cls, name: str) -> 'Department':
        for dept in cls:
            if dept.value.lower() == str(name).strip().lower() or dept.name.lower() == str(name).strip().lower():
                return dept
        raise ValueError(f"Unknown department: '{name}'. Choose one of: {', '.join(d.value for d in cls)}.")


DEPARTMENTS = list(Department)

# Base salary per department; anything not listed falls back to DEFAULT_BASE_SALARY (HR).
BASE_SALARIES = {
    Department.ENGINEERING: 80000,
    Department.DATA_SCIENCE: 85000,
    Department.SALES: 60000,
    Department.MARKETING: 55000,
}
DEFAULT_BASE_SALARY = 50000
SALARY_PER_YEAR = 5000
MAX_EXPERIENCE = 30.0
HOURS_BOUNDS = (30.0, 70.0)
PERFORMANCE_BOUNDS = (0.0, 100.0)

EXPORT_FIELDS = ('id', 'age', 'yearsExperience', 'salary', 'performanceScore',
                 'hoursWorkedPerWeek', 'department', 'churned')
EXPORT_FILENAME = 'synthetic_employee_data.csv'


@dataclass(frozen=True)
class Employee:
    id: int
    age: int
    years_experience: float
    salary: int
    performance_score: float
    hours_worked_per_week: float
    department: Department
    churned: bool

    def export_values(self) -> List[str]:
        return [str(self.id), str(self.age), str(self.years_experience), str(self.salary),
                str(self.performance_score), str(self.hours_worked_per_week),
                self.department.value, 'true' if self.churned else 'false']


def make_rng(seed: Optional[int] = None):
    return np.random.default_rng(seed)


def random_normal(mean: float, std_dev: float, rng) -> float:
    """One Box-Muller sample from N(mean, std_dev)."""
    u = 0.0
    while u == 0.0:
        u = rng.random()
    v = 0.0
    while v == 0.0:
        v = rng.random()
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    return z * std_dev + mean


def base_salary_for(department: Department) -> int:
    return BASE_SALARIES.get(department, DEFAULT_BASE_SALARY)


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return max(low, min(high, value))


def generate_employee(employee_id: int, rng) -> Employee:
    dept = DEPARTMENTS[int(math.floor(rng.random() * len(DEPARTMENTS)))]

    # Experience and age
    experience = abs(random_normal(5, 3, rng))
    if experience > MAX_EXPERIENCE:
        experience = MAX_EXPERIENCE
    age = int(math.floor(22 + experience + random_normal(2, 2, rng)))

    # Salary: department base + experience slope + noise
    base_salary = base_salary_for(dept)
    expected_salary = base_salary + experience * SALARY_PER_YEAR
    salary = int(math.floor(expected_salary + random_normal(0, 5000, rng)))

    hours_worked = _clamp(random_normal(40, 5, rng), HOURS_BOUNDS)
    performance = 70 + (hours_worked - 40) * 0.5 + random_normal(0, 10, rng)
    if dept == Department.SALES:
        performance += random_normal(0, 15, rng)
    performance = _clamp(performance, PERFORMANCE_BOUNDS)

    # Churn: underpaid, burnout, poor performance
    churn_prob = 0.1
    if salary / expected_salary < 0.9:
        churn_prob += 0.3
    if hours_worked > 55:
        churn_prob += 0.2
    if performance < 50:
        churn_prob += 0.2
    churned = rng.random() < churn_prob

    return Employee(
        id=employee_id,
        age=age,
        years_experience=round(experience, 1),
        salary=salary,
        performance_score=round(performance, 1),
        hours_worked_per_week=round(hours_worked, 1),
        department=dept,
        churned=bool(churned),
    )


def generate_dataset(size: int, rng=None) -> List[Employee]:
    """Builds `size` synthetic employees with ids 1..size, in generation order.

    `rng` is anything with a `.random()` method returning floats in [0, 1);
    an unseeded numpy Generator is used when it is omitted.
    """
    if size < 1:
        raise ValueError(f"Dataset size must be a positive integer, got {size}.")
    if rng is None:
        rng = make_rng()
    return [generate_employee(i + 1, rng) for i in range(size)]


# --- Export / re-import ---
def to_csv(records: Sequence[Employee]) -> str:
    lines = [','.join(EXPORT_FIELDS)]
    lines.extend(','.join(record.export_values()) for record in records)
    return '\n'.join(lines)


def records_to_dataframe(records: Sequence[Employee]) -> pd.DataFrame:
    rows = [dict(zip(EXPORT_FIELDS, [r.id, r.age, r.years_experience, r.salary, r.performance_score,
                                     r.hours_worked_per_week, r.department.value, r.churned]))
            for r in records]
    return pd.DataFrame(rows, columns=list(EXPORT_FIELDS))


def parse_csv(text: str) -> List[Employee]:
    df = pd.read_csv(io.StringIO(text), dtype={'department': str, 'churned': str},
                     float_precision='round_trip')
    missing = [col for col in EXPORT_FIELDS if col not in df.columns]
    if missing:
        raise ValueError(f"Column(s) not found: {', '.join(missing)}.")
    return [
        Employee(
            id=int(row['id']),
            age=int(row['age']),
            years_experience=float(row['yearsExperience']),
            salary=int(row['salary']),
            performance_score=float(row['performanceScore']),
            hours_worked_per_week=float(row['hoursWorkedPerWeek']),
            department=Department.from_name(row['department']),
            churned=str(row['churned']).strip().lower() == 'true',
        )
        for row in df.to_dict(orient='records')
    ]
