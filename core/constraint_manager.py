from typing import Callable, List
from core.individual import Individual
from core.state import SchedulingData
from core.violations import Violation
from scheduler.rules import (
    unavailability_request_rule,
    weekday_availability_rule,
    overlapping_assignment_rule,
    consecutive_nights_rule,
    double_shift_rule,
    under_staffed_rule,
    weekly_hours_rule,
    rest_period_rule,
    charge_nurse_rule,
    consecutive_days_rule,
    days_off_rule,
)

Rule = Callable[[Individual, SchedulingData], List[Violation]]


class ConstraintManager:
    def __init__(self, data: SchedulingData):
        self.data = data
        self.rules: list[Rule] = []

    def add_rule(self, rule_func: Rule, condition: bool = True):
        """Register a rule with optional enablement condition."""
        if condition:
            self.rules.append(rule_func)

    def apply_all(self, individual: Individual) -> List[Violation]:
        """Apply all registered rules in order and collect their violations."""
        violations: List[Violation] = []
        for rule in self.rules:
            violations.extend(rule(individual, self.data))
        return violations


def build_constraint_manager(data: SchedulingData) -> ConstraintManager:
    """The evaluator used for every run: hard rules first, then high, then low priority."""
    cm = ConstraintManager(data)
    # Fixed rules
    cm.add_rule(unavailability_request_rule)
    cm.add_rule(weekday_availability_rule, data.policy.enforce_availability)
    cm.add_rule(overlapping_assignment_rule)

    # High priority rules
    cm.add_rule(consecutive_nights_rule)
    cm.add_rule(double_shift_rule)

    # Low priority rules
    cm.add_rule(under_staffed_rule)
    cm.add_rule(weekly_hours_rule)
    cm.add_rule(rest_period_rule)
    cm.add_rule(charge_nurse_rule, bool(data.required_charge.any()))
    cm.add_rule(consecutive_days_rule)
    cm.add_rule(days_off_rule)
    return cm


def evaluate(individual: Individual, data: SchedulingData) -> List[Violation]:
    """Every violation of `individual` under `data`. Pure: the individual is not modified."""
    return build_constraint_manager(data).apply_all(individual)
