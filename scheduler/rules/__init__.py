"""
scheduler.rules
---------------

Exposes all constraint rules by importing from:

- `fixed`: Hard rules (approved unavailability, weekday availability, overlapping assignments).
- `high`: High priority rules (consecutive nights, double shifts, under-staffing).
- `low`: Low priority rules (weekly hours, rest periods, charge cover, consecutive days, days off).

Every rule has the signature `rule(individual, data) -> List[Violation]` and is registered
on a `core.constraint_manager.ConstraintManager`.
"""
from .fixed import *
from .high import *
from .low import *
