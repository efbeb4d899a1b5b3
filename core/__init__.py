"""
core
----

Core scheduling engine components:

- Enums & Violation:
  Typed shift, role, severity and violation vocabularies, and the immutable violation record.

- EvaluatorPolicy:
  Explicit policy choices (availability, qualification matching, overtime, week anchoring).

- SchedulingData:
  Encapsulate all inputs and the precomputed lookup tables of one optimisation run.

- Individual & WorkloadTracker:
  The gene tensor of a candidate schedule and the per-build workload bookkeeping.

- ConstraintManager:
  Register and apply constraint rules in a controlled sequence.
"""
