"""
scheduler
---------

Main scheduling module. Initializes key components:

- `setup`: Compiles a request into the numpy tables of one run.
- `factory`: Random, feasibility-aware individuals.
- `fitness` and `operators`: Scoring and the genetic operators.
- `solver`: The genetic search loop.
- `extractor`: Turns the best individual into the schedule document.
- `builder`: Validation, setup, search and extraction in one call.

Provides high-level access to core scheduling functionality.
"""
