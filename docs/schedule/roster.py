schedule_roster_description = """
Generate a ward roster for a date range with a genetic search over nurse-to-shift assignments.

### Request Body

- `startDate`, `endDate`: Inclusive scheduling range (YYYY-MM-DD).

- `wards`: List of `WardProfile` objects:
    - `id`, `name`: Ward identifiers
    - `requiredQualifications`: Qualifications a nurse needs to work the ward (ANY by default)
    - `minHierarchyLevel`: Lowest hierarchy level allowed (1 = staff, 2 = charge, 3 = admin)
    - `shiftRequirements`: `day` / `evening` / `night` → `{nurses, chargeNurses}`

- `nurses`: List of `NurseProfile` objects:
    - `id`, `name`, `code`
    - `role`: `staff`, `charge` or `admin`
    - `qualifications`, `wardAccess` (ward ids/names, or `all`)
    - `availability`: weekday → `{available, preferredShifts, unavailableShifts}`
    - `workingConstraints`: optional per-nurse limits (consecutive nights, weekly hours, overtime, rest, ...)

- `constraints`: Unavailability requests. Only `approved` requests whose `validFrom`..`validUntil`
  window covers the blocked date are binding; those are never violated in the returned roster.

- `settings`: Optional run settings (population size, generations, rates, fitness weights, seed,
  timeout, availability/overtime policies, default working constraints).

### Response

- `schedule`: date → ward → shift → assigned nurses, with required/actual headcount and coverage %.
- `nurseStats`: hours, shift counts, longest night streak, overtime and preference satisfaction per nurse.
- `quality`: overall score, the five sub-scores (0-100), the typed violation list, generations run,
  execution time and whether the success threshold was reached.
- `convergence`: best / average / worst fitness per generation.

### Errors

- `400`: Invalid date range, constraint window, settings or inconsistent ids.
- `422`: A ward that needs staff has no nurse who could ever work it, or a field-level validation error.
- `500`: Internal search failure.
"""
