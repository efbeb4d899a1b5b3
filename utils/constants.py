import json
from config.paths import CONSTANTS_PATH

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)

# Expose constants as variables
SHIFT_LABELS = _constants["SHIFT_LABELS"]
SHIFT_HOURS = _constants["SHIFT_HOURS"]
SHIFT_START_HOURS = _constants["SHIFT_START_HOURS"]
DAYS_PER_WEEK = _constants["DAYS_PER_WEEK"]

DEFAULT_SHIFT_REQUIREMENTS = _constants["DEFAULT_SHIFT_REQUIREMENTS"]
ROLE_HIERARCHY = _constants["ROLE_HIERARCHY"]

POPULATION_SIZE = _constants["POPULATION_SIZE"]
GENERATIONS = _constants["GENERATIONS"]
CROSSOVER_RATE = _constants["CROSSOVER_RATE"]
MUTATION_RATE = _constants["MUTATION_RATE"]
ELITE_RATE = _constants["ELITE_RATE"]
TOURNAMENT_SIZE = _constants["TOURNAMENT_SIZE"]
SUCCESS_THRESHOLD = _constants["SUCCESS_THRESHOLD"]
LOG_EVERY_N_GENERATIONS = _constants["LOG_EVERY_N_GENERATIONS"]

FITNESS_WEIGHTS = _constants["FITNESS_WEIGHTS"]
FAIRNESS_NORMALIZER = _constants["FAIRNESS_NORMALIZER"]
VIOLATION_TOLERANCE = _constants["VIOLATION_TOLERANCE"]

MAX_CONSECUTIVE_NIGHTS = _constants["MAX_CONSECUTIVE_NIGHTS"]
MAX_WEEKLY_HOURS = _constants["MAX_WEEKLY_HOURS"]
MAX_OVERTIME_HOURS = _constants["MAX_OVERTIME_HOURS"]
MIN_REST_HOURS = _constants["MIN_REST_HOURS"]
MAX_CONSECUTIVE_DAYS = _constants["MAX_CONSECUTIVE_DAYS"]
MIN_DAYS_OFF_PER_WEEK = _constants["MIN_DAYS_OFF_PER_WEEK"]
