import numpy as np
from core.enums import ShiftType
from core.state import SchedulingData


class WorkloadTracker:
    """
    Scratch bookkeeping for building one individual.

    Owned by a single `IndividualFactory.create_random` call and discarded after
    it; the factory walks dates and shifts in chronological order, so every check
    here only needs to look backwards.
    """

    def __init__(self, data: SchedulingData):
        self.data = data
        n = data.num_nurses
        self.week_hours = np.zeros((max(data.num_weeks, 1), n), dtype=float)
        self.worked_on = np.zeros((data.num_days, n), dtype=bool)
        self.last_end = np.full(n, -np.inf)
        self.night_streak = np.zeros(n, dtype=int)
        self.last_night_day = np.full(n, -2, dtype=int)
        self.day_streak = np.zeros(n, dtype=int)
        self.last_work_day = np.full(n, -2, dtype=int)
        self._night = ShiftType.NIGHT.position

    def feasible(self, d: int, s: int) -> np.ndarray:
        """`(N,)` nurses that can take shift `s` on date `d` without breaking a soft limit."""
        data = self.data
        ok = ~self.worked_on[d]

        # rest period since the previous shift ended
        ok &= (data.slot_start(d, s) - self.last_end) >= data.min_rest_hours

        # weekly hours
        wk = data.week_index[d]
        ok &= self.week_hours[wk] + data.shift_hours[s] <= data.weekly_limit

        # consecutive working days
        continues_days = self.last_work_day == d - 1
        ok &= ~continues_days | (self.day_streak + 1 <= data.max_consecutive_days)

        # consecutive nights
        if s == self._night:
            continues_nights = self.last_night_day == d - 1
            ok &= ~continues_nights | (self.night_streak + 1 <= data.max_consecutive_nights)
            ok &= data.max_consecutive_nights >= 1

        return ok

    def assign(self, n: int, d: int, s: int):
        data = self.data
        self.week_hours[data.week_index[d], n] += data.shift_hours[s]
        self.last_end[n] = max(self.last_end[n], data.slot_end(d, s))

        if not self.worked_on[d, n]:
            if self.last_work_day[n] == d - 1:
                self.day_streak[n] += 1
            else:
                self.day_streak[n] = 1
            self.last_work_day[n] = d
        self.worked_on[d, n] = True

        if s == self._night:
            if self.last_night_day[n] == d - 1:
                self.night_streak[n] += 1
            else:
                self.night_streak[n] = 1
            self.last_night_day[n] = d
