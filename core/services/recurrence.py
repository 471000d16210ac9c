"""
Recurrence expansion - turns one base event into its derived instances.
Pure generator: the caller persists the result.
"""

import logging
from typing import List
from uuid import UUID

from core.domain.constants import RECURRENCE_INSTANCE_COUNTS, RECURRENCE_UNITS
from core.domain.models import CalendarEvent, NewCalendarEvent, Recurrence
from core.utils.date_range import add_interval

logger = logging.getLogger(__name__)


class RecurrenceExpander:
    """Expands daily/weekly/monthly events into a bounded series"""

    def __init__(self, instance_counts: dict = None):
        self.instance_counts = instance_counts or RECURRENCE_INSTANCE_COUNTS

    def instance_count(self, recurrence: Recurrence) -> int:
        """Number of additional instances generated for a rule (0 for none)"""
        return self.instance_counts.get(recurrence.value, 0)

    def expand(self, base: CalendarEvent, owner_id: UUID) -> List[NewCalendarEvent]:
        """
        Build the derived instances of `base`, ordered by start time.

        Instance i starts at base.start_time + i units, always stepped from
        the base so month clamping never drifts, and keeps the base
        duration exactly. Instances never recur themselves.
        """
        if base.recurrence == Recurrence.NONE:
            return []

        unit = RECURRENCE_UNITS[base.recurrence.value]
        duration = base.end_time - base.start_time
        instances = []

        for i in range(1, self.instance_count(base.recurrence) + 1):
            start_time = add_interval(base.start_time, unit, i)
            instances.append(NewCalendarEvent(
                user_id=owner_id,
                title=base.title,
                description=base.description,
                color=base.color,
                notes=base.notes,
                start_time=start_time,
                end_time=start_time + duration,
                recurrence=Recurrence.NONE,
                category=base.category,
                parent_event_id=base.id,
            ))

        logger.debug(f"[RECURRENCE] Expanded {base.id} ({base.recurrence.value}) into {len(instances)} instances")
        return instances
