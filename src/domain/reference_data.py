from __future__ import annotations

from datetime import date

GOAL_CATEGORIES = [
    {"name": "Business results"},
    {"name": "Customer focus"},
    {"name": "Personal development"},
    {"name": "Process improvement"},
    {"name": "Teamwork"},
]

SAMPLE_PROCESSES = [
    {
        "name": "Annual review 2025",
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 12, 31),
    },
]

# Actor recorded on history entries created by seeding
SYSTEM_ACTOR = {"id": "system", "name": "System"}
