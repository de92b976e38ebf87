"""
Data model (Incident)
=====================

Each row of the SIGACTS CSV export is converted into an `Incident` object.
Records are immutable (`frozen=True`): the dataset is loaded once and every
index and aggregate only selects or counts records, never edits them.
"""

from dataclasses import dataclass

# Fallbacks used when a classification column is missing or blank
UNKNOWN_TYPE = "Unknown"
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Incident:
    """One SIGACT (significant activity) record."""
    lat: float
    lng: float
    # canonical YYYY-MM-DD
    date: str
    # HH:MM:SS, or "" when the timestamp carried no time
    time: str
    type: str = UNKNOWN_TYPE
    category: str = NOT_AVAILABLE
    target_category: str = NOT_AVAILABLE
    target: str = NOT_AVAILABLE
    force_type: str = NOT_AVAILABLE
    city: str = NOT_AVAILABLE
    province: str = NOT_AVAILABLE

    def hour(self) -> int:
        """Return the hour component of `time`, or -1 if absent/invalid."""
        if not self.time:
            return -1
        try:
            return int(self.time.split(":")[0])
        except ValueError:
            return -1
