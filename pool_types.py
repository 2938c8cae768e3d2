"""
Shared types for pool schedule data.

A schedule document looks like this on disk:

    {
      "lastUpdated": "2025-10-01T08:00:00Z",
      "totalPools": 2,
      "totalSessions": 3,
      "pools": [
        {"poolName": "Balboa Pool", "sessions": [...], "lastUpdated": "...", "source": "..."},
        {"poolName": "Rossi Pool", "sessions": [], "lastUpdated": "...", "source": "...", "error": "..."}
      ]
    }

and every entry in "sessions" is {"pool", "day", "startTime", "endTime", "sessionType"}.
"""

import datetime
import re

MONDAY = "Monday"
TUESDAY = "Tuesday"
WEDNESDAY = "Wednesday"
THURSDAY = "Thursday"
FRIDAY = "Friday"
SATURDAY = "Saturday"
SUNDAY = "Sunday"

# index in this list is the "day" field of a session (Monday=0)
DAYS = [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY]
ALL_DAYS = list(range(len(DAYS)))

TIME_PATTERN = re.compile(r'^[0-2][0-9]:[0-5][0-9]$')


class Session:
    """One family swim window at one pool. The loader and calendar never modify it."""

    def __init__(self, pool, day, start_time, end_time, session_type=None):
        self.pool = pool
        self.day = day
        self.start_time = start_time
        self.end_time = end_time
        self.session_type = session_type

    @classmethod
    def from_dict(cls, data):
        return cls(data["pool"], data["day"], data["startTime"],
                   data["endTime"], data.get("sessionType"))

    def __str__(self):
        return f"Session({self.pool}, {self.day}, {self.start_time}, {self.end_time}, {self.session_type})"

    def __repr__(self):
        return str(self)

    def __eq__(self, other):
        if not isinstance(other, Session):
            return NotImplemented
        return self.dict_output() == other.dict_output()

    __hash__ = None

    def dict_output(self):
        return_dict = {}
        return_dict["pool"] = self.pool
        return_dict["day"] = self.day
        return_dict["startTime"] = self.start_time
        return_dict["endTime"] = self.end_time
        if self.session_type:
            return_dict["sessionType"] = self.session_type
        return return_dict


def is_valid_time(time_str):
    if not isinstance(time_str, str) or not TIME_PATTERN.match(time_str):
        return False
    # the pattern admits 24:00, which is not a time of day
    return int(time_str[:2]) < 24


def is_valid_session(session):
    """
    Check the invariants the calendar relies on.

    A session is malformed if its day is not an integer 0-6, either time is not
    zero-padded HH:MM, or it doesn't start strictly before it ends.
    """
    # bool is an int subclass but never a valid day
    if not isinstance(session.day, int) or isinstance(session.day, bool):
        return False
    if session.day not in ALL_DAYS:
        return False
    if not is_valid_time(session.start_time) or not is_valid_time(session.end_time):
        return False
    # zero-padded fixed width, so string order is time order
    return session.start_time < session.end_time


def empty_schedule_document():
    return {
        "lastUpdated": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "totalPools": 0,
        "totalSessions": 0,
        "pools": []
    }
