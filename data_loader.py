"""
Loads the combined pool schedule file produced by the extraction pipeline.

Every public method is fail-soft: a missing, unreachable or malformed schedule
file degrades to an empty document so the calendar always has something to
render.
"""

import json
import time
import traceback

import requests

from constants import CACHE_DURATION, SCHEDULE_DATA_SOURCE
from pool_types import Session, empty_schedule_document


class ScheduleCache:
    """The last successfully loaded document and when it was fetched."""

    def __init__(self):
        self.document = None
        self.fetched_at = 0

    def is_fresh(self, now, cache_duration):
        return self.document is not None and (now - self.fetched_at) < cache_duration

    def store(self, document, now):
        self.document = document
        self.fetched_at = now

    def clear(self):
        self.document = None
        self.fetched_at = 0


def normalize_document(data):
    """
    Coerce a decoded JSON body into the ScheduleDocument shape.

    Raises ValueError if the body isn't a document at all. Session entries that
    can't be turned into a Session, and sessions on a day the pool declared it
    is closed, are dropped and reported.
    """
    if not isinstance(data, dict) or not isinstance(data.get("pools"), list):
        raise ValueError("schedule document is missing its pools list")

    pools = []
    dropped = 0
    closed_day = 0
    for entry in data["pools"]:
        if not isinstance(entry, dict):
            print(f"Warning: skipping pool entry that is not an object: {entry!r}")
            continue
        raw_sessions = entry.get("sessions")
        if raw_sessions is None:
            raw_sessions = []
        elif not isinstance(raw_sessions, list):
            print(f"Warning: sessions for {entry.get('poolName')!r} is not a list, treating the pool as empty")
            raw_sessions = []

        operating_days = entry.get("operatingDays")
        if not isinstance(operating_days, list) or not operating_days:
            operating_days = None

        sessions = []
        for raw_session in raw_sessions:
            try:
                session = Session.from_dict(raw_session)
            except (KeyError, TypeError, AttributeError):
                dropped += 1
                continue
            if operating_days is not None and session.day not in operating_days:
                closed_day += 1
                continue
            sessions.append(session)

        pool = {
            "poolName": str(entry.get("poolName", "")),
            "sessions": sessions,
            "lastUpdated": entry.get("lastUpdated", ""),
            "source": entry.get("source", "")
        }
        if entry.get("error"):
            pool["error"] = entry["error"]
        if operating_days is not None:
            pool["operatingDays"] = operating_days
        pools.append(pool)

    if dropped:
        print(f"Warning: dropped {dropped} session(s) with missing or unreadable fields")
    if closed_day:
        print(f"Warning: dropped {closed_day} session(s) outside their pool's declared operating days")

    return {
        "lastUpdated": data.get("lastUpdated", ""),
        "totalPools": data.get("totalPools", len(pools)),
        "totalSessions": data.get("totalSessions",
                                  sum(len(pool["sessions"]) for pool in pools)),
        "pools": pools
    }


class DataLoader:

    def __init__(self, source=SCHEDULE_DATA_SOURCE, cache_duration=CACHE_DURATION,
                 clock=time.time):
        self.source = source
        self.cache_duration = cache_duration
        self.clock = clock
        self.cache = ScheduleCache()

    def fetch(self):
        """Read the raw JSON body from a URL or a local path."""
        if self.source.startswith(("http://", "https://")):
            response = requests.get(self.source)
            response.raise_for_status()
            return response.json()
        with open(self.source, 'r') as f:
            return json.load(f)

    def load(self):
        """Return the schedule document, from cache if it is still fresh."""
        now = self.clock()
        if self.cache.is_fresh(now, self.cache_duration):
            return self.cache.document

        try:
            document = normalize_document(self.fetch())
        except requests.RequestException as e:
            print(f"Error loading schedule data from {self.source}: {e}")
            return empty_schedule_document()
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            print(f"Error reading schedule data from {self.source}: {e}")
            return empty_schedule_document()
        except Exception as e:
            print(f"Unexpected error loading schedule data: {e}")
            traceback.print_exc()
            return empty_schedule_document()

        self.cache.store(document, now)
        print(f"Loaded {document['totalPools']} pools with {document['totalSessions']} total sessions")
        print(f"Last updated: {document['lastUpdated']}")
        return document

    def all_sessions(self):
        """Every pool's sessions in document order, unsorted."""
        sessions = []
        for pool in self.load()["pools"]:
            sessions.extend(pool["sessions"])
        return sessions

    def sessions_for(self, pool_name):
        """Sessions of the first pool whose name contains pool_name, ignoring case."""
        needle = pool_name.lower()
        for pool in self.load()["pools"]:
            if needle in pool["poolName"].lower():
                return list(pool["sessions"])
        return []

    def metadata(self):
        data = self.load()
        return {
            "lastUpdated": data["lastUpdated"],
            "totalPools": data["totalPools"],
            "totalSessions": data["totalSessions"],
            "poolNames": [pool["poolName"] for pool in data["pools"]]
        }

    def invalidate(self):
        """Force the next load() to fetch again."""
        self.cache.clear()
