"""
Weekly calendar grid for family swim sessions.

Each cell of the grid is one (day, half-hour slot). A session occupies every
slot t on its day with start_time <= t < end_time. When several sessions
occupy the same cell they split it into equal side-by-side shares, in the
order they appear in the session list.
"""

import json
import traceback

from bs4 import BeautifulSoup

from constants import (CALENDAR_END_HOUR, CALENDAR_START_HOUR, DEFAULT_POOL_COLOR,
                       POOL_COLORS, POOL_SHORTNAMES)
from data_loader import DataLoader
from pool_types import DAYS, is_valid_session

LOADING_MESSAGE = "Loading pool schedules..."

CALENDAR_CSS = """
.weekly-calendar { font-family: sans-serif; }
.pool-legend .legend-items { display: flex; flex-wrap: wrap; gap: 12px; margin-bottom: 12px; }
.legend-item { display: flex; align-items: center; gap: 4px; }
.legend-color { width: 14px; height: 14px; border-radius: 3px; }
.calendar-grid { display: grid; grid-template-columns: 80px repeat(7, 1fr); }
.time-row { display: contents; }
.time-header, .day-header { font-weight: bold; padding: 4px; }
.time-label { font-size: 12px; padding: 2px 4px; }
.calendar-cell { position: relative; height: 24px; border: 1px solid #eee; }
.pool-session { height: 100%; font-size: 11px; overflow: hidden; }
.session-container { position: relative; height: 100%; }
.pool-session.overlapping { position: absolute; top: 0; }
"""


def generate_time_slots(start_hour=CALENDAR_START_HOUR, end_hour=CALENDAR_END_HOUR):
    """Every half-hour boundary from start_hour:00 through end_hour:00."""
    slots = []
    for hour in range(start_hour, end_hour + 1):
        for minute in (0, 30):
            if hour == end_hour and minute > 0:
                break
            slots.append(f"{hour:02d}:{minute:02d}")
    return slots


def format_time(time_str):
    """'14:30' -> '2:30 PM'"""
    hours, minutes = [int(part) for part in time_str.split(':')]
    period = 'PM' if hours >= 12 else 'AM'
    if hours == 0:
        display_hours = 12
    elif hours > 12:
        display_hours = hours - 12
    else:
        display_hours = hours
    return f"{display_hours}:{minutes:02d} {period}"


class PoolDisplay:
    """Color and short label lookup for pools, with a neutral fallback."""

    def __init__(self, colors=None, shortnames=None, default_color=DEFAULT_POOL_COLOR):
        self.colors = dict(POOL_COLORS if colors is None else colors)
        self.shortnames = dict(POOL_SHORTNAMES if shortnames is None else shortnames)
        self.default_color = default_color

    def color(self, pool):
        try:
            return self.colors.get(pool, self.default_color)
        except TypeError:
            # unhashable pool identifier out of a bad data file
            return self.default_color

    def label(self, pool):
        try:
            return self.shortnames.get(pool, str(pool))
        except TypeError:
            return str(pool)

    def legend(self):
        """(pool, label, color) for every configured pool, in table order."""
        return [(pool, self.label(pool), color) for pool, color in self.colors.items()]


def load_pool_display(path):
    """
    Build a PoolDisplay from the default tables extended by a JSON file of the form
    {"colors": {pool: color}, "shortnames": {pool: label}, "defaultColor": color}.
    Falls back to the defaults if the file can't be read.
    """
    colors = dict(POOL_COLORS)
    shortnames = dict(POOL_SHORTNAMES)
    default_color = DEFAULT_POOL_COLOR
    try:
        with open(path, 'r') as f:
            overrides = json.load(f)
        colors.update(overrides.get("colors", {}))
        shortnames.update(overrides.get("shortnames", {}))
        default_color = overrides.get("defaultColor", default_color)
    except Exception as e:
        print(f"Warning: Could not load pool display file {path}: {e}")
    return PoolDisplay(colors, shortnames, default_color)


class CellPlacement:
    """Where one session sits inside a grid cell, as percentages of the cell width."""

    def __init__(self, session, label, color, width, left):
        self.session = session
        self.label = label
        self.color = color
        self.width = width
        self.left = left

    @property
    def title(self):
        return f"{self.session.pool}: {format_time(self.session.start_time)} - {format_time(self.session.end_time)}"

    def __str__(self):
        return f"CellPlacement({self.label}, width={self.width}, left={self.left})"


def get_sessions_for_day_and_time(sessions, day, time):
    """Valid sessions active in the (day, time) cell, in list order."""
    return [
        session for session in sessions
        if is_valid_session(session) and session.day == day
        and session.start_time <= time < session.end_time
    ]


def layout_cell(cell_sessions, pool_display=None):
    """Split the cell width evenly between the sessions, first session leftmost."""
    if pool_display is None:
        pool_display = PoolDisplay()
    count = len(cell_sessions)
    placements = []
    for index, session in enumerate(cell_sessions):
        placements.append(
            CellPlacement(session, pool_display.label(session.pool),
                          pool_display.color(session.pool), 100 / count,
                          index * 100 / count))
    return placements


def build_grid(sessions, time_slots=None, days=DAYS, pool_display=None):
    """
    Lay out every cell of the week.

    Returns {(day_index, slot): [CellPlacement, ...]} with an entry (possibly
    empty) for every cell. Malformed sessions are left out and reported.
    """
    if time_slots is None:
        time_slots = generate_time_slots()
    if pool_display is None:
        pool_display = PoolDisplay()

    valid_sessions = [session for session in sessions if is_valid_session(session)]
    malformed = len(sessions) - len(valid_sessions)
    if malformed:
        print(f"Warning: skipped {malformed} malformed session(s) when building the calendar")

    grid = {}
    for day_index in range(len(days)):
        day_sessions = [session for session in valid_sessions if session.day == day_index]
        for slot in time_slots:
            cell_sessions = get_sessions_for_day_and_time(day_sessions, day_index, slot)
            grid[(day_index, slot)] = layout_cell(cell_sessions, pool_display)
    return grid


class WeeklyCalendar:

    def __init__(self, loader=None, pool_display=None, start_hour=CALENDAR_START_HOUR,
                 end_hour=CALENDAR_END_HOUR):
        self.loader = loader if loader is not None else DataLoader()
        self.pool_display = pool_display if pool_display is not None else PoolDisplay()
        self.time_slots = generate_time_slots(start_hour, end_hour)
        self.sessions = []
        self.metadata = None
        self.is_loading = True
        self._grid = None
        self._grid_sessions = None

    def load_data(self):
        self.is_loading = True
        try:
            self.sessions = self.loader.all_sessions()
            self.metadata = self.loader.metadata()
        except Exception as e:
            print(f"Failed to load schedule data: {e}")
            traceback.print_exc()
        finally:
            self.is_loading = False

    def grid(self):
        """The laid-out grid, recomputed only when the session list changes."""
        if self._grid is None or self._grid_sessions is not self.sessions:
            self._grid = build_grid(self.sessions, self.time_slots, DAYS, self.pool_display)
            self._grid_sessions = self.sessions
        return self._grid

    def render_tag(self, soup):
        calendar = soup.new_tag("div", attrs={"class": "weekly-calendar"})

        if self.is_loading:
            loading = soup.new_tag("div", attrs={"class": "loading-state"})
            loading.append(soup.new_tag("div", attrs={"class": "spinner"}))
            message = soup.new_tag("p")
            message.string = LOADING_MESSAGE
            loading.append(message)
            calendar.append(loading)
            return calendar

        # legend comes from configuration so it shows even with no data
        legend = soup.new_tag("div", attrs={"class": "pool-legend"})
        legend_items = soup.new_tag("div", attrs={"class": "legend-items"})
        for pool, label, color in self.pool_display.legend():
            item = soup.new_tag("div", attrs={"class": "legend-item"})
            item.append(soup.new_tag("div", attrs={"class": "legend-color",
                                                   "style": f"background-color: {color}"}))
            name = soup.new_tag("span")
            name.string = label
            item.append(name)
            legend_items.append(item)
        legend.append(legend_items)
        calendar.append(legend)

        grid_tag = soup.new_tag("div", attrs={"class": "calendar-grid"})
        time_header = soup.new_tag("div", attrs={"class": "time-header"})
        time_header.string = "Time"
        grid_tag.append(time_header)
        for day in DAYS:
            day_header = soup.new_tag("div", attrs={"class": "day-header"})
            day_header.string = day
            grid_tag.append(day_header)

        grid = self.grid()
        for slot in self.time_slots:
            row = soup.new_tag("div", attrs={"class": "time-row"})
            time_label = soup.new_tag("div", attrs={"class": "time-label"})
            time_label.string = format_time(slot)
            row.append(time_label)
            for day_index in range(len(DAYS)):
                row.append(self._render_cell(soup, grid[(day_index, slot)], day_index, slot))
            grid_tag.append(row)
        calendar.append(grid_tag)
        return calendar

    def _render_cell(self, soup, placements, day_index, slot):
        cell = soup.new_tag("div", attrs={"class": "calendar-cell",
                                          "data-cell": f"{day_index}-{slot}"})
        if len(placements) == 1:
            placement = placements[0]
            block = soup.new_tag("div", attrs={"class": "pool-session",
                                               "style": f"background-color: {placement.color}",
                                               "title": placement.title})
            block.string = placement.label
            cell.append(block)
        elif len(placements) > 1:
            container = soup.new_tag("div", attrs={"class": "session-container"})
            for placement in placements:
                block = soup.new_tag("div", attrs={
                    "class": "pool-session overlapping",
                    "style": f"background-color: {placement.color}; width: {placement.width:g}%; left: {placement.left:g}%",
                    "title": placement.title
                })
                block.string = placement.label
                container.append(block)
            cell.append(container)
        return cell

    def render(self):
        soup = BeautifulSoup("", "html.parser")
        soup.append(self.render_tag(soup))
        return str(soup)


def render_page(calendar):
    """Full HTML page around the calendar."""
    soup = BeautifulSoup("<!DOCTYPE html><html><head></head><body></body></html>", "html.parser")
    soup.head.append(soup.new_tag("meta", attrs={"charset": "utf-8"}))
    title = soup.new_tag("title")
    title.string = "SF Pools Family Swim Schedule"
    soup.head.append(title)
    style = soup.new_tag("style")
    style.string = CALENDAR_CSS
    soup.head.append(style)

    header = soup.new_tag("header", attrs={"class": "app-header"})
    heading = soup.new_tag("h1")
    heading.string = "San Francisco Pools Family Swim Schedule"
    header.append(heading)
    blurb = soup.new_tag("p")
    blurb.string = "Weekly view of family swim hours across San Francisco public pools"
    header.append(blurb)
    if calendar.metadata:
        updated = soup.new_tag("p", attrs={"class": "last-updated"})
        updated.string = f"Last updated: {calendar.metadata['lastUpdated']}"
        header.append(updated)
    soup.body.append(header)

    main = soup.new_tag("main")
    main.append(calendar.render_tag(soup))
    soup.body.append(main)
    return str(soup)
