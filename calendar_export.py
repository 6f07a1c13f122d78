"""iCalendar export for day plans."""
from datetime import datetime, timedelta

from icalendar import Calendar, Event as ICalEvent

PRODID = "-//Voyager Trip Planner//EN"


def _start_of(day, time_text):
    """Item start on *day*; times that are not a valid HH:MM start at 09:00."""
    try:
        hour, minute = (int(p) for p in time_text.split(":")[:2])
        return datetime(day.year, day.month, day.day, hour, minute)
    except (ValueError, AttributeError):
        return datetime(day.year, day.month, day.day, 9, 0)


def itinerary_to_ical(city, days, calendar_name=None):
    """Render DayPlans as an .ics document (bytes), one event per item."""
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", calendar_name or f"Trip to {city}")

    for day in days:
        for item in day.items:
            ev = ICalEvent()
            ev.add("summary", item.activity_name)
            ev.add("description", item.description or "")
            start = _start_of(day.date, item.time)
            ev.add("dtstart", start)
            ev.add("dtend", start + timedelta(minutes=item.duration_minutes or 60))
            if item.location:
                ev.add("location", item.location)
            ev.add("uid", f"{item.id}-{day.date.isoformat()}@voyager-trip-planner")
            cal.add_component(ev)

    return cal.to_ical()
