"""
Calendar Utilities

Weekly view helpers. Weeks start on Sunday.
"""

from datetime import date, timedelta

from ..models import CalendarEvent

WEEKDAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']


def get_week_start(day):
    """Sunday on or before `day`"""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def get_week_dates(week_start):
    """The seven dates of the week starting at `week_start`"""
    return [week_start + timedelta(days=offset) for offset in range(7)]


def build_week_view(house, day=None, today=None):
    """Events of `house` grouped into the seven days of the week containing `day`"""
    today = today or date.today()
    week_start = get_week_start(day or today)
    dates = get_week_dates(week_start)

    events_by_date = {d: [] for d in dates}
    for event in CalendarEvent.get_events_between(house.id, dates[0], dates[-1]):
        events_by_date[event.event_date].append(event)

    days = []
    for index, d in enumerate(dates):
        events = sorted(events_by_date[d], key=lambda e: e.sort_key())
        days.append({
            'date': d.isoformat(),
            'weekday': WEEKDAY_NAMES[index],
            'is_today': d == today,
            'events': [e.to_dict() for e in events]
        })

    return {
        'week_start': week_start.isoformat(),
        'week_end': dates[-1].isoformat(),
        'previous_week': (week_start - timedelta(days=7)).isoformat(),
        'next_week': (week_start + timedelta(days=7)).isoformat(),
        'days': days
    }
