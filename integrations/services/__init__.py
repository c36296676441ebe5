from .calendar_events import CalendarEventAdapter

__all__ = ["CalendarEventAdapter"]
