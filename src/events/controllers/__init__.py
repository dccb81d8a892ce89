from .attendance import EventAttendanceController
from .events import EventController
from .registrations import RegistrationController

__all__ = ["EventController", "EventAttendanceController", "RegistrationController"]
