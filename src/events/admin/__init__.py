"""Events admin module.

Django autodiscover will import this module, which triggers registration
of all admin classes via the @admin.register decorators in submodules.
"""

from events.admin.event import CommentAdmin, EventAdmin, RatingAdmin, RegistrationAdmin

__all__ = ["EventAdmin", "RegistrationAdmin", "RatingAdmin", "CommentAdmin"]
