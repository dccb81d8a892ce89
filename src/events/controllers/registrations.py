from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from events import models, schema
from events.service import event_service


@api_controller("/registrations", auth=JWTAuth(), tags=["Registrations"])
class RegistrationController(UserAwareController):
    @route.get("/", url_name="list_my_registrations", response=PaginatedResponseSchema[schema.UserRegistrationSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_my_registrations(self) -> QuerySet[models.Registration]:
        """Your registrations in every state (confirmed, waitlisted, cancelled), most recent first."""
        return event_service.list_user_registrations(self.user())
