from django.utils.deprecation import MiddlewareMixin
from .models import EntityMembership


class CurrentCompanyMiddleware(MiddlewareMixin):
    # Run on every request and
    # attach a .company attribute (the tenant) based on the logged-in user
    def process_request(self, request):
        request.company = None
        if not request.user.is_authenticated:  # Unauthenticated users
            return

        memberships = EntityMembership.objects.filter(
            user=request.user, is_active=True
        ).select_related("company")

        # If user switched companies,
        # choice is stored in the session as "active_company_id"
        company_id = request.session.get("active_company_id")
        if company_id:
            # user must be an active member of that company,
            # so a tampered session can't "jump" into another tenant
            membership = memberships.filter(company_id=company_id).first()
        else:
            # Default company fallback: the membership flagged as default,
            # otherwise the oldest one
            membership = memberships.order_by("-is_default", "created_at").first()

        if membership is not None:
            request.company = membership.company
