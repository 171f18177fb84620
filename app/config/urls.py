"""
URL configuration for the hackathon service.

URL Structure:
    /                                   - ReDoc API documentation
    /schema/                            - OpenAPI schema (YAML)
    /admin/                             - Django admin interface
    /health/                            - Health check endpoint
    /api/v1/hackathon/                  - Hackathon endpoints
        register/                       - Register team, start payment (POST)
        teams/{id}/                     - Public receipt (GET)
        teams/{id}/payment/             - Retry payment (POST)
        admin/login/                    - Admin password -> token (POST)
        admin/teams/                    - Team list with stats (GET)
        admin/teams/{id}/               - Team update (PATCH)
        admin/volunteers/               - Volunteer list/create (GET, POST)
    /api/v1/payments/                   - Payment endpoints
        webhooks/fapshi/                - Fapshi webhook endpoint (POST)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("hackathon/", include("hackathon.urls")),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Hackathon Admin"
admin.site.site_title = "Hackathon Admin Portal"
admin.site.index_title = "Registrations and payments"
