"""
URL configuration for the hackathon app.

All routes are prefixed with /api/v1/hackathon/ when included in the main URLconf.
"""

from django.urls import path

from hackathon import views

app_name = "hackathon"

urlpatterns = [
    # Public
    path("register/", views.RegisterTeamView.as_view(), name="register"),
    path("teams/<uuid:team_id>/", views.TeamReceiptView.as_view(), name="team-receipt"),
    path("teams/<uuid:team_id>/payment/", views.TeamPaymentView.as_view(), name="team-payment"),
    # Admin
    path("admin/login/", views.AdminLoginView.as_view(), name="admin-login"),
    path("admin/teams/", views.AdminTeamListView.as_view(), name="admin-teams"),
    path("admin/teams/<uuid:team_id>/", views.AdminTeamDetailView.as_view(), name="admin-team-detail"),
    path("admin/volunteers/", views.AdminVolunteerView.as_view(), name="admin-volunteers"),
]
