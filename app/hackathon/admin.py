"""
Hackathon admin configuration.
"""

from django.contrib import admin

from hackathon.models import Team, TeamMember, Volunteer


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    extra = 0
    fields = ["name", "email", "role"]


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ["team_name", "institution", "lead_name", "lead_email", "status", "volunteer", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "team_name", "institution", "lead_name", "lead_email"]
    readonly_fields = ["id", "created_at", "updated_at"]
    ordering = ["-created_at"]
    inlines = [TeamMemberInline]


@admin.register(Volunteer)
class VolunteerAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "phone", "ref_code", "created_at"]
    search_fields = ["name", "email", "ref_code"]
    readonly_fields = ["id", "ref_code", "created_at", "updated_at"]
    ordering = ["-created_at"]
