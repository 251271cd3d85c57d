from django.contrib import admin, messages
from .models import (
    Rider, League, Team, Race, RaceResult,
    RaceLineup, LineupRider, TeamScore, SyncLog, Notification,
)
from .flows.calculate_scores import score_race_session


@admin.register(Rider)
class RiderAdmin(admin.ModelAdmin):
    list_display = ['name', 'number', 'category', 'team_name', 'value', 'rider_type', 'is_active']
    list_filter = ['category', 'is_active', 'rider_type']
    search_fields = ['name', 'team_name', 'external_id']
    readonly_fields = ['external_id', 'created_at', 'updated_at']


@admin.register(League)
class LeagueAdmin(admin.ModelAdmin):
    list_display = ['name', 'start_date', 'end_date', 'created_at']
    search_fields = ['name']


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'league', 'created_at']
    list_filter = ['league']
    search_fields = ['name', 'user__username']


class RaceResultInline(admin.TabularInline):
    model = RaceResult
    extra = 0
    fields = ['session', 'category', 'rider', 'position', 'status']
    autocomplete_fields = ['rider']


@admin.register(Race)
class RaceAdmin(admin.ModelAdmin):
    list_display = ['name', 'season', 'round_number', 'race_date', 'sprint_date', 'result_count']
    list_filter = ['season']
    search_fields = ['name', 'circuit', 'country', 'external_event_id']
    date_hierarchy = 'race_date'
    inlines = [RaceResultInline]
    actions = ['recalculate_scores']

    def result_count(self, obj):
        return obj.results.count()
    result_count.short_description = 'Results'

    @admin.action(description='Recalculate team scores')
    def recalculate_scores(self, request, queryset):
        for race in queryset:
            sessions = ['MAIN', 'SPRINT'] if race.has_sprint else ['MAIN']
            for session in sessions:
                summary = score_race_session(race.id, session)
                if summary['status'] == 'skipped':
                    self.message_user(
                        request, f"{race.name} {session}: skipped ({summary['reason']})", messages.WARNING
                    )
                else:
                    self.message_user(request, f"{race.name} {session}: {summary['teams_scored']} teams scored")


@admin.register(RaceResult)
class RaceResultAdmin(admin.ModelAdmin):
    list_display = ['race', 'session', 'category', 'rider', 'position', 'status']
    list_filter = ['session', 'category', 'status', 'race__season']
    search_fields = ['race__name', 'rider__name']


class LineupRiderInline(admin.TabularInline):
    model = LineupRider
    extra = 0
    autocomplete_fields = ['rider']


@admin.register(RaceLineup)
class RaceLineupAdmin(admin.ModelAdmin):
    list_display = ['team', 'race', 'updated_at']
    list_filter = ['race__season', 'race']
    search_fields = ['team__name']
    inlines = [LineupRiderInline]


@admin.register(TeamScore)
class TeamScoreAdmin(admin.ModelAdmin):
    list_display = ['team', 'race', 'session', 'total_points', 'calculated_at']
    list_filter = ['session', 'race__season', 'race']
    search_fields = ['team__name', 'race__name']
    readonly_fields = ['team', 'race', 'session', 'total_points', 'breakdown', 'calculated_at']
    ordering = ['race', 'session', 'total_points']


@admin.register(SyncLog)
class SyncLogAdmin(admin.ModelAdmin):
    list_display = ['id', 'sync_type', 'status', 'message', 'created_at', 'completed_at']
    list_filter = ['sync_type', 'status']
    readonly_fields = ['sync_type', 'status', 'message', 'details', 'created_at', 'completed_at']

    def has_add_permission(self, request):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['user', 'title', 'race', 'notification_type', 'is_read', 'created_at']
    list_filter = ['notification_type', 'is_read']
    search_fields = ['user__username', 'message']
