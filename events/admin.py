from django.contrib import admin
from .models import (
    Event, Team, Participant, LinkInvite, VrCategory, TeamReward,
    TeamRewardCategory, SpecialReward, SpecialRewardVote, Comment,
    EventRating, EvaluationCriteria, EvaluationResult,
)

@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('name', 'status', 'start_view', 'end_view', 'virtual_reward_guest', 'virtual_reward_committee')
    list_filter = ('status', 'public_view', 'has_committee', 'vr_team_cap_enabled')
    search_fields = ('name', 'description')
    date_hierarchy = 'created_at'

@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'event', 'created_at')
    list_filter = ('event',)
    search_fields = ('name', 'event__name')

@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ('user', 'event', 'event_group', 'is_leader', 'team', 'virtual_reward')
    list_filter = ('event_group', 'is_leader', 'event')
    search_fields = ('user__username', 'event__name')

@admin.register(LinkInvite)
class LinkInviteAdmin(admin.ModelAdmin):
    list_display = ('event', 'created_at')
    readonly_fields = ('presenter_token', 'guest_token', 'committee_token')

@admin.register(VrCategory)
class VrCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'event', 'sort_order')
    list_filter = ('event',)

@admin.register(TeamReward)
class TeamRewardAdmin(admin.ModelAdmin):
    list_display = ('giver', 'team', 'reward', 'updated_at')
    list_filter = ('event',)

@admin.register(TeamRewardCategory)
class TeamRewardCategoryAdmin(admin.ModelAdmin):
    list_display = ('giver', 'team', 'category', 'amount', 'updated_at')
    list_filter = ('event',)

@admin.register(SpecialReward)
class SpecialRewardAdmin(admin.ModelAdmin):
    list_display = ('name', 'event', 'created_at')
    list_filter = ('event',)

@admin.register(SpecialRewardVote)
class SpecialRewardVoteAdmin(admin.ModelAdmin):
    list_display = ('reward', 'committee', 'team', 'created_at')
    list_filter = ('reward__event',)

@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'event', 'created_at')
    search_fields = ('user__username', 'team__name', 'content')

@admin.register(EventRating)
class EventRatingAdmin(admin.ModelAdmin):
    list_display = ('event', 'user', 'rating', 'created_at')
    list_filter = ('rating', 'event')

@admin.register(EvaluationCriteria)
class EvaluationCriteriaAdmin(admin.ModelAdmin):
    list_display = ('name', 'event', 'max_score', 'weight_percentage', 'sort_order')
    list_filter = ('event',)

@admin.register(EvaluationResult)
class EvaluationResultAdmin(admin.ModelAdmin):
    list_display = ('committee', 'team', 'criteria', 'score', 'updated_at')
    list_filter = ('event',)
