from django.urls import path
from .views import (
    EventListCreateView,
    EventDetailView,
    EventPublishView,
    EventInviteView,
    SignInviteView,
    VrCategoryListCreateView,
    VrCategoryDetailView,
    SpecialRewardListCreateView,
    SpecialRewardDetailView,
    CriteriaListCreateView,
    CriteriaDetailView,
    JoinEventView,
    LeaveEventView,
    ParticipantListView,
    ParticipantDetailView,
    TeamListCreateView,
    TeamDetailView,
    TeamMemberAddView,
    TeamMemberRemoveView,
    TeamCandidatesView,
    TeamVrView,
    VrBudgetView,
    TeamSpecialVoteView,
    TeamCommentView,
    EventRatingView,
    EventRatingListView,
    TeamGradeView,
    GradingStatusView,
    EvaluationResultsView,
)

urlpatterns = [
    # Events
    path("", EventListCreateView.as_view(), name="event-list-create"),
    path("<int:event_id>/", EventDetailView.as_view(), name="event-detail"),
    path("<int:event_id>/publish/", EventPublishView.as_view(), name="event-publish"),

    # Invites & membership
    path("<int:event_id>/invites/", EventInviteView.as_view(), name="event-invites"),
    path("<int:event_id>/invites/sign/", SignInviteView.as_view(), name="event-invite-sign"),
    path("<int:event_id>/join/", JoinEventView.as_view(), name="event-join"),
    path("<int:event_id>/leave/", LeaveEventView.as_view(), name="event-leave"),
    path("<int:event_id>/participants/", ParticipantListView.as_view(), name="participant-list"),
    path(
        "<int:event_id>/participants/<int:participant_id>/",
        ParticipantDetailView.as_view(),
        name="participant-detail",
    ),

    # Catalogue
    path("<int:event_id>/categories/", VrCategoryListCreateView.as_view(), name="vr-category-list"),
    path(
        "<int:event_id>/categories/<int:category_id>/",
        VrCategoryDetailView.as_view(),
        name="vr-category-detail",
    ),
    path("<int:event_id>/special-rewards/", SpecialRewardListCreateView.as_view(), name="special-reward-list"),
    path(
        "<int:event_id>/special-rewards/<int:reward_id>/",
        SpecialRewardDetailView.as_view(),
        name="special-reward-detail",
    ),
    path("<int:event_id>/criteria/", CriteriaListCreateView.as_view(), name="criteria-list"),
    path("<int:event_id>/criteria/<int:criteria_id>/", CriteriaDetailView.as_view(), name="criteria-detail"),

    # Teams
    path("<int:event_id>/teams/", TeamListCreateView.as_view(), name="team-list-create"),
    path("<int:event_id>/teams/<int:team_id>/", TeamDetailView.as_view(), name="team-detail"),
    path("<int:event_id>/teams/<int:team_id>/members/", TeamMemberAddView.as_view(), name="team-member-add"),
    path(
        "<int:event_id>/teams/<int:team_id>/members/<int:user_id>/",
        TeamMemberRemoveView.as_view(),
        name="team-member-remove",
    ),
    path("<int:event_id>/teams/<int:team_id>/candidates/", TeamCandidatesView.as_view(), name="team-candidates"),

    # Rewards & votes
    path("<int:event_id>/vr/", VrBudgetView.as_view(), name="vr-budget"),
    path("<int:event_id>/teams/<int:team_id>/vr/", TeamVrView.as_view(), name="team-vr"),
    path("<int:event_id>/teams/<int:team_id>/special/", TeamSpecialVoteView.as_view(), name="team-special"),

    # Feedback
    path("<int:event_id>/teams/<int:team_id>/comments/", TeamCommentView.as_view(), name="team-comments"),
    path("<int:event_id>/teams/<int:team_id>/grades/", TeamGradeView.as_view(), name="team-grades"),
    path("<int:event_id>/grading-status/", GradingStatusView.as_view(), name="grading-status"),
    path("<int:event_id>/results/", EvaluationResultsView.as_view(), name="evaluation-results"),
    path("<int:event_id>/rating/", EventRatingView.as_view(), name="event-rating"),
    path("<int:event_id>/ratings/", EventRatingListView.as_view(), name="event-ratings"),
]
