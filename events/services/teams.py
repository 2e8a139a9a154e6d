# events/services/teams.py
"""
Team formation and the team cascade.

Every path that takes a member off a team (self-removal, removal by the
leader, role change, participant deletion, dissolve) ends up in
`detach_member` or `dissolve_team`, so the team invariants are restored in
the same transaction as the triggering change:
- a team never has zero members
- a team with members always has exactly one leader
"""
import logging

from django.db import transaction
from django.db.models import Q

from core.exceptions import (
    AlreadyExists,
    AlreadyOnTeam,
    CapacityReached,
    Forbidden,
    InvalidInput,
    NotFound,
)
from events.models import (
    Comment,
    EvaluationResult,
    Participant,
    SpecialRewardVote,
    Team,
    TeamReward,
    TeamRewardCategory,
)
from events.policies import ParticipationPolicy
from .lookups import get_event, get_participant, get_team, require_participant

logger = logging.getLogger('ledger.teams')


def dissolve_team(team):
    """
    Detach every member, drop everything that points at the team, then
    delete the team row. Must run inside the caller's transaction.
    """
    member_ids = list(team.members.values_list("id", flat=True))
    Participant.objects.filter(team=team).update(team=None, is_leader=False)

    TeamReward.objects.filter(team=team).delete()
    TeamRewardCategory.objects.filter(team=team).delete()
    SpecialRewardVote.objects.filter(team=team).delete()
    EvaluationResult.objects.filter(team=team).delete()
    Comment.objects.filter(team=team).delete()

    team_id = team.id
    team.delete()

    logger.info(f"Team dissolved: team={team_id}, detached_members={member_ids}")


def detach_member(participant):
    """
    Take `participant` off its team and restore the team invariants.

    A leaving leader dissolves the team. A leaving non-leader deletes the
    team when it is left empty, else the earliest-joined remaining member
    is promoted if nobody leads.
    """
    if participant.team_id is None:
        return

    team = Team.objects.select_for_update().get(pk=participant.team_id)

    if participant.is_leader:
        dissolve_team(team)
        participant.team = None
        participant.is_leader = False
        return

    participant.team = None
    participant.is_leader = False
    participant.save(update_fields=["team", "is_leader"])

    remaining = Participant.objects.filter(team=team).order_by("joined_at", "id")
    if not remaining.exists():
        logger.info(f"Team {team.id} left empty by participant {participant.id}")
        dissolve_team(team)
        return

    if not remaining.filter(is_leader=True).exists():
        successor = remaining.first()
        successor.is_leader = True
        successor.save(update_fields=["is_leader"])
        logger.info(f"Team {team.id} leader re-elected: participant {successor.id}")


class TeamManager:
    """Team creation, membership and dissolution for presenters."""

    @staticmethod
    def create(event_id, user, name, description=None, image_cover=None):
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Team name is required")

        with transaction.atomic():
            # Lock the event row so max_teams is checked against a stable count
            event = get_event(event_id, for_update=True)
            participant = get_participant(event_id, user, for_update=True)

            allowed, reason = ParticipationPolicy.can_create_team(participant)
            if not allowed:
                raise Forbidden(reason)

            if participant.team_id:
                raise AlreadyOnTeam("You already belong to a team in this event")

            if event.max_teams and Team.objects.filter(event=event).count() >= event.max_teams:
                raise CapacityReached("Maximum number of teams reached for this event")

            if Team.objects.filter(event=event, name__iexact=name).exists():
                raise AlreadyExists("Team name already exists in this event")

            team = Team.objects.create(
                event=event,
                name=name,
                description=description,
                image_cover=image_cover,
            )
            participant.team = team
            participant.is_leader = True
            participant.save(update_fields=["team", "is_leader"])

        logger.info(f"Team created: team={team.id}, event={event_id}, leader={participant.id}")
        return team

    @staticmethod
    def update(event_id, team_id, user, name=None, description=None, image_cover=None):
        with transaction.atomic():
            team = get_team(event_id, team_id, for_update=True)
            actor = get_participant(event_id, user)

            allowed, reason = ParticipationPolicy.can_manage_team(actor, team)
            if not allowed:
                raise Forbidden(reason)

            update_fields = []
            if name is not None:
                name = name.strip()
                if not name:
                    raise InvalidInput("Team name is required")
                clash = Team.objects.filter(event_id=event_id, name__iexact=name).exclude(pk=team.pk)
                if clash.exists():
                    raise AlreadyExists("Team name already exists in this event")
                team.name = name
                update_fields.append("name")
            if description is not None:
                team.description = description
                update_fields.append("description")
            if image_cover is not None:
                team.image_cover = image_cover
                update_fields.append("image_cover")

            if update_fields:
                team.save(update_fields=update_fields)

        return team

    @staticmethod
    def add_member(event_id, team_id, user, target_user_id):
        with transaction.atomic():
            event = get_event(event_id)
            team = get_team(event_id, team_id, for_update=True)
            actor = get_participant(event_id, user)

            allowed, reason = ParticipationPolicy.can_add_member(actor, team)
            if not allowed:
                raise Forbidden(reason)

            target = (
                Participant.objects.select_for_update()
                .filter(event_id=event_id, user_id=target_user_id)
                .first()
            )
            if target is None:
                raise NotFound("User is not a participant in this event")
            if target.event_group != Participant.GROUP_PRESENTER:
                raise InvalidInput("Only presenters can join teams")
            if target.team_id:
                raise AlreadyOnTeam("User already belongs to a team")

            if event.max_team_members and team.members.count() >= event.max_team_members:
                raise CapacityReached(f"Team is full (max {event.max_team_members} members)")

            target.team = team
            target.is_leader = False
            target.save(update_fields=["team", "is_leader"])

        logger.info(f"Member added: team={team.id}, participant={target.id}, by={actor.id}")
        return target

    @staticmethod
    def remove_member(event_id, team_id, user, target_user_id):
        with transaction.atomic():
            team = get_team(event_id, team_id, for_update=True)
            actor = require_participant(event_id, user)

            target = (
                Participant.objects.select_for_update()
                .filter(event_id=event_id, user_id=target_user_id, team=team)
                .first()
            )
            if target is None:
                raise NotFound("User is not a member of this team")

            allowed, reason = ParticipationPolicy.can_remove_member(actor, team, target)
            if not allowed:
                raise Forbidden(reason)

            detach_member(target)

        logger.info(f"Member removed: team={team_id}, participant={target.id}, by={actor.id}")

    @staticmethod
    def dissolve(event_id, team_id, user):
        with transaction.atomic():
            team = get_team(event_id, team_id, for_update=True)
            actor = get_participant(event_id, user)

            allowed, reason = ParticipationPolicy.can_manage_team(actor, team)
            if not allowed:
                raise Forbidden(reason)

            dissolve_team(team)

    @staticmethod
    def list_candidates(event_id, team_id, user, query=""):
        """Presenters in the event who are not on any team yet."""
        team = get_team(event_id, team_id)
        actor = get_participant(event_id, user)

        allowed, reason = ParticipationPolicy.can_manage_team(actor, team)
        if not allowed:
            raise Forbidden(reason)

        qs = Participant.objects.filter(
            event_id=event_id,
            event_group=Participant.GROUP_PRESENTER,
            team__isnull=True,
        ).select_related("user")

        query = (query or "").strip()
        if query:
            qs = qs.filter(
                Q(user__username__icontains=query)
                | Q(user__name__icontains=query)
                | Q(user__email__icontains=query)
            )

        return qs.order_by("joined_at", "id")
