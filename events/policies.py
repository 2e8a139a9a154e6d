# events/policies.py
"""
Centralized policy layer for the participation ledger.

All role / leadership checks are defined here.
Services should use these methods instead of inline permission logic.
Every method takes Participant rows (never request context) and returns
(bool, reason).
"""
from typing import Tuple, Optional

from .models import Participant, Team


class ParticipationPolicy:
    """
    Permission checks for participant, team and reward actions.
    """

    @staticmethod
    def is_organizer(participant: Optional[Participant]) -> bool:
        return participant is not None and participant.event_group == Participant.GROUP_ORGANIZER

    @staticmethod
    def is_organizer_leader(participant: Optional[Participant]) -> bool:
        return ParticipationPolicy.is_organizer(participant) and participant.is_leader

    @staticmethod
    def is_team_leader(participant: Optional[Participant], team: Team) -> bool:
        if participant is None or team is None:
            return False
        return participant.team_id == team.id and participant.is_leader

    # ─────────────────────────────────────────────────────────────
    # Participant management
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_change_role(actor: Optional[Participant], target: Participant, new_role: str) -> Tuple[bool, str]:
        """Organizers manage roles; the organizer group itself is leader-only."""
        if not ParticipationPolicy.is_organizer(actor):
            return False, "Only organizers can manage participants"

        touches_organizer = (
            target.event_group == Participant.GROUP_ORGANIZER
            or new_role == Participant.GROUP_ORGANIZER
        )
        if touches_organizer:
            if not actor.is_leader:
                return False, "Only organizer leader can manage organizer group"
            if actor.pk == target.pk:
                return False, "Organizer leader cannot manage self"

        return True, ""

    @staticmethod
    def can_change_leader_flag(actor: Optional[Participant], target: Participant) -> Tuple[bool, str]:
        if not ParticipationPolicy.is_organizer(actor):
            return False, "Only organizers can manage participants"
        if target.event_group == Participant.GROUP_ORGANIZER:
            return False, "Cannot change organizer leader flag"
        return True, ""

    @staticmethod
    def can_change_budget(actor: Optional[Participant], target: Participant) -> Tuple[bool, str]:
        if not ParticipationPolicy.is_organizer(actor):
            return False, "Only organizers can manage participants"
        if target.event_group == Participant.GROUP_ORGANIZER and not actor.is_leader:
            return False, "Only organizer leader can manage organizer group"
        return True, ""

    @staticmethod
    def can_remove(actor: Optional[Participant], target: Participant) -> Tuple[bool, str]:
        if not ParticipationPolicy.is_organizer(actor):
            return False, "Only organizers can remove participants"

        if target.event_group == Participant.GROUP_ORGANIZER:
            if not actor.is_leader:
                return False, "Only organizer leader can delete organizer"
            if actor.pk == target.pk:
                return False, "Organizer leader cannot delete self"

        return True, ""

    # ─────────────────────────────────────────────────────────────
    # Teams
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_create_team(participant: Optional[Participant]) -> Tuple[bool, str]:
        if participant is None or participant.event_group != Participant.GROUP_PRESENTER:
            return False, "Only presenters can create teams"
        return True, ""

    @staticmethod
    def can_manage_team(actor: Optional[Participant], team: Team) -> Tuple[bool, str]:
        """Rename / describe / dissolve: the team's leader or any organizer."""
        if ParticipationPolicy.is_team_leader(actor, team):
            return True, ""
        if ParticipationPolicy.is_organizer(actor):
            return True, ""
        return False, "Only the team leader or an organizer can manage this team"

    @staticmethod
    def can_add_member(actor: Optional[Participant], team: Team) -> Tuple[bool, str]:
        if not ParticipationPolicy.is_team_leader(actor, team):
            return False, "Only the team leader can add members"
        return True, ""

    @staticmethod
    def can_remove_member(actor: Optional[Participant], team: Team, target: Participant) -> Tuple[bool, str]:
        if actor is None:
            return False, "You are not a participant in this event"

        if actor.pk == target.pk:
            if target.is_leader and team.members.exclude(pk=target.pk).exists():
                return False, "Team leaders cannot leave while other members remain. Dissolve the team instead."
            return True, ""

        if not ParticipationPolicy.is_team_leader(actor, team):
            return False, "Only the team leader can remove other members"
        return True, ""

    # ─────────────────────────────────────────────────────────────
    # Rewards, votes & feedback
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_give_vr(participant: Optional[Participant]) -> Tuple[bool, str]:
        if participant is None or participant.event_group not in Participant.GIVER_GROUPS:
            return False, "You are not a participant (Guest/Committee) in this event"
        return True, ""

    @staticmethod
    def can_vote_special(participant: Optional[Participant]) -> Tuple[bool, str]:
        if participant is None or participant.event_group != Participant.GROUP_COMMITTEE:
            return False, "You are not a committee member in this event"
        return True, ""

    @staticmethod
    def can_rate_event(participant: Optional[Participant]) -> Tuple[bool, str]:
        if participant is None:
            return False, "You are not a participant in this event"
        if participant.event_group == Participant.GROUP_ORGANIZER:
            return False, "Organizers cannot rate their own events"
        return True, ""

    @staticmethod
    def can_view_criteria(participant: Optional[Participant]) -> Tuple[bool, str]:
        if participant is None or participant.event_group not in (
            Participant.GROUP_ORGANIZER,
            Participant.GROUP_COMMITTEE,
        ):
            return False, "Access denied"
        return True, ""
