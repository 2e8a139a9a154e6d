# events/services/participants.py
"""
Participant registry: joining an event, role / leader / budget changes by
organizers, and removal. Role changes and removals run the team cascade and
purge the participant's giver / voter rows in the same transaction.
"""
import logging

from django.db import IntegrityError, transaction

from core.exceptions import (
    AlreadyJoined,
    Forbidden,
    InvalidInput,
    InvalidRole,
    InvalidSignature,
    InvalidToken,
    NotFound,
)
from events.invites import ROLE_MAP, resolve_token_role, verify_invite
from events.models import (
    EvaluationResult,
    Event,
    Participant,
    SpecialRewardVote,
    Team,
    TeamReward,
    TeamRewardCategory,
)
from events.policies import ParticipationPolicy
from .lookups import get_event, get_participant, get_target_participant, require_participant
from .teams import detach_member

logger = logging.getLogger('ledger.participants')


def purge_participant_rows(participant):
    """Delete every reward, vote and grade row the participant authored."""
    flat, _ = TeamReward.objects.filter(giver=participant).delete()
    categorized, _ = TeamRewardCategory.objects.filter(giver=participant).delete()
    votes, _ = SpecialRewardVote.objects.filter(committee=participant).delete()
    grades, _ = EvaluationResult.objects.filter(committee=participant).delete()

    if flat or categorized or votes or grades:
        logger.info(
            f"Purged rows for participant {participant.id}: "
            f"flat={flat}, categorized={categorized}, votes={votes}, grades={grades}"
        )


class ParticipantRegistry:

    @staticmethod
    def join(event_id, user, token=None, role=None, signature=None):
        """
        Join a published event with a link token or a signed personal invite.
        The granted role decides the starting VR budget.
        """
        with transaction.atomic():
            event = Event.objects.filter(pk=event_id, status=Event.STATUS_PUBLISHED).first()
            if event is None:
                raise NotFound("Event not found or not published")

            if Participant.objects.filter(event=event, user=user).exists():
                raise AlreadyJoined("Already joined")

            if token:
                role = resolve_token_role(event, token)
                if role is None:
                    raise InvalidToken("Invalid token")
            else:
                role = (role or "").lower()
                if role not in ROLE_MAP:
                    raise InvalidRole("Invalid role")
                if not verify_invite(event.id, user.id, role, signature):
                    raise InvalidSignature("Invalid signature")

            event_group = ROLE_MAP[role]
            try:
                with transaction.atomic():
                    participant = Participant.objects.create(
                        event=event,
                        user=user,
                        event_group=event_group,
                        virtual_reward=event.default_virtual_reward(event_group),
                    )
            except IntegrityError:
                raise AlreadyJoined("Already joined")

        logger.info(f"User {user.id} joined event {event.id} as {event_group}")
        return participant

    @staticmethod
    def set_role(event_id, user, participant_id, new_role):
        new_role = (new_role or "").upper()
        if new_role not in dict(Participant.GROUP_CHOICES):
            raise InvalidRole("Invalid role")

        with transaction.atomic():
            event = get_event(event_id)
            actor = get_participant(event_id, user)
            target = get_target_participant(event_id, participant_id, for_update=True)

            allowed, reason = ParticipationPolicy.can_change_role(actor, target, new_role)
            if not allowed:
                raise Forbidden(reason)

            if target.event_group == new_role:
                return target

            old_role = target.event_group
            if old_role == Participant.GROUP_PRESENTER and target.team_id:
                detach_member(target)

            purge_participant_rows(target)

            target.event_group = new_role
            target.is_leader = False
            target.virtual_reward = event.default_virtual_reward(new_role)
            target.save(update_fields=["event_group", "is_leader", "team", "virtual_reward"])

        logger.info(
            f"Role changed: participant={target.id}, event={event_id}, "
            f"from={old_role}, to={new_role}, by={actor.id}"
        )
        return target

    @staticmethod
    def set_leader(event_id, user, participant_id, is_leader):
        with transaction.atomic():
            actor = get_participant(event_id, user)
            target = get_target_participant(event_id, participant_id, for_update=True)

            allowed, reason = ParticipationPolicy.can_change_leader_flag(actor, target)
            if not allowed:
                raise Forbidden(reason)

            if bool(is_leader) == target.is_leader:
                return target

            if is_leader:
                if not target.team_id:
                    raise InvalidInput("Participant must belong to a team to become leader")
                Team.objects.select_for_update().get(pk=target.team_id)
                # One leader per team: demote the current one
                Participant.objects.filter(team_id=target.team_id, is_leader=True).exclude(
                    pk=target.pk
                ).update(is_leader=False)
            elif target.team_id:
                raise InvalidInput("A team must keep its leader. Promote another member instead.")

            target.is_leader = bool(is_leader)
            target.save(update_fields=["is_leader"])

        logger.info(f"Leader flag set: participant={target.id}, is_leader={target.is_leader}, by={actor.id}")
        return target

    @staticmethod
    def set_virtual_reward(event_id, user, participant_id, amount):
        try:
            amount = max(0, int(amount))
        except (TypeError, ValueError):
            raise InvalidInput("virtualReward must be a number")

        with transaction.atomic():
            actor = get_participant(event_id, user)
            target = get_target_participant(event_id, participant_id, for_update=True)

            allowed, reason = ParticipationPolicy.can_change_budget(actor, target)
            if not allowed:
                raise Forbidden(reason)

            target.virtual_reward = amount
            target.save(update_fields=["virtual_reward"])

        logger.info(f"Budget set: participant={target.id}, virtual_reward={amount}, by={actor.id}")
        return target

    @staticmethod
    def remove(event_id, user, participant_id):
        with transaction.atomic():
            actor = get_participant(event_id, user)
            target = get_target_participant(event_id, participant_id, for_update=True)

            allowed, reason = ParticipationPolicy.can_remove(actor, target)
            if not allowed:
                raise Forbidden(reason)

            detach_member(target)
            purge_participant_rows(target)
            target_id = target.id
            target.delete()

        logger.info(f"Participant removed: participant={target_id}, event={event_id}, by={actor.id}")

    @staticmethod
    def leave_event(event_id, user):
        with transaction.atomic():
            participant = require_participant(event_id, user, for_update=True)

            if participant.is_organizer_leader:
                raise Forbidden("Organizer leader cannot leave the event")

            detach_member(participant)
            purge_participant_rows(participant)
            participant_id = participant.id
            participant.delete()

        logger.info(f"Participant {participant_id} left event {event_id}")

    @staticmethod
    def list_participants(event_id, user, event_group=None):
        actor = get_participant(event_id, user)
        if not ParticipationPolicy.is_organizer(actor):
            raise Forbidden("Only organizers can view participants")

        qs = Participant.objects.filter(event_id=event_id).select_related("user")
        if event_group:
            qs = qs.filter(event_group=event_group.upper())
        return qs.order_by("event_group", "joined_at", "id")
