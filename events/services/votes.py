# events/services/votes.py
"""
Special-reward votes by committee members.

A committee member can hold each special reward for at most one team.
The pre-check gives a readable error; the (reward, committee) unique
constraint rejects the concurrent double insert that slips past it.
"""
import logging

from django.db import IntegrityError, transaction

from core.exceptions import Forbidden, InvalidInput, NotFound, RewardAlreadyAssigned
from events.models import SpecialReward, SpecialRewardVote
from events.policies import ParticipationPolicy
from .lookups import get_event, get_participant, get_team, require_active_window

logger = logging.getLogger('ledger.votes')


def _lock_committee(event_id, user):
    committee = get_participant(event_id, user, for_update=True)
    allowed, reason = ParticipationPolicy.can_vote_special(committee)
    if not allowed:
        raise Forbidden(reason)
    return committee


def _conflicting_names(committee, team, reward_ids):
    """Names of rewards in `reward_ids` the committee member holds for another team."""
    return list(
        SpecialRewardVote.objects.filter(committee=committee, reward_id__in=reward_ids)
        .exclude(team=team)
        .order_by("reward__name")
        .values_list("reward__name", flat=True)
    )


def _dedupe(reward_ids):
    seen = []
    for reward_id in reward_ids or []:
        try:
            reward_id = int(reward_id)
        except (TypeError, ValueError):
            raise InvalidInput(f"Invalid reward id: {reward_id!r}")
        if reward_id not in seen:
            seen.append(reward_id)
    return seen


class SpecialRewardVoteManager:

    @staticmethod
    def set_votes(event_id, team_id, user, reward_ids):
        """
        Replace the caller's votes for `team_id` with `reward_ids`.

        Returns the reward ids now held for the team. Nothing is applied
        when any requested reward is already held for another team.
        """
        requested = _dedupe(reward_ids)

        try:
            with transaction.atomic():
                committee = _lock_committee(event_id, user)
                event = get_event(event_id)
                require_active_window(event)
                team = get_team(event_id, team_id, message="Project not found in this event")

                rewards = list(SpecialReward.objects.filter(event=event, id__in=requested))
                if len(rewards) != len(requested):
                    raise NotFound("Some rewards not found or invalid")

                current = set(
                    SpecialRewardVote.objects.filter(committee=committee, team=team)
                    .values_list("reward_id", flat=True)
                )
                to_add = [reward_id for reward_id in requested if reward_id not in current]
                to_remove = [reward_id for reward_id in current if reward_id not in requested]

                conflict_names = _conflicting_names(committee, team, to_add)
                if conflict_names:
                    logger.warning(
                        f"Special vote rejected: committee={committee.id}, team={team.id}, "
                        f"conflicts={conflict_names}"
                    )
                    raise RewardAlreadyAssigned(conflict_names)

                if to_remove:
                    SpecialRewardVote.objects.filter(
                        committee=committee, team=team, reward_id__in=to_remove
                    ).delete()
                SpecialRewardVote.objects.bulk_create([
                    SpecialRewardVote(reward_id=reward_id, committee=committee, team=team)
                    for reward_id in to_add
                ])
        except IntegrityError:
            # Rolled back; the competing votes are committed by now
            conflict_names = _conflicting_names(committee, team, to_add)
            logger.warning(
                f"Special vote rejected by unique constraint: committee={committee.id}, "
                f"team={team.id}, conflicts={conflict_names}"
            )
            raise RewardAlreadyAssigned(conflict_names)

        logger.info(
            f"Special votes set: committee={committee.id}, team={team.id}, "
            f"added={to_add}, removed={to_remove}"
        )
        return requested

    @staticmethod
    def reset_votes(event_id, team_id, user):
        with transaction.atomic():
            committee = _lock_committee(event_id, user)
            event = get_event(event_id)
            require_active_window(event)
            team = get_team(event_id, team_id, message="Project not found in this event")

            deleted, _ = SpecialRewardVote.objects.filter(committee=committee, team=team).delete()

        logger.info(f"Special votes reset: committee={committee.id}, team={team.id}, removed={deleted}")
        return deleted

    @staticmethod
    def votes_for(event_id, team_id, user):
        """Reward ids the caller currently holds for the team."""
        committee = get_participant(event_id, user)
        allowed, reason = ParticipationPolicy.can_vote_special(committee)
        if not allowed:
            raise Forbidden(reason)
        team = get_team(event_id, team_id, message="Project not found in this event")
        return list(
            SpecialRewardVote.objects.filter(committee=committee, team=team)
            .order_by("reward_id")
            .values_list("reward_id", flat=True)
        )
