# events/services/rewards.py
"""
Reward ledger: GUEST / COMMITTEE participants spread a fixed VR budget
across teams, either as one flat amount per team or split by VR category.

For a given (team, giver) the two modes never coexist. The sum of a giver's
flat and categorized rows never exceeds their `virtual_reward`. Both give
and reset lock the giver's Participant row, so operations by the same giver
are serialized and different givers proceed in parallel.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Union
import logging

from django.db import transaction
from django.db.models import Sum

from core.exceptions import (
    CategoryNotFound,
    ExceedsTeamCap,
    Forbidden,
    InsufficientBalance,
    InvalidInput,
)
from events.models import TeamReward, TeamRewardCategory, VrCategory
from events.policies import ParticipationPolicy
from .lookups import get_event, get_participant, get_team, require_active_window

logger = logging.getLogger('ledger.rewards')


@dataclass(frozen=True)
class Flat:
    amount: int

    @property
    def total(self) -> int:
        return self.amount


@dataclass(frozen=True)
class Categorized:
    amounts: Dict[int, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.amounts.values())


Allocation = Union[Flat, Categorized]


@dataclass(frozen=True)
class BudgetSnapshot:
    total_limit: int
    total_used: int
    noop: bool = False

    @property
    def remaining(self) -> int:
        return max(0, self.total_limit - self.total_used)

    def as_dict(self):
        data = {"totalLimit": self.total_limit, "totalUsed": self.total_used}
        if self.noop:
            data["message"] = "No VR to refund"
        return data


def _to_amount(value) -> int:
    """Truncate to a non-negative integer."""
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput(f"Invalid amount: {value!r}")


def build_allocation(amount=None, categories=None) -> Allocation:
    """
    Build exactly one allocation mode from a request payload.

    `categories` is a list of {"categoryId", "amount"} items; repeated
    category ids are summed.
    """
    if amount is not None and categories is not None:
        raise InvalidInput("Cannot use both amount and categories")
    if amount is None and categories is None:
        raise InvalidInput("Either amount or categories must be provided")

    if amount is not None:
        return Flat(_to_amount(amount))

    amounts: Dict[int, int] = {}
    for item in categories:
        try:
            category_id = int(item["categoryId"])
        except (KeyError, TypeError, ValueError):
            raise InvalidInput("Each category needs a categoryId")
        amounts[category_id] = amounts.get(category_id, 0) + _to_amount(item.get("amount", 0))
    return Categorized(amounts)


def _flat_total(giver, team=None, exclude_team=None) -> int:
    qs = TeamReward.objects.filter(giver=giver)
    if team is not None:
        qs = qs.filter(team=team)
    if exclude_team is not None:
        qs = qs.exclude(team=exclude_team)
    return qs.aggregate(total=Sum("reward"))["total"] or 0


def _categorized_total(giver, team=None, exclude_team=None) -> int:
    qs = TeamRewardCategory.objects.filter(giver=giver)
    if team is not None:
        qs = qs.filter(team=team)
    if exclude_team is not None:
        qs = qs.exclude(team=exclude_team)
    return qs.aggregate(total=Sum("amount"))["total"] or 0


def snapshot_for(giver, noop=False) -> BudgetSnapshot:
    used = _flat_total(giver) + _categorized_total(giver)
    return BudgetSnapshot(total_limit=giver.virtual_reward, total_used=used, noop=noop)


def _lock_giver(event_id, user):
    giver = get_participant(event_id, user, for_update=True)
    allowed, reason = ParticipationPolicy.can_give_vr(giver)
    if not allowed:
        raise Forbidden(reason)
    return giver


class RewardLedger:

    @staticmethod
    def give(event_id, team_id, user, allocation: Allocation) -> BudgetSnapshot:
        with transaction.atomic():
            giver = _lock_giver(event_id, user)
            event = get_event(event_id)
            require_active_window(event)
            team = get_team(event_id, team_id, message="Project not found in this event")

            if isinstance(allocation, Categorized) and allocation.amounts:
                found = VrCategory.objects.filter(event=event, id__in=allocation.amounts.keys()).count()
                if found != len(allocation.amounts):
                    raise CategoryNotFound("Some categories not found or invalid")

            total = allocation.total

            cap: Optional[int] = event.team_cap_for(giver.event_group)
            if cap is not None and total > cap:
                logger.warning(
                    f"VR give rejected (team cap): giver={giver.id}, team={team.id}, "
                    f"amount={total}, cap={cap}"
                )
                raise ExceedsTeamCap(f"Exceeds VR per-team limit ({cap})")

            used_elsewhere = (
                _flat_total(giver, exclude_team=team)
                + _categorized_total(giver, exclude_team=team)
            )
            if isinstance(allocation, Flat):
                # Categorized rows on this team are replaced, but still count toward the check
                used_elsewhere += _categorized_total(giver, team=team)

            if used_elsewhere + total > giver.virtual_reward:
                logger.warning(
                    f"VR give rejected (balance): giver={giver.id}, team={team.id}, "
                    f"requested={total}, used_elsewhere={used_elsewhere}, limit={giver.virtual_reward}"
                )
                raise InsufficientBalance("Insufficient VR balance")

            if isinstance(allocation, Flat):
                TeamRewardCategory.objects.filter(team=team, giver=giver).delete()
                if allocation.amount == 0:
                    TeamReward.objects.filter(event=event, team=team, giver=giver).delete()
                else:
                    TeamReward.objects.update_or_create(
                        event=event,
                        team=team,
                        giver=giver,
                        defaults={"reward": allocation.amount},
                    )
            else:
                TeamReward.objects.filter(team=team, giver=giver).delete()
                TeamRewardCategory.objects.filter(team=team, giver=giver).delete()
                TeamRewardCategory.objects.bulk_create([
                    TeamRewardCategory(
                        event=event,
                        team=team,
                        giver=giver,
                        category_id=category_id,
                        amount=amount,
                    )
                    for category_id, amount in allocation.amounts.items()
                    if amount > 0
                ])

            snapshot = snapshot_for(giver)

        logger.info(
            f"VR given: giver={giver.id}, team={team.id}, mode={type(allocation).__name__}, "
            f"amount={total}, used={snapshot.total_used}/{snapshot.total_limit}"
        )
        return snapshot

    @staticmethod
    def reset(event_id, team_id, user) -> BudgetSnapshot:
        """Remove every allocation the giver made to the team, in either mode."""
        with transaction.atomic():
            giver = _lock_giver(event_id, user)
            event = get_event(event_id)
            require_active_window(event)
            team = get_team(event_id, team_id, message="Project not found in this event")

            flat_rows = TeamReward.objects.filter(team=team, giver=giver)
            category_rows = TeamRewardCategory.objects.filter(team=team, giver=giver)

            if not flat_rows.exists() and not category_rows.exists():
                return snapshot_for(giver, noop=True)

            flat_rows.delete()
            category_rows.delete()
            snapshot = snapshot_for(giver)

        logger.info(
            f"VR reset: giver={giver.id}, team={team.id}, used={snapshot.total_used}/{snapshot.total_limit}"
        )
        return snapshot

    @staticmethod
    def budget(event_id, user):
        """Giver's current snapshot plus what each team received from them."""
        giver = get_participant(event_id, user)
        allowed, reason = ParticipationPolicy.can_give_vr(giver)
        if not allowed:
            raise Forbidden(reason)

        per_team: Dict[int, Dict] = {}
        for row in TeamReward.objects.filter(giver=giver):
            per_team[row.team_id] = {"teamId": row.team_id, "amount": row.reward, "categories": []}
        for row in TeamRewardCategory.objects.filter(giver=giver).order_by("category_id"):
            entry = per_team.setdefault(row.team_id, {"teamId": row.team_id, "amount": 0, "categories": []})
            entry["amount"] += row.amount
            entry["categories"].append({"categoryId": row.category_id, "amount": row.amount})

        return snapshot_for(giver), sorted(per_team.values(), key=lambda e: e["teamId"])
