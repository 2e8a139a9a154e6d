# events/services/setup.py
"""
Organizer-side event configuration: the event itself, its publication,
VR categories, special rewards, evaluation criteria and invites.
"""
import logging

from django.conf import settings
from django.db import transaction

from core.exceptions import AlreadyExists, Forbidden, InvalidInput, InvalidRole, NotFound
from events import invites
from events.datetime_utils import validate_windows
from events.models import (
    EvaluationCriteria,
    Event,
    Participant,
    SpecialReward,
    VrCategory,
)
from events.policies import ParticipationPolicy
from events.state_machine import transition
from .lookups import get_event, get_participant

logger = logging.getLogger('ledger.events')


EDITABLE_EVENT_FIELDS = [
    "name",
    "description",
    "image_cover",
    "start_view",
    "end_view",
    "start_join_date",
    "end_join_date",
    "public_view",
    "has_committee",
    "virtual_reward_guest",
    "virtual_reward_committee",
    "unit_reward",
    "vr_team_cap_enabled",
    "vr_team_cap_guest",
    "vr_team_cap_committee",
    "max_teams",
    "max_team_members",
]

NON_NEGATIVE_FIELDS = [
    "virtual_reward_guest",
    "virtual_reward_committee",
    "vr_team_cap_guest",
    "vr_team_cap_committee",
    "max_teams",
    "max_team_members",
]


def _require_organizer(event_id, user, leader=False):
    actor = get_participant(event_id, user)
    if not ParticipationPolicy.is_organizer(actor):
        raise Forbidden("Only organizers can manage this event")
    if leader and not actor.is_leader:
        raise Forbidden("Only the organizer leader can do this")
    return actor


def _clean_name(name, label="Name"):
    name = (name or "").strip()
    if not name:
        raise InvalidInput(f"{label} is required")
    return name


class EventSetup:

    # ─────────────────────────────────────────────────────────────
    # Event
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def create_event(user, name, description=None):
        """Create a DRAFT event; the creator becomes its organizer leader."""
        name = _clean_name(name, "Event name")

        with transaction.atomic():
            if Event.objects.filter(name__iexact=name).exists():
                raise AlreadyExists("Event name already exists")

            event = Event.objects.create(
                name=name,
                description=description,
                vr_team_cap_enabled=getattr(settings, "VR_TEAM_CAP_DEFAULT_ENABLED", False),
            )
            Participant.objects.create(
                event=event,
                user=user,
                event_group=Participant.GROUP_ORGANIZER,
                is_leader=True,
            )
            invites.get_or_create_link_invite(event)

        logger.info(f"Event created: event={event.id}, organizer={user.id}")
        return event

    @staticmethod
    def update_event(event_id, user, **fields):
        unknown = set(fields) - set(EDITABLE_EVENT_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")

        for key in NON_NEGATIVE_FIELDS:
            value = fields.get(key)
            if value is not None and value < 0:
                raise InvalidInput(f"{key} cannot be negative")

        with transaction.atomic():
            event = get_event(event_id, for_update=True)
            _require_organizer(event_id, user)

            if "name" in fields:
                fields["name"] = _clean_name(fields["name"], "Event name")
                clash = Event.objects.filter(name__iexact=fields["name"]).exclude(pk=event.pk)
                if clash.exists():
                    raise AlreadyExists("Event name already exists")

            merged = {key: fields.get(key, getattr(event, key)) for key in (
                "start_view", "end_view", "start_join_date", "end_join_date",
            )}
            reason = validate_windows(
                merged["start_view"],
                merged["end_view"],
                merged["start_join_date"],
                merged["end_join_date"],
            )
            if reason:
                raise InvalidInput(reason)

            for key, value in fields.items():
                setattr(event, key, value)
            if fields:
                event.save(update_fields=list(fields))

        logger.info(f"Event updated: event={event.id}, fields={sorted(fields)}, by={user.id}")
        return event

    @staticmethod
    def publish(event_id, user):
        with transaction.atomic():
            event = get_event(event_id, for_update=True)
            _require_organizer(event_id, user, leader=True)

            ok, message = transition(event, Event.STATUS_PUBLISHED, actor=user)
            if not ok:
                raise InvalidInput(message)
        return event

    @staticmethod
    def delete_event(event_id, user):
        """Organizer leader only. Everything scoped to the event goes with it."""
        with transaction.atomic():
            event = get_event(event_id, for_update=True)
            _require_organizer(event_id, user, leader=True)
            event.delete()

        logger.info(f"Event deleted: event={event_id}, actor={user.id}")

    # ─────────────────────────────────────────────────────────────
    # Invites
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def invite_tokens(event_id, user):
        event = get_event(event_id)
        _require_organizer(event_id, user)
        link_invite = invites.get_or_create_link_invite(event)
        return {role: invites.token_for_role(link_invite, role) for role in invites.ROLE_MAP}

    @staticmethod
    def sign_invite(event_id, user, target_user_id, role):
        """Personal invite signature for `target_user_id` joining as `role`."""
        get_event(event_id)
        _require_organizer(event_id, user)
        role = (role or "").lower()
        if role not in invites.ROLE_MAP:
            raise InvalidRole("Invalid role")
        return invites.sign_invite(event_id, target_user_id, role)

    # ─────────────────────────────────────────────────────────────
    # VR categories
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def create_category(event_id, user, name, description=None, sort_order=0):
        event = get_event(event_id)
        _require_organizer(event_id, user)
        return VrCategory.objects.create(
            event=event,
            name=_clean_name(name, "Category name"),
            description=description,
            sort_order=sort_order or 0,
        )

    @staticmethod
    def update_category(event_id, user, category_id, name=None, description=None, sort_order=None):
        _require_organizer(event_id, user)
        category = VrCategory.objects.filter(pk=category_id, event_id=event_id).first()
        if category is None:
            raise NotFound("Category not found")

        if name is not None:
            category.name = _clean_name(name, "Category name")
        if description is not None:
            category.description = description
        if sort_order is not None:
            category.sort_order = sort_order
        category.save()
        return category

    @staticmethod
    def delete_category(event_id, user, category_id):
        """Deleting a category also drops every allocation made under it."""
        _require_organizer(event_id, user)
        deleted, _ = VrCategory.objects.filter(pk=category_id, event_id=event_id).delete()
        if not deleted:
            raise NotFound("Category not found")
        logger.info(f"VR category deleted: event={event_id}, category={category_id}")

    # ─────────────────────────────────────────────────────────────
    # Special rewards
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def create_special_reward(event_id, user, name, description=None, image=None):
        event = get_event(event_id)
        _require_organizer(event_id, user)
        return SpecialReward.objects.create(
            event=event,
            name=_clean_name(name, "Reward name"),
            description=description,
            image=image,
        )

    @staticmethod
    def update_special_reward(event_id, user, reward_id, name=None, description=None, image=None):
        _require_organizer(event_id, user)
        reward = SpecialReward.objects.filter(pk=reward_id, event_id=event_id).first()
        if reward is None:
            raise NotFound("Special reward not found")

        if name is not None:
            reward.name = _clean_name(name, "Reward name")
        if description is not None:
            reward.description = description
        if image is not None:
            reward.image = image
        reward.save()
        return reward

    @staticmethod
    def delete_special_reward(event_id, user, reward_id):
        _require_organizer(event_id, user)
        deleted, _ = SpecialReward.objects.filter(pk=reward_id, event_id=event_id).delete()
        if not deleted:
            raise NotFound("Special reward not found")
        logger.info(f"Special reward deleted: event={event_id}, reward={reward_id}")

    # ─────────────────────────────────────────────────────────────
    # Evaluation criteria
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def list_criteria(event_id, user):
        allowed, reason = ParticipationPolicy.can_view_criteria(get_participant(event_id, user))
        if not allowed:
            raise Forbidden(reason)
        return EvaluationCriteria.objects.filter(event_id=event_id)

    @staticmethod
    def create_criteria(event_id, user, name, max_score, description=None, weight_percentage=0, sort_order=0):
        event = get_event(event_id)
        _require_organizer(event_id, user)
        if max_score is None or max_score <= 0:
            raise InvalidInput("max_score must be greater than 0")
        if weight_percentage is not None and (weight_percentage < 0 or weight_percentage > 100):
            raise InvalidInput("weight_percentage must be between 0 and 100")

        return EvaluationCriteria.objects.create(
            event=event,
            name=_clean_name(name, "Criteria name"),
            description=description,
            max_score=max_score,
            weight_percentage=weight_percentage or 0,
            sort_order=sort_order or 0,
        )

    @staticmethod
    def update_criteria(event_id, user, criteria_id, **fields):
        _require_organizer(event_id, user)
        criteria = EvaluationCriteria.objects.filter(pk=criteria_id, event_id=event_id).first()
        if criteria is None:
            raise NotFound("Criteria not found")

        if "name" in fields:
            fields["name"] = _clean_name(fields["name"], "Criteria name")
        if "max_score" in fields and (fields["max_score"] is None or fields["max_score"] <= 0):
            raise InvalidInput("max_score must be greater than 0")
        weight = fields.get("weight_percentage")
        if weight is not None and (weight < 0 or weight > 100):
            raise InvalidInput("weight_percentage must be between 0 and 100")

        for key in ("name", "description", "max_score", "weight_percentage", "sort_order"):
            if key in fields:
                setattr(criteria, key, fields[key])
        criteria.save()
        return criteria

    @staticmethod
    def delete_criteria(event_id, user, criteria_id):
        _require_organizer(event_id, user)
        deleted, _ = EvaluationCriteria.objects.filter(pk=criteria_id, event_id=event_id).delete()
        if not deleted:
            raise NotFound("Criteria not found")
