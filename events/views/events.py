# events/views/events.py - Event setup API

from django.db.models import Q
from rest_framework import status
from rest_framework.response import Response

from events.models import Event, VrCategory, SpecialReward
from events.serializers import (
    EvaluationCriteriaSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventUpdateSerializer,
    SignInviteSerializer,
    SpecialRewardSerializer,
    VrCategorySerializer,
)
from events.services import EventSetup
from events.services.lookups import require_visible_event
from .generics import LedgerAPIView, validated


class EventListCreateView(LedgerAPIView):
    """
    GET: public published events plus every event the caller takes part in.
    POST: create a DRAFT event with the caller as organizer leader.
    """

    def get(self, request):
        events = (
            Event.objects.filter(
                Q(status=Event.STATUS_PUBLISHED, public_view=True)
                | Q(participants__user=request.user)
            )
            .distinct()
            .order_by("-created_at")
        )
        return Response(EventSerializer(events, many=True).data)

    def post(self, request):
        data = validated(EventCreateSerializer, request)
        event = EventSetup.create_event(request.user, data["name"], data.get("description"))
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(LedgerAPIView):

    def get(self, request, event_id):
        event = require_visible_event(event_id, request.user)
        return Response(EventSerializer(event).data)

    def patch(self, request, event_id):
        data = validated(EventUpdateSerializer, request, partial=True)
        event = EventSetup.update_event(event_id, request.user, **data)
        return Response(EventSerializer(event).data)

    def delete(self, request, event_id):
        EventSetup.delete_event(event_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventPublishView(LedgerAPIView):

    def post(self, request, event_id):
        event = EventSetup.publish(event_id, request.user)
        return Response(EventSerializer(event).data)


class EventInviteView(LedgerAPIView):

    def get(self, request, event_id):
        return Response(EventSetup.invite_tokens(event_id, request.user))


class SignInviteView(LedgerAPIView):

    def post(self, request, event_id):
        data = validated(SignInviteSerializer, request)
        signature = EventSetup.sign_invite(event_id, request.user, data["user_id"], data["role"])
        return Response({"user_id": data["user_id"], "role": data["role"].lower(), "sig": signature})


class VrCategoryListCreateView(LedgerAPIView):

    def get(self, request, event_id):
        require_visible_event(event_id, request.user)
        categories = VrCategory.objects.filter(event_id=event_id)
        return Response(VrCategorySerializer(categories, many=True).data)

    def post(self, request, event_id):
        data = validated(VrCategorySerializer, request)
        category = EventSetup.create_category(event_id, request.user, **data)
        return Response(VrCategorySerializer(category).data, status=status.HTTP_201_CREATED)


class VrCategoryDetailView(LedgerAPIView):

    def patch(self, request, event_id, category_id):
        data = validated(VrCategorySerializer, request, partial=True)
        category = EventSetup.update_category(event_id, request.user, category_id, **data)
        return Response(VrCategorySerializer(category).data)

    def delete(self, request, event_id, category_id):
        EventSetup.delete_category(event_id, request.user, category_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SpecialRewardListCreateView(LedgerAPIView):

    def get(self, request, event_id):
        require_visible_event(event_id, request.user)
        rewards = SpecialReward.objects.filter(event_id=event_id).order_by("id")
        return Response(SpecialRewardSerializer(rewards, many=True).data)

    def post(self, request, event_id):
        data = validated(SpecialRewardSerializer, request)
        reward = EventSetup.create_special_reward(event_id, request.user, **data)
        return Response(SpecialRewardSerializer(reward).data, status=status.HTTP_201_CREATED)


class SpecialRewardDetailView(LedgerAPIView):

    def patch(self, request, event_id, reward_id):
        data = validated(SpecialRewardSerializer, request, partial=True)
        reward = EventSetup.update_special_reward(event_id, request.user, reward_id, **data)
        return Response(SpecialRewardSerializer(reward).data)

    def delete(self, request, event_id, reward_id):
        EventSetup.delete_special_reward(event_id, request.user, reward_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CriteriaListCreateView(LedgerAPIView):

    def get(self, request, event_id):
        criteria = EventSetup.list_criteria(event_id, request.user)
        return Response(EvaluationCriteriaSerializer(criteria, many=True).data)

    def post(self, request, event_id):
        data = validated(EvaluationCriteriaSerializer, request)
        criteria = EventSetup.create_criteria(event_id, request.user, **data)
        return Response(EvaluationCriteriaSerializer(criteria).data, status=status.HTTP_201_CREATED)


class CriteriaDetailView(LedgerAPIView):

    def patch(self, request, event_id, criteria_id):
        data = validated(EvaluationCriteriaSerializer, request, partial=True)
        criteria = EventSetup.update_criteria(event_id, request.user, criteria_id, **data)
        return Response(EvaluationCriteriaSerializer(criteria).data)

    def delete(self, request, event_id, criteria_id):
        EventSetup.delete_criteria(event_id, request.user, criteria_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
