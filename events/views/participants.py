# events/views/participants.py - Joining and participant management

from django.db import transaction
from rest_framework import status
from rest_framework.response import Response

from events.serializers import (
    JoinEventSerializer,
    ParticipantSerializer,
    ParticipantUpdateSerializer,
)
from events.services import ParticipantRegistry
from .generics import LedgerAPIView, validated


class JoinEventView(LedgerAPIView):
    """
    POST /api/events/<event_id>/join/
    Body: {"token": "<uuid>"} or {"role": "guest", "sig": "<hex>"}
    """

    def post(self, request, event_id):
        data = validated(JoinEventSerializer, request)
        participant = ParticipantRegistry.join(
            event_id,
            request.user,
            token=data.get("token") or None,
            role=data.get("role"),
            signature=data.get("sig"),
        )
        return Response(ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED)


class LeaveEventView(LedgerAPIView):

    def post(self, request, event_id):
        ParticipantRegistry.leave_event(event_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ParticipantListView(LedgerAPIView):

    def get(self, request, event_id):
        participants = ParticipantRegistry.list_participants(
            event_id,
            request.user,
            event_group=request.query_params.get("group"),
        )
        return Response(ParticipantSerializer(participants, many=True).data)


class ParticipantDetailView(LedgerAPIView):
    """
    PATCH applies role, leader flag and budget changes in that order,
    all or nothing.
    """

    def patch(self, request, event_id, participant_id):
        data = validated(ParticipantUpdateSerializer, request)
        participant = None

        with transaction.atomic():
            if "event_group" in data:
                participant = ParticipantRegistry.set_role(
                    event_id, request.user, participant_id, data["event_group"]
                )
            if "is_leader" in data:
                participant = ParticipantRegistry.set_leader(
                    event_id, request.user, participant_id, data["is_leader"]
                )
            if "virtual_reward" in data:
                participant = ParticipantRegistry.set_virtual_reward(
                    event_id, request.user, participant_id, data["virtual_reward"]
                )

        return Response(ParticipantSerializer(participant).data)

    def delete(self, request, event_id, participant_id):
        ParticipantRegistry.remove(event_id, request.user, participant_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
