# events/views/teams.py - Team formation API

from rest_framework import status
from rest_framework.response import Response

from events.models import Team
from events.serializers import (
    ParticipantSerializer,
    TeamCreateSerializer,
    TeamMemberSerializer,
    TeamSerializer,
    TeamUpdateSerializer,
)
from events.services import TeamManager
from events.services.lookups import get_team, require_visible_event
from .generics import LedgerAPIView, validated


class TeamListCreateView(LedgerAPIView):

    def get(self, request, event_id):
        require_visible_event(event_id, request.user)
        teams = Team.objects.filter(event_id=event_id).prefetch_related("members__user").order_by("name")
        return Response(TeamSerializer(teams, many=True).data)

    def post(self, request, event_id):
        data = validated(TeamCreateSerializer, request)
        team = TeamManager.create(event_id, request.user, **data)
        return Response(TeamSerializer(team).data, status=status.HTTP_201_CREATED)


class TeamDetailView(LedgerAPIView):

    def get(self, request, event_id, team_id):
        require_visible_event(event_id, request.user)
        return Response(TeamSerializer(get_team(event_id, team_id)).data)

    def patch(self, request, event_id, team_id):
        data = validated(TeamUpdateSerializer, request)
        team = TeamManager.update(event_id, team_id, request.user, **data)
        return Response(TeamSerializer(team).data)

    def delete(self, request, event_id, team_id):
        TeamManager.dissolve(event_id, team_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TeamMemberAddView(LedgerAPIView):

    def post(self, request, event_id, team_id):
        data = validated(TeamMemberSerializer, request)
        member = TeamManager.add_member(event_id, team_id, request.user, data["user_id"])
        return Response(ParticipantSerializer(member).data, status=status.HTTP_201_CREATED)


class TeamMemberRemoveView(LedgerAPIView):

    def delete(self, request, event_id, team_id, user_id):
        TeamManager.remove_member(event_id, team_id, request.user, user_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TeamCandidatesView(LedgerAPIView):
    """Presenters without a team, for the leader's member picker. ?q= filters by name."""

    def get(self, request, event_id, team_id):
        candidates = TeamManager.list_candidates(
            event_id, team_id, request.user, request.query_params.get("q", "")
        )
        return Response(ParticipantSerializer(candidates, many=True).data)
