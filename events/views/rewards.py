# events/views/rewards.py - VR allocation and special-reward votes

from rest_framework.response import Response

from events.serializers import GiveVrSerializer, SpecialVoteSerializer
from events.services import RewardLedger, SpecialRewardVoteManager
from .generics import LedgerAPIView, validated


class TeamVrView(LedgerAPIView):
    """
    POST   /api/events/<event_id>/teams/<team_id>/vr/  {"amount": 10} or {"categories": [...]}
    DELETE /api/events/<event_id>/teams/<team_id>/vr/  refund everything given to the team
    """

    def post(self, request, event_id, team_id):
        data = validated(GiveVrSerializer, request)
        snapshot = RewardLedger.give(event_id, team_id, request.user, data["allocation"])
        return Response({"message": "VR updated", **snapshot.as_dict()})

    def delete(self, request, event_id, team_id):
        snapshot = RewardLedger.reset(event_id, team_id, request.user)
        body = snapshot.as_dict()
        body.setdefault("message", "VR refunded")
        return Response(body)


class VrBudgetView(LedgerAPIView):

    def get(self, request, event_id):
        snapshot, teams = RewardLedger.budget(event_id, request.user)
        return Response({**snapshot.as_dict(), "remaining": snapshot.remaining, "teams": teams})


class TeamSpecialVoteView(LedgerAPIView):

    def get(self, request, event_id, team_id):
        reward_ids = SpecialRewardVoteManager.votes_for(event_id, team_id, request.user)
        return Response({"reward_ids": reward_ids})

    def put(self, request, event_id, team_id):
        data = validated(SpecialVoteSerializer, request)
        reward_ids = SpecialRewardVoteManager.set_votes(event_id, team_id, request.user, data["reward_ids"])
        return Response({"message": "Special rewards updated", "reward_ids": reward_ids})

    def delete(self, request, event_id, team_id):
        removed = SpecialRewardVoteManager.reset_votes(event_id, team_id, request.user)
        return Response({"message": "Special rewards reset", "removed": removed})
