# events/views/feedback.py - Comments, ratings and grades

from rest_framework import status
from rest_framework.response import Response

from events.serializers import (
    CommentCreateSerializer,
    CommentSerializer,
    EvaluationCriteriaSerializer,
    EvaluationResultSerializer,
    EventRatingSerializer,
    GradeSerializer,
    RatingCreateSerializer,
)
from events.services import FeedbackCollector
from .generics import LedgerAPIView, validated


class TeamCommentView(LedgerAPIView):

    def get(self, request, event_id, team_id):
        comments = FeedbackCollector.list_comments(event_id, team_id, request.user)
        return Response(CommentSerializer(comments, many=True).data)

    def post(self, request, event_id, team_id):
        data = validated(CommentCreateSerializer, request)
        comment, created = FeedbackCollector.give_comment(event_id, team_id, request.user, data["content"])
        return Response(
            CommentSerializer(comment).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class EventRatingView(LedgerAPIView):

    def get(self, request, event_id):
        rating = FeedbackCollector.get_rating(event_id, request.user)
        return Response({"rating": EventRatingSerializer(rating).data if rating else None})

    def post(self, request, event_id):
        data = validated(RatingCreateSerializer, request)
        rating, created = FeedbackCollector.rate_event(
            event_id, request.user, data["rating"], data.get("comment")
        )
        return Response(
            EventRatingSerializer(rating).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class EventRatingListView(LedgerAPIView):

    def get(self, request, event_id):
        ratings, summary = FeedbackCollector.list_ratings(event_id, request.user)
        return Response({
            "average": summary["average"],
            "count": summary["count"],
            "results": EventRatingSerializer(ratings, many=True).data,
        })


class TeamGradeView(LedgerAPIView):

    def get(self, request, event_id, team_id):
        grades = FeedbackCollector.team_grades(event_id, team_id, request.user)
        return Response(EvaluationResultSerializer(grades, many=True).data)

    def post(self, request, event_id, team_id):
        data = validated(GradeSerializer, request)
        result, created = FeedbackCollector.submit_grade(
            event_id, team_id, request.user, data["criteria_id"], data["score"]
        )
        return Response(
            EvaluationResultSerializer(result).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class GradingStatusView(LedgerAPIView):

    def get(self, request, event_id):
        return Response(FeedbackCollector.grading_status(event_id, request.user))


class EvaluationResultsView(LedgerAPIView):
    """Weighted grading results per team, for organizers."""

    def get(self, request, event_id):
        rows, criteria = FeedbackCollector.results(event_id, request.user)
        return Response({
            "results": rows,
            "criteria": EvaluationCriteriaSerializer(criteria, many=True).data,
        })
