# events/services/feedback.py
"""
Comments, event ratings and committee grades.

One record per author per target: submitting again updates the existing
row in place.
"""
import logging

from django.db import transaction
from django.db.models import Avg, Count

from core.exceptions import Forbidden, InvalidInput, NotFound
from events.models import (
    Comment,
    EvaluationCriteria,
    EvaluationResult,
    EventRating,
    Participant,
    Team,
)
from events.policies import ParticipationPolicy
from .lookups import (
    get_event,
    get_participant,
    get_team,
    require_active_window,
    require_visible_event,
)

logger = logging.getLogger('ledger.feedback')


class FeedbackCollector:

    # ─────────────────────────────────────────────────────────────
    # Comments
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def give_comment(event_id, team_id, user, content):
        content = (content or "").strip()
        if not content:
            raise InvalidInput("Comment cannot be empty")

        with transaction.atomic():
            participant = get_participant(event_id, user)
            allowed, reason = ParticipationPolicy.can_give_vr(participant)
            if not allowed:
                raise Forbidden(reason)

            event = get_event(event_id)
            require_active_window(event)
            team = get_team(event_id, team_id, message="Project not found in this event")

            comment, created = Comment.objects.update_or_create(
                event=event,
                team=team,
                user=user,
                defaults={"content": content},
            )

        logger.info(
            f"Comment {'created' if created else 'updated'}: event={event_id}, team={team.id}, user={user.id}"
        )
        return comment, created

    @staticmethod
    def list_comments(event_id, team_id, user):
        require_visible_event(event_id, user)
        team = get_team(event_id, team_id, message="Project not found in this event")
        return Comment.objects.filter(team=team).select_related("user")

    # ─────────────────────────────────────────────────────────────
    # Event ratings
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def rate_event(event_id, user, rating, comment=None):
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise InvalidInput("Rating must be a number between 1 and 5")
        if rating < 1 or rating > 5:
            raise InvalidInput("Rating must be between 1 and 5")

        with transaction.atomic():
            participant = get_participant(event_id, user)
            allowed, reason = ParticipationPolicy.can_rate_event(participant)
            if not allowed:
                raise Forbidden(reason)

            event = get_event(event_id)
            require_active_window(event)

            record, created = EventRating.objects.update_or_create(
                event=event,
                user=user,
                defaults={"rating": rating, "comment": comment},
            )

        logger.info(f"Event rated: event={event_id}, user={user.id}, rating={rating}")
        return record, created

    @staticmethod
    def get_rating(event_id, user):
        """Caller's own rating, or None."""
        get_event(event_id)
        return EventRating.objects.filter(event_id=event_id, user=user).first()

    @staticmethod
    def list_ratings(event_id, user):
        """All ratings plus the aggregate, for organizers."""
        actor = get_participant(event_id, user)
        if not ParticipationPolicy.is_organizer(actor):
            raise Forbidden("Only organizers can view event ratings")

        qs = EventRating.objects.filter(event_id=event_id).select_related("user")
        summary = qs.aggregate(average=Avg("rating"), count=Count("id"))
        return qs, summary

    # ─────────────────────────────────────────────────────────────
    # Committee grades
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def submit_grade(event_id, team_id, user, criteria_id, score):
        try:
            score = float(score)
        except (TypeError, ValueError):
            raise InvalidInput("Score must be a number")

        with transaction.atomic():
            committee = get_participant(event_id, user, for_update=True)
            if committee is None or committee.event_group != Participant.GROUP_COMMITTEE:
                raise Forbidden("Only committee members can grade")

            team = get_team(event_id, team_id)
            criteria = EvaluationCriteria.objects.filter(pk=criteria_id, event_id=event_id).first()
            if criteria is None:
                raise NotFound("Criteria not found")

            if score < 0 or score > criteria.max_score:
                raise InvalidInput(f"Score must be between 0 and {criteria.max_score}")

            result, created = EvaluationResult.objects.update_or_create(
                team=team,
                criteria=criteria,
                committee=committee,
                defaults={"event_id": event_id, "score": score},
            )

        logger.info(
            f"Grade submitted: committee={committee.id}, team={team.id}, "
            f"criteria={criteria.id}, score={score}"
        )
        return result, created

    @staticmethod
    def grading_status(event_id, user):
        """
        Per team: how many criteria the caller has graded and whether the
        team is fully graded.
        """
        committee = get_participant(event_id, user)
        if committee is None or committee.event_group != Participant.GROUP_COMMITTEE:
            raise Forbidden("Only committee members can view grading status")

        total_criteria = EvaluationCriteria.objects.filter(event_id=event_id).count()
        graded = dict(
            EvaluationResult.objects.filter(event_id=event_id, committee=committee)
            .values("team_id")
            .annotate(n=Count("id"))
            .values_list("team_id", "n")
        )

        status_rows = []
        for team in Team.objects.filter(event_id=event_id).order_by("name"):
            count = graded.get(team.id, 0)
            status_rows.append({
                "teamId": team.id,
                "teamName": team.name,
                "gradedCount": count,
                "totalCriteria": total_criteria,
                "isComplete": total_criteria > 0 and count >= total_criteria,
            })
        return status_rows

    @staticmethod
    def team_grades(event_id, team_id, user):
        """Grades the calling committee member gave the team."""
        committee = get_participant(event_id, user)
        if committee is None or committee.event_group != Participant.GROUP_COMMITTEE:
            raise Forbidden("Only committee members can view their grades")

        team = get_team(event_id, team_id)
        return (
            EvaluationResult.objects.filter(team=team, committee=committee)
            .select_related("criteria")
            .order_by("criteria__sort_order", "criteria_id")
        )

    @staticmethod
    def results(event_id, user):
        """
        Organizer view of the grading outcome.

        Each committee member's scores are normalized to 0..100 per
        criterion and combined by `weight_percentage`; missing grades count
        as zero. A team's overall average is the mean over the committee
        members who graded it. Returns (rows, criteria).
        """
        actor = get_participant(event_id, user)
        if not ParticipationPolicy.is_organizer(actor):
            raise Forbidden("Only organizers can view results")

        criteria = list(EvaluationCriteria.objects.filter(event_id=event_id))
        total_weight = sum(c.weight_percentage for c in criteria)

        rows = []
        teams = Team.objects.filter(event_id=event_id).prefetch_related("members__user").order_by("name")
        for team in teams:
            by_committee = {}
            results = (
                EvaluationResult.objects.filter(team=team)
                .select_related("committee__user")
                .order_by("committee_id")
            )
            for result in results:
                entry = by_committee.setdefault(result.committee_id, {
                    "name": result.committee.user.display_name,
                    "scores": {},
                })
                entry["scores"][result.criteria_id] = result.score

            committee_scores = []
            for committee_id, entry in by_committee.items():
                weighted_sum = 0.0
                for crit in criteria:
                    normalized = entry["scores"].get(crit.id, 0) / crit.max_score * 100
                    weighted_sum += normalized * crit.weight_percentage / 100
                avg_score = weighted_sum / (total_weight / 100) if total_weight > 0 else 0
                committee_scores.append({
                    "committeeId": committee_id,
                    "committeeName": entry["name"],
                    "avgScore": round(avg_score, 2),
                    "scores": entry["scores"],
                })

            overall = (
                round(sum(c["avgScore"] for c in committee_scores) / len(committee_scores), 2)
                if committee_scores else 0
            )

            members = sorted(team.members.all(), key=lambda m: (not m.is_leader, m.joined_at, m.id))
            rows.append({
                "teamId": team.id,
                "teamName": team.name,
                "presenterName": members[0].user.display_name if members else "Unknown",
                "overallAverage": overall,
                "committeeScores": committee_scores,
            })

        return rows, criteria
