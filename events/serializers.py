from rest_framework import serializers

from users.models import User
from .models import (
    Comment,
    EvaluationCriteria,
    EvaluationResult,
    Event,
    EventRating,
    Participant,
    SpecialReward,
    Team,
    VrCategory,
)
from .services.rewards import build_allocation


# -----------------------------------------
# OUTPUT SERIALIZERS
# -----------------------------------------
class UserMiniSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "name", "display_name", "image"]


class EventSerializer(serializers.ModelSerializer):
    team_count = serializers.IntegerField(source="teams.count", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "description",
            "image_cover",
            "status",
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
            "team_count",
            "created_at",
        ]
        read_only_fields = ["id", "status", "team_count", "created_at"]


class ParticipantSerializer(serializers.ModelSerializer):
    user = UserMiniSerializer(read_only=True)

    class Meta:
        model = Participant
        fields = ["id", "user", "event_group", "is_leader", "team", "virtual_reward", "joined_at"]
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    members = ParticipantSerializer(many=True, read_only=True)
    current_size = serializers.IntegerField(read_only=True)

    class Meta:
        model = Team
        fields = ["id", "event", "name", "description", "image_cover", "current_size", "members", "created_at"]
        read_only_fields = fields


class VrCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = VrCategory
        fields = ["id", "name", "description", "sort_order"]


class SpecialRewardSerializer(serializers.ModelSerializer):
    class Meta:
        model = SpecialReward
        fields = ["id", "name", "description", "image", "created_at"]
        read_only_fields = ["id", "created_at"]


class CommentSerializer(serializers.ModelSerializer):
    user = UserMiniSerializer(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "team", "user", "content", "created_at", "updated_at"]
        read_only_fields = fields


class EventRatingSerializer(serializers.ModelSerializer):
    user = UserMiniSerializer(read_only=True)

    class Meta:
        model = EventRating
        fields = ["id", "user", "rating", "comment", "created_at", "updated_at"]
        read_only_fields = fields


class EvaluationCriteriaSerializer(serializers.ModelSerializer):
    class Meta:
        model = EvaluationCriteria
        fields = ["id", "name", "description", "max_score", "weight_percentage", "sort_order"]


class EvaluationResultSerializer(serializers.ModelSerializer):
    criteria_name = serializers.CharField(source="criteria.name", read_only=True)

    class Meta:
        model = EvaluationResult
        fields = ["id", "team", "criteria", "criteria_name", "score", "updated_at"]
        read_only_fields = fields


# -----------------------------------------
# PAYLOAD SERIALIZERS
# -----------------------------------------
class JoinEventSerializer(serializers.Serializer):
    token = serializers.CharField(required=False, allow_blank=True)
    role = serializers.CharField(required=False, allow_blank=True)
    sig = serializers.CharField(required=False, allow_blank=True)


class SignInviteSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    role = serializers.CharField()


class ParticipantUpdateSerializer(serializers.Serializer):
    """Partial update of a participant; each key maps to one registry call."""
    event_group = serializers.CharField(required=False)
    is_leader = serializers.BooleanField(required=False)
    virtual_reward = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Nothing to update")
        return attrs


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    image_cover = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class TeamUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    image_cover = serializers.CharField(required=False, allow_blank=True)


class TeamMemberSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()


class CategoryAmountSerializer(serializers.Serializer):
    categoryId = serializers.IntegerField()
    amount = serializers.FloatField()


class GiveVrSerializer(serializers.Serializer):
    """
    Either `amount` (flat) or `categories` (split), never both.
    Validated data carries the built `allocation`.
    """
    amount = serializers.FloatField(required=False)
    categories = CategoryAmountSerializer(many=True, required=False)

    def validate(self, attrs):
        amount = attrs.get("amount")
        categories = attrs.get("categories")

        if amount is not None and categories is not None:
            raise serializers.ValidationError("Cannot use both amount and categories")
        if amount is None and categories is None:
            raise serializers.ValidationError("Either amount or categories must be provided")

        attrs["allocation"] = build_allocation(amount=amount, categories=categories)
        return attrs


class SpecialVoteSerializer(serializers.Serializer):
    reward_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField()


class RatingCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class GradeSerializer(serializers.Serializer):
    criteria_id = serializers.IntegerField()
    score = serializers.FloatField()


class EventCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EventUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Event
        fields = [
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
        extra_kwargs = {"name": {"validators": []}}
