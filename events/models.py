# events/models.py
from django.db import models
from django.conf import settings
import uuid


class Event(models.Model):
    STATUS_DRAFT = "DRAFT"
    STATUS_PUBLISHED = "PUBLISHED"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    image_cover = models.CharField(max_length=1024, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT)

    # Active window: voting, scoring, comments and ratings only inside it
    start_view = models.DateTimeField(blank=True, null=True)
    end_view = models.DateTimeField(blank=True, null=True)
    # Submission window for presenters, must close before start_view
    start_join_date = models.DateTimeField(blank=True, null=True)
    end_join_date = models.DateTimeField(blank=True, null=True)

    public_view = models.BooleanField(default=True)
    has_committee = models.BooleanField(default=False)

    # Role-based VR budgets handed out at join / role-change time
    virtual_reward_guest = models.PositiveIntegerField(default=0)
    virtual_reward_committee = models.PositiveIntegerField(default=0)
    unit_reward = models.CharField(max_length=32, blank=True, null=True, help_text="Label for one VR, e.g. 'coin'")

    vr_team_cap_enabled = models.BooleanField(default=False)
    vr_team_cap_guest = models.PositiveIntegerField(blank=True, null=True)
    vr_team_cap_committee = models.PositiveIntegerField(blank=True, null=True)

    max_teams = models.PositiveIntegerField(blank=True, null=True)
    max_team_members = models.PositiveIntegerField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["status", "created_at"], name="event_status_created_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def is_published(self):
        return self.status == self.STATUS_PUBLISHED

    def default_virtual_reward(self, event_group):
        """VR budget a participant of `event_group` starts with."""
        if event_group == Participant.GROUP_GUEST:
            return self.virtual_reward_guest or 0
        if event_group == Participant.GROUP_COMMITTEE:
            return self.virtual_reward_committee or 0
        return 0

    def team_cap_for(self, event_group):
        """Per-team VR cap for a giver role, or None when no cap applies."""
        if not self.vr_team_cap_enabled:
            return None
        if event_group == Participant.GROUP_COMMITTEE:
            return self.vr_team_cap_committee
        return self.vr_team_cap_guest


class Team(models.Model):
    """
    A presenter team. Membership lives on Participant.team; a team with
    no members left is deleted by the team services.
    """
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    image_cover = models.CharField(max_length=1024, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("event", "name")
        indexes = [
            models.Index(fields=["event", "created_at"], name="team_event_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.event.name})"

    @property
    def current_size(self):
        return self.members.count()


class Participant(models.Model):
    GROUP_ORGANIZER = "ORGANIZER"
    GROUP_PRESENTER = "PRESENTER"
    GROUP_COMMITTEE = "COMMITTEE"
    GROUP_GUEST = "GUEST"

    GROUP_CHOICES = [
        (GROUP_ORGANIZER, "Organizer"),
        (GROUP_PRESENTER, "Presenter"),
        (GROUP_COMMITTEE, "Committee"),
        (GROUP_GUEST, "Guest"),
    ]

    # Roles allowed to hand out VR
    GIVER_GROUPS = [GROUP_GUEST, GROUP_COMMITTEE]

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="participations",
    )
    event_group = models.CharField(max_length=16, choices=GROUP_CHOICES)
    is_leader = models.BooleanField(default=False)
    team = models.ForeignKey(
        Team,
        on_delete=models.SET_NULL,
        related_name="members",
        null=True,
        blank=True,
    )
    virtual_reward = models.PositiveIntegerField(default=0, help_text="VR budget ceiling")
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("event", "user")
        indexes = [
            models.Index(fields=["event", "event_group"], name="participant_event_group_idx"),
            models.Index(fields=["team", "joined_at"], name="participant_team_joined_idx"),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.event_group} @ {self.event}"

    @property
    def is_organizer(self):
        return self.event_group == self.GROUP_ORGANIZER

    @property
    def is_organizer_leader(self):
        return self.is_organizer and self.is_leader


class LinkInvite(models.Model):
    """Shareable per-role join tokens, one row per event."""
    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="link_invite")
    presenter_token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    guest_token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    committee_token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Invites for {self.event}"


class VrCategory(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="vr_categories")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self):
        return f"{self.name} ({self.event.name})"


class TeamReward(models.Model):
    """Flat VR amount a giver allocated to a team. Row is dropped at 0."""
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="team_rewards")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="rewards")
    giver = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name="given_rewards")
    reward = models.PositiveIntegerField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("event", "team", "giver")
        indexes = [
            models.Index(fields=["event", "giver"], name="teamreward_event_giver_idx"),
        ]

    def __str__(self):
        return f"{self.giver} -> {self.team}: {self.reward}"


class TeamRewardCategory(models.Model):
    """Per-category VR amount. Never coexists with a TeamReward for the same (team, giver)."""
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="team_category_rewards")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="category_rewards")
    giver = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name="given_category_rewards")
    category = models.ForeignKey(VrCategory, on_delete=models.CASCADE, related_name="allocations")
    amount = models.PositiveIntegerField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("event", "team", "giver", "category")
        indexes = [
            models.Index(fields=["event", "giver"], name="teamrewardcat_event_giver_idx"),
        ]

    def __str__(self):
        return f"{self.giver} -> {self.team} [{self.category.name}]: {self.amount}"


class SpecialReward(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="special_rewards")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    image = models.CharField(max_length=1024, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} ({self.event.name})"


class SpecialRewardVote(models.Model):
    """
    A committee member's pick of a team for a special reward.
    One team per (reward, committee member) at any time.
    """
    reward = models.ForeignKey(SpecialReward, on_delete=models.CASCADE, related_name="votes")
    committee = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name="special_votes")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="special_votes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["reward", "committee"], name="unique_reward_per_committee"),
        ]
        indexes = [
            models.Index(fields=["committee", "team"], name="vote_committee_team_idx"),
        ]

    def __str__(self):
        return f"{self.committee} voted {self.reward.name} -> {self.team.name}"


class Comment(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="comments")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="comments")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_comments",
    )
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("event", "team", "user")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user.username} on {self.team.name}"


class EventRating(models.Model):
    """
    Rating from a participant for an event.
    Each user can give at most one rating per event.
    """
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ratings")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="event_ratings",
    )
    rating = models.PositiveSmallIntegerField()  # 1-5, enforced in the service
    comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("event", "user")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.event.name} - {self.user.username} ({self.rating})"


class EvaluationCriteria(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="evaluation_criteria")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    max_score = models.FloatField()
    weight_percentage = models.FloatField(default=0)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self):
        return f"{self.name} (max {self.max_score})"


class EvaluationResult(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="evaluation_results")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="evaluation_results")
    criteria = models.ForeignKey(EvaluationCriteria, on_delete=models.CASCADE, related_name="results")
    committee = models.ForeignKey(Participant, on_delete=models.CASCADE, related_name="grades")
    score = models.FloatField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("team", "criteria", "committee")

    def __str__(self):
        return f"{self.committee} graded {self.team.name} on {self.criteria.name}: {self.score}"
