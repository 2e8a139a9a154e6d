# events/tests/test_teams.py
from core.exceptions import AlreadyExists, AlreadyOnTeam, CapacityReached, Forbidden, InvalidInput
from events.models import (
    Comment,
    EvaluationCriteria,
    EvaluationResult,
    Participant,
    SpecialReward,
    SpecialRewardVote,
    Team,
    TeamReward,
)
from events.services import TeamManager
from events.services.teams import detach_member, dissolve_team
from .base import LedgerTestCase


class TeamCreateTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.presenter = self.make_participant("alice", Participant.GROUP_PRESENTER)

    def test_creator_becomes_leader(self):
        team = TeamManager.create(self.event.id, self.presenter.user, "Rocket")
        self.presenter.refresh_from_db()
        self.assertEqual(self.presenter.team_id, team.id)
        self.assertTrue(self.presenter.is_leader)

    def test_only_presenters_create_teams(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        with self.assertRaises(Forbidden):
            TeamManager.create(self.event.id, guest.user, "Rocket")

    def test_cannot_create_second_team(self):
        TeamManager.create(self.event.id, self.presenter.user, "Rocket")
        with self.assertRaises(AlreadyOnTeam):
            TeamManager.create(self.event.id, self.presenter.user, "Comet")

    def test_name_unique_within_event(self):
        TeamManager.create(self.event.id, self.presenter.user, "Rocket")
        bob = self.make_participant("bob", Participant.GROUP_PRESENTER)
        with self.assertRaises(AlreadyExists):
            TeamManager.create(self.event.id, bob.user, "rocket")

    def test_max_teams(self):
        self.event.max_teams = 1
        self.event.save()
        TeamManager.create(self.event.id, self.presenter.user, "Rocket")
        bob = self.make_participant("bob", Participant.GROUP_PRESENTER)
        with self.assertRaises(CapacityReached):
            TeamManager.create(self.event.id, bob.user, "Comet")

    def test_blank_name_rejected(self):
        with self.assertRaises(InvalidInput):
            TeamManager.create(self.event.id, self.presenter.user, "   ")


class TeamMembershipTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.leader = self.make_participant("leader", Participant.GROUP_PRESENTER)
        self.member = self.make_participant("member", Participant.GROUP_PRESENTER)
        self.team = self.make_team("Rocket", self.leader, self.member)

    def test_leader_adds_member(self):
        newcomer = self.make_participant("newcomer", Participant.GROUP_PRESENTER)
        TeamManager.add_member(self.event.id, self.team.id, self.leader.user, newcomer.user.id)
        newcomer.refresh_from_db()
        self.assertEqual(newcomer.team_id, self.team.id)
        self.assertFalse(newcomer.is_leader)

    def test_non_leader_cannot_add(self):
        newcomer = self.make_participant("newcomer", Participant.GROUP_PRESENTER)
        with self.assertRaises(Forbidden):
            TeamManager.add_member(self.event.id, self.team.id, self.member.user, newcomer.user.id)

    def test_add_rejects_non_presenter_and_taken_presenter(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        with self.assertRaises(InvalidInput):
            TeamManager.add_member(self.event.id, self.team.id, self.leader.user, guest.user.id)

        other_leader = self.make_participant("other", Participant.GROUP_PRESENTER)
        self.make_team("Comet", other_leader)
        with self.assertRaises(AlreadyOnTeam):
            TeamManager.add_member(self.event.id, self.team.id, self.leader.user, other_leader.user.id)

    def test_max_team_members(self):
        self.event.max_team_members = 2
        self.event.save()
        newcomer = self.make_participant("newcomer", Participant.GROUP_PRESENTER)
        with self.assertRaises(CapacityReached):
            TeamManager.add_member(self.event.id, self.team.id, self.leader.user, newcomer.user.id)

    def test_member_leaves(self):
        TeamManager.remove_member(self.event.id, self.team.id, self.member.user, self.member.user.id)
        self.member.refresh_from_db()
        self.assertIsNone(self.member.team_id)
        self.assertTrue(Team.objects.filter(pk=self.team.pk).exists())

    def test_leader_removes_member(self):
        TeamManager.remove_member(self.event.id, self.team.id, self.leader.user, self.member.user.id)
        self.member.refresh_from_db()
        self.assertIsNone(self.member.team_id)

    def test_member_cannot_remove_others(self):
        with self.assertRaises(Forbidden):
            TeamManager.remove_member(self.event.id, self.team.id, self.member.user, self.leader.user.id)

    def test_leader_cannot_leave_non_empty_team(self):
        with self.assertRaises(Forbidden):
            TeamManager.remove_member(self.event.id, self.team.id, self.leader.user, self.leader.user.id)

    def test_sole_leader_leaving_dissolves_team(self):
        TeamManager.remove_member(self.event.id, self.team.id, self.leader.user, self.member.user.id)
        TeamManager.remove_member(self.event.id, self.team.id, self.leader.user, self.leader.user.id)
        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())
        self.leader.refresh_from_db()
        self.assertIsNone(self.leader.team_id)
        self.assertFalse(self.leader.is_leader)

    def test_update_by_leader_or_organizer(self):
        TeamManager.update(self.event.id, self.team.id, self.leader.user, description="Rockets!")
        TeamManager.update(self.event.id, self.team.id, self.organizer_user, name="Rocket Science")
        self.team.refresh_from_db()
        self.assertEqual((self.team.name, self.team.description), ("Rocket Science", "Rockets!"))

        with self.assertRaises(Forbidden):
            TeamManager.update(self.event.id, self.team.id, self.member.user, name="Mine")

    def test_candidates_exclude_presenters_with_team(self):
        free = self.make_participant("free_agent", Participant.GROUP_PRESENTER)
        self.make_participant("guest", Participant.GROUP_GUEST)
        candidates = TeamManager.list_candidates(self.event.id, self.team.id, self.leader.user)
        self.assertEqual([p.id for p in candidates], [free.id])

        filtered = TeamManager.list_candidates(self.event.id, self.team.id, self.leader.user, "nobody")
        self.assertEqual(list(filtered), [])


class TeamCascadeTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.leader = self.make_participant("leader", Participant.GROUP_PRESENTER)
        self.member = self.make_participant("member", Participant.GROUP_PRESENTER)
        self.team = self.make_team("Rocket", self.leader, self.member)

    def test_dissolve_detaches_members_and_clears_rows(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        committee = self.make_participant("judge", Participant.GROUP_COMMITTEE)
        TeamReward.objects.create(event=self.event, team=self.team, giver=guest, reward=10)
        reward = SpecialReward.objects.create(event=self.event, name="Best Pitch")
        SpecialRewardVote.objects.create(reward=reward, committee=committee, team=self.team)
        criteria = EvaluationCriteria.objects.create(event=self.event, name="Idea", max_score=10)
        EvaluationResult.objects.create(
            event=self.event, team=self.team, criteria=criteria, committee=committee, score=7
        )
        Comment.objects.create(event=self.event, team=self.team, user=guest.user, content="Nice")

        TeamManager.dissolve(self.event.id, self.team.id, self.leader.user)

        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())
        for participant in (self.leader, self.member):
            participant.refresh_from_db()
            self.assertIsNone(participant.team_id)
            self.assertFalse(participant.is_leader)
        self.assertFalse(TeamReward.objects.exists())
        self.assertFalse(SpecialRewardVote.objects.exists())
        self.assertFalse(EvaluationResult.objects.exists())
        self.assertFalse(Comment.objects.exists())

    def test_only_leader_or_organizer_dissolves(self):
        with self.assertRaises(Forbidden):
            TeamManager.dissolve(self.event.id, self.team.id, self.member.user)
        TeamManager.dissolve(self.event.id, self.team.id, self.organizer_user)
        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())

    def test_leaderless_team_promotes_earliest_member(self):
        third = self.make_participant("third", Participant.GROUP_PRESENTER, team=self.team)
        Participant.objects.filter(team=self.team).update(is_leader=False)
        self.leader.refresh_from_db()

        detach_member(self.leader)

        self.member.refresh_from_db()
        third.refresh_from_db()
        self.assertTrue(self.member.is_leader)
        self.assertFalse(third.is_leader)

    def test_last_member_leaving_deletes_team(self):
        Participant.objects.filter(pk=self.leader.pk).update(team=None, is_leader=False)
        self.member.refresh_from_db()

        detach_member(self.member)

        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())

    def test_dissolve_team_is_atomic_unit(self):
        dissolve_team(self.team)
        self.assertEqual(Participant.objects.filter(team__isnull=False).count(), 0)
