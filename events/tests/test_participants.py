# events/tests/test_participants.py
from django.contrib.auth import get_user_model
from django.test import override_settings

from core.exceptions import (
    AlreadyJoined,
    Forbidden,
    InvalidInput,
    InvalidRole,
    InvalidSignature,
    InvalidToken,
    NotFound,
)
from events.invites import get_or_create_link_invite, sign_invite, verify_invite
from events.models import (
    Event,
    Participant,
    SpecialReward,
    SpecialRewardVote,
    Team,
    TeamReward,
)
from events.services import ParticipantRegistry
from .base import LedgerTestCase

User = get_user_model()


@override_settings(INVITE_SECRET="test-secret")
class JoinTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.user = User.objects.create_user(username="newbie", password="pass123")
        self.link_invite = get_or_create_link_invite(self.event)

    def test_join_with_link_token_sets_role_budget(self):
        participant = ParticipantRegistry.join(
            self.event.id, self.user, token=str(self.link_invite.guest_token)
        )
        self.assertEqual(participant.event_group, Participant.GROUP_GUEST)
        self.assertEqual(participant.virtual_reward, 100)

    def test_committee_and_presenter_budgets(self):
        participant = ParticipantRegistry.join(
            self.event.id, self.user, token=str(self.link_invite.committee_token)
        )
        self.assertEqual(participant.virtual_reward, 200)

        other = User.objects.create_user(username="speaker", password="pass123")
        presenter = ParticipantRegistry.join(
            self.event.id, other, token=str(self.link_invite.presenter_token)
        )
        self.assertEqual(presenter.event_group, Participant.GROUP_PRESENTER)
        self.assertEqual(presenter.virtual_reward, 0)

    def test_unknown_token(self):
        with self.assertRaises(InvalidToken):
            ParticipantRegistry.join(self.event.id, self.user, token="not-a-token")

    def test_join_with_signature(self):
        signature = sign_invite(self.event.id, self.user.id, "committee")
        participant = ParticipantRegistry.join(
            self.event.id, self.user, role="committee", signature=signature
        )
        self.assertEqual(participant.event_group, Participant.GROUP_COMMITTEE)

    def test_signature_is_bound_to_user_and_role(self):
        signature = sign_invite(self.event.id, self.user.id, "guest")
        self.assertTrue(verify_invite(self.event.id, self.user.id, "guest", signature))
        self.assertFalse(verify_invite(self.event.id, self.user.id, "committee", signature))
        self.assertFalse(verify_invite(self.event.id, self.user.id + 1, "guest", signature))

        with self.assertRaises(InvalidSignature):
            ParticipantRegistry.join(self.event.id, self.user, role="committee", signature=signature)

    def test_invalid_role(self):
        with self.assertRaises(InvalidRole):
            ParticipantRegistry.join(self.event.id, self.user, role="organizer", signature="x")

    def test_already_joined(self):
        token = str(self.link_invite.guest_token)
        ParticipantRegistry.join(self.event.id, self.user, token=token)
        with self.assertRaises(AlreadyJoined):
            ParticipantRegistry.join(self.event.id, self.user, token=token)

    def test_draft_event_cannot_be_joined(self):
        draft = Event.objects.create(name="Draft")
        invite = get_or_create_link_invite(draft)
        with self.assertRaises(NotFound):
            ParticipantRegistry.join(draft.id, self.user, token=str(invite.guest_token))


class RoleChangeTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.presenter = self.make_participant("presenter", Participant.GROUP_PRESENTER)
        self.teammate = self.make_participant("teammate", Participant.GROUP_PRESENTER)
        self.team = self.make_team("Rocket", self.presenter, self.teammate)

    def test_leader_role_change_deletes_team(self):
        ParticipantRegistry.set_role(self.event.id, self.organizer_user, self.presenter.id, "GUEST")

        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())
        self.teammate.refresh_from_db()
        self.assertIsNone(self.teammate.team_id)
        self.presenter.refresh_from_db()
        self.assertEqual(self.presenter.event_group, Participant.GROUP_GUEST)
        self.assertEqual(self.presenter.virtual_reward, 100)
        self.assertIsNone(self.presenter.team_id)

    def test_sole_leader_role_change_deletes_team(self):
        solo = self.make_participant("solo", Participant.GROUP_PRESENTER)
        solo_team = self.make_team("Solo", solo)
        ParticipantRegistry.set_role(self.event.id, self.organizer_user, solo.id, "guest")
        self.assertFalse(Team.objects.filter(pk=solo_team.pk).exists())

    def test_member_role_change_keeps_team(self):
        ParticipantRegistry.set_role(self.event.id, self.organizer_user, self.teammate.id, "COMMITTEE")
        self.assertTrue(Team.objects.filter(pk=self.team.pk).exists())
        self.presenter.refresh_from_db()
        self.assertTrue(self.presenter.is_leader)

    def test_role_change_purges_rewards_and_votes(self):
        judge = self.make_participant("judge", Participant.GROUP_COMMITTEE)
        TeamReward.objects.create(event=self.event, team=self.team, giver=judge, reward=50)
        reward = SpecialReward.objects.create(event=self.event, name="Best Pitch")
        SpecialRewardVote.objects.create(reward=reward, committee=judge, team=self.team)

        ParticipantRegistry.set_role(self.event.id, self.organizer_user, judge.id, "GUEST")

        judge.refresh_from_db()
        self.assertEqual(judge.virtual_reward, 100)
        self.assertFalse(TeamReward.objects.filter(giver=judge).exists())
        self.assertFalse(SpecialRewardVote.objects.filter(committee=judge).exists())

    def test_same_role_is_untouched(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        TeamReward.objects.create(event=self.event, team=self.team, giver=guest, reward=30)
        ParticipantRegistry.set_role(self.event.id, self.organizer_user, guest.id, "GUEST")
        self.assertTrue(TeamReward.objects.filter(giver=guest).exists())

    def test_only_organizers_change_roles(self):
        with self.assertRaises(Forbidden):
            ParticipantRegistry.set_role(self.event.id, self.teammate.user, self.presenter.id, "GUEST")

    def test_organizer_group_needs_leader(self):
        co_organizer = self.make_participant("co", Participant.GROUP_ORGANIZER)
        with self.assertRaises(Forbidden):
            ParticipantRegistry.set_role(self.event.id, co_organizer.user, self.teammate.id, "ORGANIZER")

        ParticipantRegistry.set_role(self.event.id, self.organizer_user, self.teammate.id, "ORGANIZER")
        self.teammate.refresh_from_db()
        self.assertEqual(self.teammate.event_group, Participant.GROUP_ORGANIZER)

    def test_organizer_leader_cannot_change_self(self):
        with self.assertRaises(Forbidden):
            ParticipantRegistry.set_role(self.event.id, self.organizer_user, self.organizer.id, "GUEST")

    def test_unknown_role(self):
        with self.assertRaises(InvalidRole):
            ParticipantRegistry.set_role(self.event.id, self.organizer_user, self.teammate.id, "JUDGE")


class LeaderAndBudgetTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.leader = self.make_participant("leader", Participant.GROUP_PRESENTER)
        self.member = self.make_participant("member", Participant.GROUP_PRESENTER)
        self.team = self.make_team("Rocket", self.leader, self.member)

    def test_promoting_member_demotes_previous_leader(self):
        ParticipantRegistry.set_leader(self.event.id, self.organizer_user, self.member.id, True)
        self.leader.refresh_from_db()
        self.member.refresh_from_db()
        self.assertFalse(self.leader.is_leader)
        self.assertTrue(self.member.is_leader)

    def test_leader_flag_requires_team(self):
        loner = self.make_participant("loner", Participant.GROUP_PRESENTER)
        with self.assertRaises(InvalidInput):
            ParticipantRegistry.set_leader(self.event.id, self.organizer_user, loner.id, True)

    def test_organizer_leader_flag_is_protected(self):
        co_organizer = self.make_participant("co", Participant.GROUP_ORGANIZER)
        with self.assertRaises(Forbidden):
            ParticipantRegistry.set_leader(self.event.id, self.organizer_user, co_organizer.id, True)

    def test_budget_override_clamps_at_zero(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        ParticipantRegistry.set_virtual_reward(self.event.id, self.organizer_user, guest.id, -10)
        guest.refresh_from_db()
        self.assertEqual(guest.virtual_reward, 0)


class RemovalTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.leader = self.make_participant("leader", Participant.GROUP_PRESENTER)
        self.member = self.make_participant("member", Participant.GROUP_PRESENTER)
        self.team = self.make_team("Rocket", self.leader, self.member)

    def test_removing_leader_dissolves_team(self):
        ParticipantRegistry.remove(self.event.id, self.organizer_user, self.leader.id)
        self.assertFalse(Participant.objects.filter(pk=self.leader.pk).exists())
        self.assertFalse(Team.objects.filter(pk=self.team.pk).exists())
        self.member.refresh_from_db()
        self.assertIsNone(self.member.team_id)

    def test_removing_member_keeps_team(self):
        ParticipantRegistry.remove(self.event.id, self.organizer_user, self.member.id)
        self.assertTrue(Team.objects.filter(pk=self.team.pk).exists())

    def test_removing_giver_purges_rows(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        TeamReward.objects.create(event=self.event, team=self.team, giver=guest, reward=30)
        ParticipantRegistry.remove(self.event.id, self.organizer_user, guest.id)
        self.assertFalse(TeamReward.objects.exists())

    def test_organizer_removal_rules(self):
        co_organizer = self.make_participant("co", Participant.GROUP_ORGANIZER)
        other = self.make_participant("co2", Participant.GROUP_ORGANIZER)
        with self.assertRaises(Forbidden):
            ParticipantRegistry.remove(self.event.id, co_organizer.user, other.id)
        with self.assertRaises(Forbidden):
            ParticipantRegistry.remove(self.event.id, self.organizer_user, self.organizer.id)
        ParticipantRegistry.remove(self.event.id, self.organizer_user, other.id)

    def test_missing_participant(self):
        with self.assertRaises(NotFound):
            ParticipantRegistry.remove(self.event.id, self.organizer_user, 999999)

    def test_leave_event(self):
        ParticipantRegistry.leave_event(self.event.id, self.member.user)
        self.assertFalse(Participant.objects.filter(pk=self.member.pk).exists())

        with self.assertRaises(Forbidden):
            ParticipantRegistry.leave_event(self.event.id, self.organizer_user)


class ParticipantListTest(LedgerTestCase):

    def test_filter_by_group(self):
        self.make_participant("guest", Participant.GROUP_GUEST)
        self.make_participant("judge", Participant.GROUP_COMMITTEE)

        everyone = ParticipantRegistry.list_participants(self.event.id, self.organizer_user)
        self.assertEqual(everyone.count(), 3)
        guests = ParticipantRegistry.list_participants(self.event.id, self.organizer_user, "guest")
        self.assertEqual([p.user.username for p in guests], ["guest"])

    def test_organizers_only(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        with self.assertRaises(Forbidden):
            ParticipantRegistry.list_participants(self.event.id, guest.user)
