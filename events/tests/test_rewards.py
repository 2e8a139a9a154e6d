# events/tests/test_rewards.py
from unittest import mock

from django.db.models.query import QuerySet

from core.exceptions import (
    CategoryNotFound,
    EventNotActive,
    ExceedsTeamCap,
    Forbidden,
    InsufficientBalance,
    InvalidInput,
    NotFound,
)
from events.models import Event, Participant, TeamReward, TeamRewardCategory, VrCategory
from events.services import RewardLedger, Flat, Categorized, build_allocation
from .base import LedgerTestCase


class BuildAllocationTest(LedgerTestCase):

    def test_flat_amount_is_truncated_and_clamped(self):
        self.assertEqual(build_allocation(amount=7.9), Flat(7))
        self.assertEqual(build_allocation(amount=-5), Flat(0))

    def test_repeated_categories_are_summed(self):
        allocation = build_allocation(categories=[
            {"categoryId": 1, "amount": 10},
            {"categoryId": 2, "amount": 5},
            {"categoryId": 1, "amount": 3},
        ])
        self.assertEqual(allocation, Categorized({1: 13, 2: 5}))
        self.assertEqual(allocation.total, 18)

    def test_both_or_neither_mode_rejected(self):
        with self.assertRaises(InvalidInput):
            build_allocation(amount=10, categories=[{"categoryId": 1, "amount": 1}])
        with self.assertRaises(InvalidInput):
            build_allocation()

    def test_non_finite_amounts_rejected(self):
        for value in ("inf", float("-inf"), "nan", "ten"):
            with self.assertRaises(InvalidInput):
                build_allocation(amount=value)
        with self.assertRaises(InvalidInput):
            build_allocation(categories=[{"categoryId": 1, "amount": float("inf")}])


class RewardLedgerTest(LedgerTestCase):

    def setUp(self):
        super().setUp()
        self.guest = self.make_participant("guest", Participant.GROUP_GUEST)
        self.team_a = self.make_team("Team A", self.make_participant("p1", Participant.GROUP_PRESENTER))
        self.team_b = self.make_team("Team B", self.make_participant("p2", Participant.GROUP_PRESENTER))

    def give(self, team, allocation, participant=None):
        participant = participant or self.guest
        return RewardLedger.give(self.event.id, team.id, participant.user, allocation)

    def test_budget_scenario(self):
        snapshot = self.give(self.team_a, Flat(60))
        self.assertEqual((snapshot.total_limit, snapshot.total_used), (100, 60))

        with self.assertRaises(InsufficientBalance):
            self.give(self.team_b, Flat(50))
        self.assertFalse(TeamReward.objects.filter(team=self.team_b).exists())

        snapshot = RewardLedger.reset(self.event.id, self.team_a.id, self.guest.user)
        self.assertEqual(snapshot.total_used, 0)
        self.assertFalse(snapshot.noop)

        snapshot = self.give(self.team_b, Flat(50))
        self.assertEqual(snapshot.total_used, 50)

    def test_give_reset_give_reproduces_totals(self):
        first = self.give(self.team_a, Flat(40))
        RewardLedger.reset(self.event.id, self.team_a.id, self.guest.user)
        again = self.give(self.team_a, Flat(40))
        self.assertEqual(first, again)
        self.assertEqual(TeamReward.objects.get(team=self.team_a, giver=self.guest).reward, 40)

    def test_flat_give_replaces_existing_amount_for_same_team(self):
        self.give(self.team_a, Flat(90))
        snapshot = self.give(self.team_a, Flat(100))
        self.assertEqual(snapshot.total_used, 100)
        self.assertEqual(TeamReward.objects.filter(giver=self.guest).count(), 1)

    def test_zero_flat_amount_deletes_row(self):
        self.give(self.team_a, Flat(30))
        snapshot = self.give(self.team_a, Flat(0))
        self.assertEqual(snapshot.total_used, 0)
        self.assertFalse(TeamReward.objects.filter(giver=self.guest).exists())

    def test_reset_with_nothing_given_is_noop(self):
        snapshot = RewardLedger.reset(self.event.id, self.team_a.id, self.guest.user)
        self.assertTrue(snapshot.noop)
        self.assertEqual(snapshot.as_dict()["message"], "No VR to refund")

    def test_categorized_and_flat_modes_are_exclusive(self):
        design = VrCategory.objects.create(event=self.event, name="Design")
        tech = VrCategory.objects.create(event=self.event, name="Tech")

        self.give(self.team_a, Flat(20))
        snapshot = self.give(self.team_a, Categorized({design.id: 10, tech.id: 15}))
        self.assertEqual(snapshot.total_used, 25)
        self.assertFalse(TeamReward.objects.filter(team=self.team_a, giver=self.guest).exists())
        self.assertEqual(TeamRewardCategory.objects.filter(team=self.team_a, giver=self.guest).count(), 2)

        snapshot = self.give(self.team_a, Flat(5))
        self.assertEqual(snapshot.total_used, 5)
        self.assertFalse(TeamRewardCategory.objects.filter(team=self.team_a, giver=self.guest).exists())

    def test_zero_category_amounts_are_dropped(self):
        design = VrCategory.objects.create(event=self.event, name="Design")
        tech = VrCategory.objects.create(event=self.event, name="Tech")

        self.give(self.team_a, Categorized({design.id: 10, tech.id: 0}))
        rows = TeamRewardCategory.objects.filter(team=self.team_a, giver=self.guest)
        self.assertEqual(list(rows.values_list("category_id", flat=True)), [design.id])

    def test_flat_check_counts_existing_categorized_on_same_team(self):
        design = VrCategory.objects.create(event=self.event, name="Design")
        self.give(self.team_a, Categorized({design.id: 60}))

        with self.assertRaises(InsufficientBalance):
            self.give(self.team_a, Flat(50))
        # Nothing changed
        self.assertEqual(TeamRewardCategory.objects.get(team=self.team_a).amount, 60)

    def test_category_from_another_event_is_rejected(self):
        other = Event.objects.create(name="Other Event")
        foreign = VrCategory.objects.create(event=other, name="Foreign")
        with self.assertRaises(CategoryNotFound):
            self.give(self.team_a, Categorized({foreign.id: 10}))

    def test_team_cap_is_disabled_by_default(self):
        snapshot = self.give(self.team_a, Flat(90))
        self.assertEqual(snapshot.total_used, 90)

    def test_team_cap_applies_per_role_when_enabled(self):
        self.event.vr_team_cap_enabled = True
        self.event.vr_team_cap_guest = 30
        self.event.save()

        with self.assertRaises(ExceedsTeamCap):
            self.give(self.team_a, Flat(31))
        snapshot = self.give(self.team_a, Flat(30))
        self.assertEqual(snapshot.total_used, 30)

    def test_sum_never_exceeds_budget(self):
        committee = self.make_participant("committee", Participant.GROUP_COMMITTEE)
        self.give(self.team_a, Flat(150), participant=committee)
        with self.assertRaises(InsufficientBalance):
            self.give(self.team_b, Flat(51), participant=committee)
        self.give(self.team_b, Flat(50), participant=committee)

        total = sum(TeamReward.objects.filter(giver=committee).values_list("reward", flat=True))
        self.assertEqual(total, committee.virtual_reward)

    def test_only_guests_and_committee_can_give(self):
        presenter = self.team_a.members.first()
        with self.assertRaises(Forbidden):
            self.give(self.team_b, Flat(10), participant=presenter)
        with self.assertRaises(Forbidden):
            self.give(self.team_b, Flat(10), participant=self.organizer)

    def test_team_must_belong_to_event(self):
        other = Event.objects.create(name="Other Event")
        foreign_team = self.make_team("Foreign", event=other)
        with self.assertRaises(NotFound):
            self.give(foreign_team, Flat(10))

    def test_outside_active_window(self):
        self.give(self.team_a, Flat(10))
        self.close_window()
        with self.assertRaises(EventNotActive):
            self.give(self.team_a, Flat(20))
        with self.assertRaises(EventNotActive):
            RewardLedger.reset(self.event.id, self.team_a.id, self.guest.user)
        self.assertEqual(TeamReward.objects.get(team=self.team_a).reward, 10)

    def test_event_without_window_is_not_active(self):
        self.event.start_view = None
        self.event.save()
        with self.assertRaises(EventNotActive):
            self.give(self.team_a, Flat(10))

    def test_giver_row_is_locked(self):
        original = QuerySet.select_for_update
        with mock.patch.object(QuerySet, "select_for_update", autospec=True, side_effect=original) as locked:
            self.give(self.team_a, Flat(10))
        self.assertTrue(any(call.args[0].model is Participant for call in locked.call_args_list))

    def test_budget_breakdown(self):
        design = VrCategory.objects.create(event=self.event, name="Design")
        self.give(self.team_a, Flat(20))
        self.give(self.team_b, Categorized({design.id: 15}))

        snapshot, teams = RewardLedger.budget(self.event.id, self.guest.user)
        self.assertEqual(snapshot.total_used, 35)
        self.assertEqual(snapshot.remaining, 65)
        by_team = {entry["teamId"]: entry for entry in teams}
        self.assertEqual(by_team[self.team_a.id]["amount"], 20)
        self.assertEqual(by_team[self.team_b.id]["categories"], [{"categoryId": design.id, "amount": 15}])
