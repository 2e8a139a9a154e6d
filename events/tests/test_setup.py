# events/tests/test_setup.py
from datetime import timedelta
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from core.exceptions import AlreadyExists, Forbidden, InvalidInput, InvalidRole, NotFound
from events.datetime_utils import is_view_window_open, validate_windows
from events.invites import verify_invite
from events.models import Event, LinkInvite, Participant, VrCategory
from events.services import EventSetup
from events.state_machine import can_transition
from .base import LedgerTestCase

User = get_user_model()


class EventCreateTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username="host", password="pass123")

    def test_creator_is_organizer_leader(self):
        event = EventSetup.create_event(self.user, "Hack Night")
        self.assertEqual(event.status, Event.STATUS_DRAFT)
        organizer = Participant.objects.get(event=event, user=self.user)
        self.assertTrue(organizer.is_organizer_leader)
        self.assertTrue(LinkInvite.objects.filter(event=event).exists())

    def test_name_is_case_insensitive_unique(self):
        EventSetup.create_event(self.user, "Hack Night")
        with self.assertRaises(AlreadyExists):
            EventSetup.create_event(self.user, "hack night")

    @override_settings(VR_TEAM_CAP_DEFAULT_ENABLED=True)
    def test_team_cap_default_from_settings(self):
        event = EventSetup.create_event(self.user, "Capped")
        self.assertTrue(event.vr_team_cap_enabled)


class EventConfigTest(LedgerTestCase):

    def test_update_budgets(self):
        event = EventSetup.update_event(self.event.id, self.organizer_user, virtual_reward_guest=250)
        self.assertEqual(event.virtual_reward_guest, 250)

    def test_windows_validated_against_stored_values(self):
        start_view = self.event.start_view
        with self.assertRaises(InvalidInput):
            EventSetup.update_event(
                self.event.id,
                self.organizer_user,
                start_join_date=start_view - timedelta(days=1),
                end_join_date=start_view + timedelta(minutes=5),
            )
        with self.assertRaises(InvalidInput):
            EventSetup.update_event(
                self.event.id, self.organizer_user, end_view=start_view - timedelta(minutes=1)
            )

    def test_negative_budget_rejected(self):
        with self.assertRaises(InvalidInput):
            EventSetup.update_event(self.event.id, self.organizer_user, virtual_reward_committee=-1)

    def test_non_organizer_cannot_update(self):
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        with self.assertRaises(Forbidden):
            EventSetup.update_event(self.event.id, guest.user, name="Mine")

    def test_publish_requires_organizer_leader(self):
        draft = EventSetup.create_event(self.organizer_user, "Next Edition")
        co_organizer = self.make_participant("co", Participant.GROUP_ORGANIZER, event=draft)
        with self.assertRaises(Forbidden):
            EventSetup.publish(draft.id, co_organizer.user)

        event = EventSetup.publish(draft.id, self.organizer_user)
        self.assertEqual(event.status, Event.STATUS_PUBLISHED)

    def test_categories_crud(self):
        category = EventSetup.create_category(self.event.id, self.organizer_user, "Design", sort_order=2)
        EventSetup.update_category(self.event.id, self.organizer_user, category.id, name="UX")
        self.assertEqual(VrCategory.objects.get(pk=category.pk).name, "UX")

        EventSetup.delete_category(self.event.id, self.organizer_user, category.id)
        with self.assertRaises(NotFound):
            EventSetup.delete_category(self.event.id, self.organizer_user, category.id)

    def test_special_rewards_crud(self):
        reward = EventSetup.create_special_reward(self.event.id, self.organizer_user, "Best Pitch")
        reward = EventSetup.update_special_reward(
            self.event.id, self.organizer_user, reward.id, description="Most convincing"
        )
        self.assertEqual(reward.description, "Most convincing")
        EventSetup.delete_special_reward(self.event.id, self.organizer_user, reward.id)

    def test_criteria_validation(self):
        with self.assertRaises(InvalidInput):
            EventSetup.create_criteria(self.event.id, self.organizer_user, "Idea", max_score=0)
        with self.assertRaises(InvalidInput):
            EventSetup.create_criteria(
                self.event.id, self.organizer_user, "Idea", max_score=10, weight_percentage=120
            )
        criteria = EventSetup.create_criteria(self.event.id, self.organizer_user, "Idea", max_score=10)
        criteria = EventSetup.update_criteria(self.event.id, self.organizer_user, criteria.id, max_score=20)
        self.assertEqual(criteria.max_score, 20)

    def test_criteria_visible_to_committee_not_guests(self):
        EventSetup.create_criteria(self.event.id, self.organizer_user, "Idea", max_score=10)
        committee = self.make_participant("judge", Participant.GROUP_COMMITTEE)
        guest = self.make_participant("guest", Participant.GROUP_GUEST)
        self.assertEqual(EventSetup.list_criteria(self.event.id, committee.user).count(), 1)
        with self.assertRaises(Forbidden):
            EventSetup.list_criteria(self.event.id, guest.user)

    @override_settings(INVITE_SECRET="test-secret")
    def test_sign_invite(self):
        invitee = User.objects.create_user(username="invitee", password="pass123")
        signature = EventSetup.sign_invite(self.event.id, self.organizer_user, invitee.id, "Guest")
        self.assertTrue(verify_invite(self.event.id, invitee.id, "guest", signature))

        with self.assertRaises(InvalidRole):
            EventSetup.sign_invite(self.event.id, self.organizer_user, invitee.id, "organizer")

    def test_delete_event_by_organizer_leader(self):
        co_organizer = self.make_participant("co", Participant.GROUP_ORGANIZER)
        with self.assertRaises(Forbidden):
            EventSetup.delete_event(self.event.id, co_organizer.user)

        EventSetup.delete_event(self.event.id, self.organizer_user)
        self.assertFalse(Event.objects.filter(pk=self.event.pk).exists())
        self.assertFalse(Participant.objects.exists())
        with self.assertRaises(NotFound):
            EventSetup.delete_event(self.event.id, self.organizer_user)

    def test_invite_tokens(self):
        tokens = EventSetup.invite_tokens(self.event.id, self.organizer_user)
        self.assertEqual(set(tokens), {"presenter", "guest", "committee"})


class WindowAndStateTest(TestCase):

    def test_validate_windows(self):
        now = timezone.now()
        self.assertIsNone(validate_windows(now, now + timedelta(hours=1), now - timedelta(days=2), now - timedelta(days=1)))
        self.assertEqual(
            validate_windows(now + timedelta(hours=1), now, None, None),
            "View period invalid: start after end",
        )
        self.assertEqual(
            validate_windows(now, now + timedelta(hours=1), now - timedelta(days=1), now),
            "Submission end must be before event start",
        )

    def test_view_window_needs_both_bounds(self):
        event = Event(name="Open", start_view=timezone.now() - timedelta(hours=1))
        self.assertFalse(is_view_window_open(event))
        event.end_view = timezone.now() + timedelta(hours=1)
        self.assertTrue(is_view_window_open(event))

    def test_published_is_terminal(self):
        event = Event(name="Draft")
        self.assertEqual(can_transition(event, Event.STATUS_PUBLISHED), (True, ""))
        event.status = Event.STATUS_PUBLISHED
        allowed, _ = can_transition(event, Event.STATUS_DRAFT)
        self.assertFalse(allowed)


class SeedCommandTest(TestCase):

    def test_seed_ledger_builds_live_event(self):
        out = StringIO()
        call_command("seed_ledger", stdout=out)

        event = Event.objects.get(name="Demo Day")
        self.assertEqual(event.status, Event.STATUS_PUBLISHED)
        self.assertEqual(event.teams.count(), 2)
        self.assertIn("40/100", out.getvalue())

        # Second run is a no-op
        call_command("seed_ledger", stdout=StringIO())
        self.assertEqual(Event.objects.filter(name="Demo Day").count(), 1)
