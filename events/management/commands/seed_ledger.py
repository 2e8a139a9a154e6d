from datetime import timedelta

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.utils import timezone

from events.invites import get_or_create_link_invite
from events.models import Event, Participant, SpecialReward, VrCategory
from events.services import (
    EventSetup,
    ParticipantRegistry,
    RewardLedger,
    TeamManager,
    Flat,
)

User = get_user_model()


class Command(BaseCommand):
    help = "Seeds the database with a live demo event: teams, givers, categories and special rewards"

    def add_arguments(self, parser):
        parser.add_argument("--name", default="Demo Day", help="Event name")

    def _user(self, username):
        user, _ = User.objects.get_or_create(username=username, defaults={"email": f"{username}@example.com"})
        user.set_password("password")
        user.save()
        return user

    def handle(self, *args, **options):
        self.stdout.write("🌱 Seeding ledger data...")

        host = self._user("host")
        name = options["name"]

        event = Event.objects.filter(name__iexact=name).first()
        if event is not None:
            self.stdout.write(f"Event already exists: {event.name} (id={event.id})")
            return

        event = EventSetup.create_event(host, name, "Seeded demo event")
        now = timezone.now()
        EventSetup.update_event(
            event.id,
            host,
            start_join_date=now - timedelta(days=2),
            end_join_date=now - timedelta(days=1),
            start_view=now - timedelta(hours=1),
            end_view=now + timedelta(days=1),
            virtual_reward_guest=100,
            virtual_reward_committee=200,
            unit_reward="coin",
            has_committee=True,
        )
        EventSetup.publish(event.id, host)
        self.stdout.write(f"Created Event: {event.name} (id={event.id})")

        for order, label in enumerate(["Idea", "Design", "Tech"]):
            VrCategory.objects.create(event=event, name=label, sort_order=order)
        for label in ["Best Pitch", "People's Choice"]:
            SpecialReward.objects.create(event=event, name=label)

        invite = get_or_create_link_invite(event)
        tokens = {
            Participant.GROUP_PRESENTER: str(invite.presenter_token),
            Participant.GROUP_GUEST: str(invite.guest_token),
            Participant.GROUP_COMMITTEE: str(invite.committee_token),
        }

        teams = []
        for team_name, members in [("Rocket", ["alice", "bob"]), ("Comet", ["carol"])]:
            leader, *rest = [self._user(username) for username in members]
            ParticipantRegistry.join(event.id, leader, token=tokens[Participant.GROUP_PRESENTER])
            team = TeamManager.create(event.id, leader, team_name)
            for member in rest:
                ParticipantRegistry.join(event.id, member, token=tokens[Participant.GROUP_PRESENTER])
                TeamManager.add_member(event.id, team.id, leader, member.id)
            teams.append(team)
            self.stdout.write(f"Created Team: {team.name}")

        guest = self._user("dave")
        ParticipantRegistry.join(event.id, guest, token=tokens[Participant.GROUP_GUEST])
        ParticipantRegistry.join(event.id, self._user("judge"), token=tokens[Participant.GROUP_COMMITTEE])

        snapshot = RewardLedger.give(event.id, teams[0].id, guest, Flat(40))
        self.stdout.write(f"Guest dave used {snapshot.total_used}/{snapshot.total_limit} VR")

        self.stdout.write(self.style.SUCCESS("✅ Seeding Complete!"))
