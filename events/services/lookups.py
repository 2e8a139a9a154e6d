# events/services/lookups.py
"""Row lookups shared by the ledger services. Missing rows raise LedgerErrors."""
from core.exceptions import NotFound, Forbidden, EventNotActive
from events.datetime_utils import is_view_window_open
from events.models import Event, Participant, Team


def get_event(event_id, for_update=False):
    qs = Event.objects.all()
    if for_update:
        qs = qs.select_for_update()
    event = qs.filter(pk=event_id).first()
    if event is None:
        raise NotFound("Event not found")
    return event


def get_participant(event_id, user, for_update=False):
    """Caller's participant row in the event, or None."""
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    qs = Participant.objects.all()
    if for_update:
        qs = qs.select_for_update()
    return qs.filter(event_id=event_id, user=user).first()


def require_participant(event_id, user, for_update=False):
    participant = get_participant(event_id, user, for_update=for_update)
    if participant is None:
        raise Forbidden("You are not a participant in this event")
    return participant


def get_target_participant(event_id, participant_id, for_update=False):
    qs = Participant.objects.all()
    if for_update:
        qs = qs.select_for_update()
    participant = qs.filter(pk=participant_id, event_id=event_id).first()
    if participant is None:
        raise NotFound("Participant not found")
    return participant


def get_team(event_id, team_id, for_update=False, message="Team not found in this event"):
    qs = Team.objects.all()
    if for_update:
        qs = qs.select_for_update()
    team = qs.filter(pk=team_id, event_id=event_id).first()
    if team is None:
        raise NotFound(message)
    return team


def require_active_window(event):
    if not is_view_window_open(event):
        raise EventNotActive("Event is not active")


def require_visible_event(event_id, user):
    """
    Event the caller may read. Drafts are shown to organizers only and
    non-public events to participants only.
    """
    event = get_event(event_id)
    participant = get_participant(event_id, user)
    if not event.is_published:
        if participant is None or participant.event_group != Participant.GROUP_ORGANIZER:
            raise Forbidden("Event is not published")
    elif not event.public_view and participant is None:
        raise Forbidden("You are not a participant in this event")
    return event
