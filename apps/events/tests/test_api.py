import pytest
from datetime import timedelta
from uuid import uuid4
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.events.models import Event
from apps.events.services import rsvp


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events/"""

    def test_list_upcoming(self, student_client, event, open_event):
        Event.objects.create(
            title='Last week',
            date=timezone.localdate() - timedelta(days=7),
            organizer_user=event.organizer_user,
            category='fellowship',
        )

        response = student_client.get(reverse('events:event-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [e['title'] for e in response.data['results']] == ['Friday Worship', 'Prayer Meeting']

    def test_filter_category(self, student_client, event, open_event):
        response = student_client.get(reverse('events:event-list'), {'category': 'prayer'})

        assert [e['title'] for e in response.data['results']] == ['Prayer Meeting']

    def test_filter_my_events(self, student_client, student_a, event, open_event):
        rsvp(event_id=open_event.id, user_id=student_a.id)

        response = student_client.get(reverse('events:event-list'), {'status': 'my_events'})

        assert [e['title'] for e in response.data['results']] == ['Prayer Meeting']

    def test_invalid_filter(self, student_client):
        response = student_client.get(reverse('events:event-list'), {'time_range': 'year'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('events:event-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestEventDetail:

    def test_retrieve(self, student_client, student_a, event):
        rsvp(event_id=event.id, user_id=student_a.id)
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = student_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['title'] == 'Friday Worship'
        assert response.data['attendees'] == [str(student_a.id)]
        assert response.data['is_full'] is True
        assert response.data['rsvp_status'] == 'registered'

    def test_retrieve_unknown(self, student_client):
        url = reverse('events:event-detail', kwargs={'pk': uuid4()})

        response = student_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestEventWrite:

    def _payload(self, **overrides):
        data = {
            'title': 'Campus Blending',
            'date': (timezone.localdate() + timedelta(days=4)).isoformat(),
            'category': 'blending',
            'max_attendees': 30,
        }
        data.update(overrides)
        return data

    def test_core_member_creates(self, organizer_client, organizer):
        response = organizer_client.post(reverse('events:event-list'), self._payload())

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['organizer'] == 'Organizer'
        assert response.data['attendees'] == []
        assert Event.objects.get(id=response.data['id']).organizer_user == organizer

    def test_student_cannot_create(self, student_client):
        response = student_client.post(reverse('events:event-list'), self._payload())

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Event.objects.count() == 0

    def test_invalid_capacity(self, organizer_client):
        response = organizer_client.post(reverse('events:event-list'), self._payload(max_attendees=0))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_organizer_edits(self, organizer_client, event):
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = organizer_client.patch(url, {'location': 'Main Hall'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['location'] == 'Main Hall'

    def test_edit_membership_rejected(self, organizer_client, event):
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = organizer_client.patch(url, {'attendees': ['x']}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        event.refresh_from_db()
        assert event.attendees == []

    def test_edit_capacity_below_attendees_rejected(self, organizer_client, event):
        Event.objects.filter(id=event.id).update(max_attendees=3, attendees=['A', 'B', 'C'])
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = organizer_client.patch(url, {'max_attendees': 2}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert '3 registered attendees' in response.data['error']
        event.refresh_from_db()
        assert event.max_attendees == 3

    def test_edit_capacity_promotes_waiting_list(self, organizer_client, event):
        rsvp(event_id=event.id, user_id='A')
        rsvp(event_id=event.id, user_id='B')
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = organizer_client.patch(url, {'max_attendees': 2}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['attendees'] == ['A', 'B']
        assert response.data['waiting_list'] == []

    def test_other_core_member_cannot_edit(self, other_core_client, event):
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = other_core_client.patch(url, {'title': 'Hijacked'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_put_not_allowed(self, organizer_client, event):
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = organizer_client.put(url, self._payload())

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_admin_deletes(self, admin_client, event):
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Event.objects.filter(id=event.id).exists()

    def test_student_cannot_delete(self, student_client, event):
        url = reverse('events:event-detail', kwargs={'pk': event.id})

        response = student_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestRsvpEndpoints:

    def test_rsvp_then_waitlist_then_promotion(self, event, student_client, student_b_client, student_b):
        response = student_client.post(reverse('events:event-rsvp', kwargs={'pk': event.id}))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'registered'

        response = student_b_client.post(reverse('events:event-rsvp', kwargs={'pk': event.id}))
        assert response.data['status'] == 'waiting_list'

        response = student_client.post(reverse('events:event-cancel', kwargs={'pk': event.id}))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['promoted_user_id'] == str(student_b.id)

        response = student_b_client.get(reverse('events:event-rsvp-status', kwargs={'pk': event.id}))
        assert response.data['status'] == 'registered'

    def test_rsvp_unknown_event(self, student_client):
        url = reverse('events:event-rsvp', kwargs={'pk': uuid4()})

        response = student_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cancel_when_not_registered(self, student_client, event):
        url = reverse('events:event-cancel', kwargs={'pk': event.id})

        response = student_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['promoted_user_id'] is None

    def test_rsvp_requires_authentication(self, api_client, event):
        url = reverse('events:event-rsvp', kwargs={'pk': event.id})

        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestMyEvents:

    def test_my_events(self, organizer_client, event, open_event):
        Event.objects.filter(id=open_event.id).update(is_published=False)

        response = organizer_client.get(reverse('events:my-events'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_my_rsvps(self, student_client, student_a, event, open_event):
        rsvp(event_id=event.id, user_id='someone-else')
        rsvp(event_id=event.id, user_id=student_a.id)

        response = student_client.get(reverse('events:my-rsvps'))

        assert response.status_code == status.HTTP_200_OK
        assert [e['title'] for e in response.data] == ['Friday Worship']
        assert response.data[0]['waiting_list_count'] == 1
