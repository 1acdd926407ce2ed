from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'events'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.EventViewSet, basename='event')

urlpatterns = [
    # Event ViewSet routes
    # GET    /api/events/              - List events (category, time_range, status)
    # POST   /api/events/              - Create event (core member, admin)
    # GET    /api/events/{id}/         - Get event details
    # PATCH  /api/events/{id}/         - Edit event (organizer, admin)
    # DELETE /api/events/{id}/         - Delete event (organizer, admin)

    # Registration actions
    # POST   /api/events/{id}/rsvp/    - RSVP (waiting list when full)
    # POST   /api/events/{id}/cancel/  - Cancel RSVP
    # GET    /api/events/{id}/status/  - Current user's RSVP status

    # Additional endpoints
    path('mine/', views.my_events, name='my-events'),
    path('my-rsvps/', views.my_rsvps, name='my-rsvps'),

    # Include router URLs
    path('', include(router.urls)),
]
