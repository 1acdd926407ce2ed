from django.urls import path
from . import views

app_name = 'invites'

urlpatterns = [
    # Activation (anonymous)
    path('activate/', views.activate, name='activate'),

    # Admin management
    path('', views.invite_codes, name='invite-codes'),
    path('<str:code>/', views.revoke, name='revoke'),
    path('<str:code>/unbind/', views.unbind, name='unbind'),
]
