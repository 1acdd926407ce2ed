from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),

    # Roles
    path('upgrade-role/', views.upgrade, name='upgrade-role'),
    path('role-history/', views.role_history, name='role-history'),
    path('users/<uuid:pk>/role/', views.set_role, name='set-role'),
]
