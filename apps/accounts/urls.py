from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # Current user
    path('me/', views.get_current_user, name='current-user'),
    path('me/password/', views.change_password, name='change-password'),
]
