from django.urls import path

from server.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('', views.index, name='index'),
    path('register', views.register, name='register'),
    path('log-in', views.log_in, name='log_in'),
    path('log-out', views.log_out, name='log_out'),
    path('profile', views.profile, name='profile'),
]
