"""
URL routing for accounts app.
"""
from django.urls import path

from .auth import login, logout, me

urlpatterns = [
    path('login/', login, name='login'),
    path('logout/', logout, name='logout'),
    path('me/', me, name='me'),
]
