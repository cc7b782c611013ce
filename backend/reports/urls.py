from django.urls import re_path
from . import views

urlpatterns = [
    re_path(r'^dashboard/stats/?$', views.dashboard_stats, name='dashboard-stats'),
]
