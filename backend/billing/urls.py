from django.urls import re_path
from .views import bill_list_create, bill_detail

urlpatterns = [
    # Bill endpoints (trailing slash optional)
    re_path(r'^bills/?$', bill_list_create, name='bill-list-create'),
    re_path(r'^bills/(?P<pk>\d+)/?$', bill_detail, name='bill-detail'),
]
