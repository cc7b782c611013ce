from django.urls import re_path
from .views import product_list_create, product_detail

urlpatterns = [
    # Product endpoints (trailing slash optional)
    re_path(r'^products/?$', product_list_create, name='product-list-create'),
    re_path(r'^products/(?P<pk>\d+)/?$', product_detail, name='product-detail'),
]
