from django.urls import path
from .views import register_payment

urlpatterns = [
    path('sites/<uuid:site_id>/payments/new/', register_payment, name='register_payment'),
]
