from django.urls import path
from .views import company_settings, company_settings_api

urlpatterns = [
    path('company/', company_settings, name='company_settings'),
    path('api/company/', company_settings_api, name='company_settings_api'),
]
