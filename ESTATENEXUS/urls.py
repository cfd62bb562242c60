"""
URL configuration for the ESTATENEXUS project.

Each app ships its own ``urlpatterns``; they are all mounted at the root.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('PROJECTS.urls')),
    path('', include('SALES.urls')),
    path('', include('COMPANY.urls')),
    path('', include('INSIGHTS.urls')),
]
