from django.urls import path
from .views import project_summary_api, site_report_api

urlpatterns = [
    path('api/projects/<uuid:project_id>/summary/', project_summary_api, name='project_summary_api'),
    path('api/sites/<uuid:site_id>/report/', site_report_api, name='site_report_api'),
]
