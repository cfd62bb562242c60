from django.urls import path
from .views import (
    dashboard,
    select_project,
    select_site,
    project_create,
    project_edit,
    project_delete,
    site_create,
    site_edit,
    site_delete,
    project_list_api,
    site_update_api,
    project_export,
)

urlpatterns = [
    path('', dashboard, name='dashboard'),

    # Projects
    path('projects/new/', project_create, name='project_create'),
    path('projects/<uuid:project_id>/select/', select_project, name='project_select'),
    path('projects/<uuid:project_id>/edit/', project_edit, name='project_edit'),
    path('projects/<uuid:project_id>/delete/', project_delete, name='project_delete'),
    path('projects/<uuid:project_id>/export/', project_export, name='project_export'),

    # Sites
    path('projects/<uuid:project_id>/sites/new/', site_create, name='site_create'),
    path('sites/<uuid:site_id>/select/', select_site, name='site_select'),
    path('sites/<uuid:site_id>/edit/', site_edit, name='site_edit'),
    path('sites/<uuid:site_id>/delete/', site_delete, name='site_delete'),

    # API
    path('api/projects/', project_list_api, name='project_list_api'),
    path('api/sites/<uuid:site_id>/', site_update_api, name='site_update_api'),
]
