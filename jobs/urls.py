# jobs/urls.py
from django.urls import path, re_path
from . import views

urlpatterns = [
    path('', views.home, name='home'),

    # job listing / CRUD; create must come before the generic detail route
    path('jobs', views.job_list, name='job_list'),
    path('jobs/create', views.job_create, name='job_create'),
    path('jobs/<str:job_id>', views.job_detail, name='job_detail'),
    path('jobs/<str:job_id>/edit', views.job_edit, name='job_edit'),
    path('jobs/<str:job_id>/delete', views.job_delete, name='job_delete'),

    # application flow (members)
    path('jobs/<str:job_id>/apply', views.apply_start, name='job_apply'),
    path('jobs/<str:job_id>/apply/success', views.apply_success, name='job_apply_success'),
    path('my-applications', views.my_applications, name='my_applications'),
    path('my-applications/<str:app_id>', views.my_application_detail, name='my_application_detail'),

    # applications review (admins)
    path('jobs/<str:job_id>/applications', views.applications_for_job, name='applications_for_job'),
    path('jobs/<str:job_id>/applications/<str:app_id>', views.application_detail, name='application_detail'),
    path('jobs/<str:job_id>/applications/<str:app_id>/accept', views.application_accept,
         name='application_accept'),
    path('jobs/<str:job_id>/applications/<str:app_id>/reject', views.application_reject,
         name='application_reject'),

    # CV downloads are proxied to the backend
    re_path(r'^uploads/cvs/(?P<year>\d{4})/(?P<month>\d{1,2})/(?P<filename>[^/]+)$', views.cv_download,
            name='cv_download'),
]
