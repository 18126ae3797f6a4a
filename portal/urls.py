# portal/urls.py
from django.urls import include, path

urlpatterns = [
    # Auth (login/logout/register)
    path('', include('accounts.urls')),

    # Jobs, applications, CV downloads
    path('', include('jobs.urls')),
]

handler403 = 'portal.views.permission_denied'
handler404 = 'portal.views.page_not_found'
handler500 = 'portal.views.server_error'
