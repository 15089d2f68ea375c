"""
URL configuration for the internship portal.

All JSON endpoints live under /api/. The Django admin site stays at /admin/.
"""
from django.contrib import admin
from django.urls import include, path

from notifications.urls import message_urlpatterns
from submissions.urls import admin_urlpatterns as submissions_admin_urls
from submissions.urls import intern_urlpatterns as submissions_intern_urls
from users.urls import admin_urlpatterns as users_admin_urls
from users.urls import auth_urlpatterns, superadmin_urlpatterns
from users.urls import intern_urlpatterns as users_intern_urls

urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/auth/', include((auth_urlpatterns, 'auth'), namespace='auth')),
    path('api/users/', include((users_intern_urls + submissions_intern_urls, 'intern'), namespace='intern')),
    path('api/admin/', include((users_admin_urls + submissions_admin_urls, 'portal_admin'), namespace='portal_admin')),
    path('api/superadmin/', include((superadmin_urlpatterns, 'superadmin'), namespace='superadmin')),
    path('api/notifications/', include('notifications.urls')),
    path('api/messages/', include((message_urlpatterns, 'messages'), namespace='messages')),
]
