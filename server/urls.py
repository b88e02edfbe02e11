"""Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.

It is also a good practice to keep a single URL to the root index page.

`admin` is mounted under a non-default path in production by setting
``DJANGO_ADMIN_URL``.
"""

from django.contrib import admin
from django.urls import include, path

from server.settings.components import config

admin.autodiscover()

_ADMIN_URL = config('DJANGO_ADMIN_URL', default='admin/')

urlpatterns = [
    # Django:
    path(_ADMIN_URL, admin.site.urls),

    # Apps:
    path('', include('server.apps.accounts.urls', namespace='accounts')),
    path('', include('server.apps.drive.urls', namespace='drive')),
]
