from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/users/', include('senexus_core.accounts.urls')),
    path('api/firms/', include('senexus_core.firms.urls')),
    path('api/modules/', include('senexus_core.modules.urls')),
]
