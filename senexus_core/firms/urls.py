"""
Firm URLs
"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import FirmViewSet

app_name = 'firms'

router = SimpleRouter()
router.register('', FirmViewSet, basename='firm')

urlpatterns = [
    path('', include(router.urls)),
]
