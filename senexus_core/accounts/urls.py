from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import UserViewSet

app_name = 'accounts'

router = SimpleRouter()
router.register('', UserViewSet, basename='user')

urlpatterns = [
    path('', include(router.urls)),
]
