"""
Module System URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    FirmModuleListView,
    InstallDefaultModulesView,
    ModuleAnalyticsView,
    ModuleConfigurationView,
    ModuleEventsView,
    ModulePermissionsView,
    ModuleViewSet,
    ToggleFirmModuleView,
)

app_name = 'modules'

router = DefaultRouter()
router.register('catalogue', ModuleViewSet, basename='module')

urlpatterns = [
    path('', include(router.urls)),
    path('firms/<slug:firm_slug>/', FirmModuleListView.as_view(), name='firm-modules'),
    path('firms/<slug:firm_slug>/permissions/', ModulePermissionsView.as_view(), name='firm-permissions'),
    path('firms/<slug:firm_slug>/events/', ModuleEventsView.as_view(), name='firm-events'),
    path('firms/<slug:firm_slug>/install-defaults/', InstallDefaultModulesView.as_view(), name='install-defaults'),
    path('firms/<slug:firm_slug>/<str:module_slug>/toggle/', ToggleFirmModuleView.as_view(), name='toggle'),
    path('firms/<slug:firm_slug>/<str:module_slug>/configuration/', ModuleConfigurationView.as_view(), name='configuration'),
    path('firms/<slug:firm_slug>/<str:module_slug>/analytics/', ModuleAnalyticsView.as_view(), name='analytics'),
]
