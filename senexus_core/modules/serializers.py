"""
Module System Serializers
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import FirmModule, Module, ModuleEvent


class ModuleSerializer(serializers.ModelSerializer):
    """Serializer for catalogue modules"""

    class Meta:
        model = Module
        fields = [
            'id', 'slug', 'display_name', 'description', 'icon', 'color',
            'category', 'pricing_tier', 'is_core', 'is_active', 'sort_order',
            'requires_modules', 'conflicts_with', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        """Run the model-level definition checks (slug format, self references, overlap)"""
        instance = Module(**{**self._current_values(), **attrs})
        try:
            instance.clean()
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)
        return attrs

    def _current_values(self):
        if self.instance is None:
            return {}
        return {
            'slug': self.instance.slug,
            'requires_modules': self.instance.requires_modules,
            'conflicts_with': self.instance.conflicts_with,
        }


class FirmModuleStatusSerializer(serializers.Serializer):
    """A module with its state for one firm"""
    module = ModuleSerializer(read_only=True)
    is_enabled = serializers.BooleanField()
    enabled_at = serializers.DateTimeField(allow_null=True)
    configuration = serializers.JSONField()
    dependencies_met = serializers.BooleanField()
    conflicts = serializers.ListField(child=serializers.CharField())
    features = serializers.DictField(child=serializers.BooleanField())


class FirmModuleSerializer(serializers.ModelSerializer):
    """Serializer for a firm's module state"""
    module_slug = serializers.CharField(source='module.slug', read_only=True)
    module_name = serializers.CharField(source='module.display_name', read_only=True)
    enabled_by_email = serializers.CharField(source='enabled_by.email', read_only=True, default=None)

    class Meta:
        model = FirmModule
        fields = [
            'id', 'firm', 'module', 'module_slug', 'module_name',
            'is_enabled', 'configuration', 'enabled_at', 'enabled_by_email',
            'disabled_at', 'updated_at'
        ]
        read_only_fields = fields


class ToggleModuleSerializer(serializers.Serializer):
    enabled = serializers.BooleanField()


class ModuleConfigurationSerializer(serializers.Serializer):
    configuration = serializers.DictField()


class ModuleEventSerializer(serializers.ModelSerializer):
    """Serializer for module events"""
    module_slug = serializers.CharField(source='module.slug', read_only=True)
    user_email = serializers.CharField(source='user.email', read_only=True, default=None)

    class Meta:
        model = ModuleEvent
        fields = [
            'id', 'module', 'module_slug', 'event_type', 'event_data',
            'user_email', 'occurred_at'
        ]
        read_only_fields = fields
