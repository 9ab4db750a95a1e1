"""
Firm Serializers
"""

from rest_framework import serializers

from .models import Entity, Firm


class FirmSerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(source='senexus_group.name', read_only=True)
    enabled_modules = serializers.SerializerMethodField()

    class Meta:
        model = Firm
        fields = [
            'id', 'name', 'slug', 'type', 'description', 'logo', 'theme_color',
            'is_active', 'group_name', 'enabled_modules', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'slug', 'is_active', 'group_name', 'created_at', 'updated_at']

    def get_enabled_modules(self, obj):
        return list(
            obj.firm_modules.filter(is_enabled=True)
            .order_by('module__sort_order')
            .values_list('module__slug', flat=True)
        )


class CreateFirmSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    type = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    logo = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)
    theme_color = serializers.RegexField(r'^#[0-9a-fA-F]{6}$', required=False)
    selected_modules = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list
    )


class UpdateFirmSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    type = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    logo = serializers.CharField(required=False, allow_blank=True, max_length=500)
    theme_color = serializers.RegexField(r'^#[0-9a-fA-F]{6}$', required=False)


class EntitySerializer(serializers.ModelSerializer):

    class Meta:
        model = Entity
        fields = [
            'id', 'firm', 'name', 'industry', 'address',
            'contact_email', 'contact_phone', 'is_active', 'created_at'
        ]
        read_only_fields = ['id', 'firm', 'created_at']
