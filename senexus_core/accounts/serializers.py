from rest_framework import serializers

from .models import User, UserFirmAssignment


class UserFirmAssignmentSerializer(serializers.ModelSerializer):
    firm_name = serializers.CharField(source='firm.name', read_only=True)
    firm_slug = serializers.CharField(source='firm.slug', read_only=True)

    class Meta:
        model = UserFirmAssignment
        fields = ['id', 'firm', 'firm_name', 'firm_slug', 'assigned_at', 'is_active']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Serializer for user data"""
    firm_assignments = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'email', 'full_name', 'phone', 'position', 'department',
            'hire_date', 'role', 'firm', 'is_active', 'created_at',
            'last_login_at', 'firm_assignments'
        ]
        read_only_fields = ['id', 'email', 'role', 'is_active', 'created_at', 'last_login_at']

    def get_firm_assignments(self, obj):
        assignments = getattr(obj, 'active_assignments', None)
        if assignments is None:
            assignments = obj.firm_assignments.filter(is_active=True).select_related('firm')
        return UserFirmAssignmentSerializer(assignments, many=True).data


class UserCreateSerializer(serializers.Serializer):
    """Serializer for creating new users"""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.USER)
    full_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=50)
    position = serializers.CharField(required=False, allow_blank=True, max_length=100)
    department = serializers.CharField(required=False, allow_blank=True, max_length=100)
    hire_date = serializers.DateField(required=False, allow_null=True)
    is_active = serializers.BooleanField(default=True)
    assigned_firms = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        default=list
    )


class UserUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=50)
    position = serializers.CharField(required=False, allow_blank=True, max_length=100)
    department = serializers.CharField(required=False, allow_blank=True, max_length=100)
    hire_date = serializers.DateField(required=False, allow_null=True)


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.Role.choices)


class FirmAssignmentSerializer(serializers.Serializer):
    firm = serializers.UUIDField()
