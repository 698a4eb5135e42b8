# authentication/serializers.py
from rest_framework import serializers
from django.contrib.auth import get_user_model
from authentication.models import Address, Role


class NamedObjectSerializer(serializers.Serializer):
    name = serializers.CharField(read_only=True)


class AddressSerializer(serializers.ModelSerializer):
    state_id = serializers.UUIDField(read_only=True)
    country_id = serializers.UUIDField(read_only=True)
    state = NamedObjectSerializer(read_only=True)
    country = NamedObjectSerializer(read_only=True)

    class Meta:
        model = Address
        fields = [
            'firstname', 'lastname', 'address1', 'address2', 'city',
            'zipcode', 'phone', 'state_name', 'state_id', 'country_id',
            'state', 'country'
        ]
        read_only_fields = fields


class UserBasicSerializer(serializers.ModelSerializer):
    """Minimal shape for autocompletion widgets"""
    name = serializers.EmailField(source='email', read_only=True)

    class Meta:
        model = get_user_model()
        fields = ['id', 'name']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    bill_address = AddressSerializer(read_only=True)
    ship_address = AddressSerializer(read_only=True)

    class Meta:
        model = get_user_model()
        fields = ['id', 'email', 'bill_address', 'ship_address']
        read_only_fields = fields


class RoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Role
        fields = ['id', 'name']


class UserDetailSerializer(serializers.ModelSerializer):
    bill_address = AddressSerializer(read_only=True)
    ship_address = AddressSerializer(read_only=True)
    spree_roles = RoleSerializer(many=True, read_only=True)
    has_api_key = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = [
            'id', 'email', 'first_name', 'last_name', 'is_active',
            'spree_roles', 'spree_api_key', 'has_api_key',
            'bill_address', 'ship_address', 'date_joined'
        ]
        read_only_fields = fields

    def get_has_api_key(self, obj):
        return bool(obj.spree_api_key)


class UserCreateUpdateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, allow_blank=True, min_length=6)
    spree_role_ids = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        write_only=True,
        required=False
    )

    class Meta:
        model = get_user_model()
        fields = ['email', 'first_name', 'last_name', 'is_active', 'password', 'spree_role_ids']

    def validate_email(self, value):
        value = value.strip().lower()
        users = get_user_model().objects.filter(email__iexact=value)
        if self.instance is not None:
            users = users.exclude(pk=self.instance.pk)
        if users.exists():
            raise serializers.ValidationError('A user with this email already exists')
        return value

    def validate_spree_role_ids(self, value):
        ids = [str(role_id).strip() for role_id in value if str(role_id).strip()]
        if not all(role_id.isdigit() for role_id in ids):
            raise serializers.ValidationError('Unknown role')
        roles = list(Role.objects.filter(id__in=ids))
        if len(roles) != len(set(ids)):
            raise serializers.ValidationError('Unknown role')
        return roles

    def create(self, validated_data):
        roles = validated_data.pop('spree_role_ids', None)
        password = validated_data.pop('password', None)
        user = get_user_model().objects.create_user(password=password or None, **validated_data)
        if roles is not None:
            user.spree_roles.set(roles)
        return user

    def update(self, instance, validated_data):
        roles = validated_data.pop('spree_role_ids', None)
        password = validated_data.pop('password', None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=['password'])
        if roles is not None:
            instance.spree_roles.set(roles)
        return instance
