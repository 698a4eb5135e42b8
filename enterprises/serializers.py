# enterprises/serializers.py
from rest_framework import serializers
from django.contrib.auth import get_user_model
from authentication.serializers import UserBasicSerializer
from .models import Enterprise, Customer

User = get_user_model()


class EnterpriseSerializer(serializers.ModelSerializer):
    owner = UserBasicSerializer(read_only=True)
    managers = serializers.SerializerMethodField()

    class Meta:
        model = Enterprise
        fields = [
            'id', 'name', 'permalink', 'owner', 'managers', 'is_primary_producer',
            'sells', 'is_distributor', 'email_address', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_managers(self, obj):
        users = User.objects.filter(enterprise_roles__enterprise=obj).order_by('email')
        return UserBasicSerializer(users, many=True).data


class EnterpriseCreateUpdateSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField(write_only=True)

    class Meta:
        model = Enterprise
        fields = ['name', 'owner_id', 'is_primary_producer', 'sells', 'email_address']

    def validate_owner_id(self, value):
        try:
            return User.objects.get(id=value)
        except User.DoesNotExist:
            raise serializers.ValidationError("User not found.")

    def create(self, validated_data):
        validated_data['owner'] = validated_data.pop('owner_id')
        return Enterprise.objects.create(**validated_data)

    def update(self, instance, validated_data):
        if 'owner_id' in validated_data:
            validated_data['owner'] = validated_data.pop('owner_id')
        return super().update(instance, validated_data)


class ManagerAssignmentSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()

    def validate_user_id(self, value):
        try:
            return User.objects.get(id=value)
        except User.DoesNotExist:
            raise serializers.ValidationError("User not found.")


class CustomerSerializer(serializers.ModelSerializer):
    enterprise_id = serializers.PrimaryKeyRelatedField(
        source='enterprise', queryset=Enterprise.objects.all()
    )
    user_id = serializers.PrimaryKeyRelatedField(
        source='user', queryset=User.objects.all(), required=False, allow_null=True
    )
    tags = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = ['id', 'enterprise_id', 'user_id', 'email', 'code', 'tag_list', 'tags', 'created_at']
        read_only_fields = ['id', 'tags', 'created_at']
        extra_kwargs = {'email': {'required': False}}
        # uniqueness of (enterprise, email) is checked in validate once email is known
        validators = []

    def get_tags(self, obj):
        return obj.tags

    def validate_enterprise_id(self, value):
        request = self.context.get('request')
        if request and not request.user.manages(value):
            raise serializers.ValidationError("You do not manage this enterprise.")
        return value

    def validate(self, data):
        enterprise = data.get('enterprise', getattr(self.instance, 'enterprise', None))
        user = data.get('user', getattr(self.instance, 'user', None))
        email = data.get('email') or getattr(self.instance, 'email', '') or (user.email if user else '')
        if not email:
            raise serializers.ValidationError({'email': 'Email is required when no user is given'})

        customers = Customer.objects.filter(enterprise=enterprise, email__iexact=email)
        if self.instance is not None:
            customers = customers.exclude(pk=self.instance.pk)
        if customers.exists():
            raise serializers.ValidationError({'email': 'This enterprise already has a customer with this email'})

        data['email'] = email.lower()
        return data
