# tag_rules/serializers.py
from rest_framework import serializers
from enterprises.models import Enterprise
from .models import TagRule


class TagRuleSerializer(serializers.ModelSerializer):
    enterprise_id = serializers.PrimaryKeyRelatedField(
        source='enterprise', queryset=Enterprise.objects.all()
    )
    customer_tags = serializers.ListField(child=serializers.CharField(), read_only=True)
    variant_tags = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = TagRule
        fields = [
            'id', 'enterprise_id', 'is_default', 'priority',
            'preferred_customer_tags', 'preferred_variant_tags',
            'preferred_matched_variants_visibility',
            'customer_tags', 'variant_tags', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_enterprise_id(self, value):
        request = self.context.get('request')
        if request and not request.user.manages(value):
            raise serializers.ValidationError("You do not manage this enterprise.")
        return value

    def validate(self, data):
        is_default = data.get('is_default', getattr(self.instance, 'is_default', False))
        customer_tags = data.get(
            'preferred_customer_tags', getattr(self.instance, 'preferred_customer_tags', '')
        )
        if not is_default and not customer_tags.strip(', '):
            raise serializers.ValidationError(
                {'preferred_customer_tags': 'Customer tags are required unless the rule is a default rule'}
            )
        return data
