# order_cycles/serializers.py
from rest_framework import serializers
from catalog.models import Taxon, Property
from enterprises.models import Enterprise
from .models import OrderCycle, Exchange


class EnterpriseSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Enterprise
        fields = ['id', 'name', 'permalink']
        read_only_fields = fields


class TaxonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Taxon
        fields = ['id', 'name', 'pretty_name']
        read_only_fields = fields


class PropertySerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='presentation', read_only=True)

    class Meta:
        model = Property
        fields = ['id', 'name']
        read_only_fields = fields


class DistributedVariantSerializer(serializers.Serializer):
    """Serializes a variant already scoped to the distributor"""
    id = serializers.UUIDField(read_only=True)
    sku = serializers.CharField(read_only=True)
    display_name = serializers.CharField(read_only=True)
    unit_description = serializers.CharField(read_only=True)
    full_name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    count_on_hand = serializers.IntegerField(read_only=True)
    on_demand = serializers.BooleanField(read_only=True)
    tags = serializers.ListField(child=serializers.CharField(), read_only=True)


class DistributedProductSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    supplier = EnterpriseSummarySerializer(read_only=True)
    primary_taxon = TaxonSerializer(read_only=True)
    properties_with_values = serializers.SerializerMethodField()
    variants = DistributedVariantSerializer(many=True, read_only=True)

    def get_properties_with_values(self, obj):
        values = [
            {'id': str(pp.property_id), 'name': pp.property.presentation, 'value': pp.value}
            for pp in obj.product_properties.all()
        ]
        values += [
            {'id': str(pp.property_id), 'name': pp.property.presentation, 'value': pp.value}
            for pp in obj.supplier.producer_properties.all()
        ]
        return values


class ExchangeSerializer(serializers.ModelSerializer):
    sender = EnterpriseSummarySerializer(read_only=True)
    receiver = EnterpriseSummarySerializer(read_only=True)
    variant_ids = serializers.PrimaryKeyRelatedField(source='variants', many=True, read_only=True)

    class Meta:
        model = Exchange
        fields = ['id', 'sender', 'receiver', 'incoming', 'variant_ids', 'pickup_time', 'pickup_instructions']
        read_only_fields = fields


class OrderCycleSerializer(serializers.ModelSerializer):
    coordinator = EnterpriseSummarySerializer(read_only=True)
    is_open = serializers.BooleanField(read_only=True)
    exchanges = ExchangeSerializer(many=True, read_only=True)

    class Meta:
        model = OrderCycle
        fields = ['id', 'name', 'coordinator', 'orders_open_at', 'orders_close_at', 'is_open', 'exchanges']
        read_only_fields = fields
