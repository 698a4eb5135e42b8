# order_cycles/views.py
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from catalog.criteria import product_criteria_from_params
from enterprises.models import Enterprise
from utils.helpers import parse_uuid_list
from .catalog import DistributedCatalog
from .models import OrderCycle
from .serializers import (
    OrderCycleSerializer,
    DistributedProductSerializer,
    TaxonSerializer,
    PropertySerializer,
)
import logging

logger = logging.getLogger(__name__)


class OrderCycleViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Order cycles, plus the shopfront listings a distributor offers in one:
    products, taxons and properties, all scoped by ?distributor=<id>.
    """
    serializer_class = OrderCycleSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return OrderCycle.objects.select_related('coordinator').prefetch_related(
            'exchanges__sender', 'exchanges__receiver', 'exchanges__variants'
        )

    def get_distributor(self):
        ids = parse_uuid_list(self.request.query_params.getlist('distributor'))
        if not ids:
            return None
        return Enterprise.objects.filter(id=ids[0]).first()

    def get_catalog(self, with_criteria=False):
        order_cycle = self.get_object()
        criteria = product_criteria_from_params(self.request.query_params) if with_criteria else None
        return DistributedCatalog.for_request_user(
            order_cycle, self.get_distributor(), self.request.user, criteria=criteria
        )

    @action(detail=True, methods=['get'], permission_classes=[AllowAny])
    def products(self, request, pk=None):
        catalog = self.get_catalog(with_criteria=True)
        products = catalog.products()
        logger.info(
            "Listed %d products for order cycle %s at %s",
            len(products), catalog.order_cycle.id, catalog.distributor or 'unknown distributor'
        )
        return Response(DistributedProductSerializer(products, many=True).data)

    @action(detail=True, methods=['get'], permission_classes=[AllowAny])
    def taxons(self, request, pk=None):
        catalog = self.get_catalog()
        return Response(TaxonSerializer(catalog.taxons(), many=True).data)

    @action(detail=True, methods=['get'], permission_classes=[AllowAny])
    def properties(self, request, pk=None):
        catalog = self.get_catalog()
        return Response(PropertySerializer(catalog.properties(), many=True).data)
