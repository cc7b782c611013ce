import logging
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from .models import Product
from .filters import ProductFilter
from .serializers import ProductSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
def product_list_create(request):
    """List all products (newest first) or create a new product"""
    if request.method == 'GET':
        filterset = ProductFilter(request.query_params, queryset=Product.objects.all())
        serializer = ProductSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    serializer = ProductSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    product = serializer.save()
    logger.info("Created product %s (%s) with %s units", product.id, product.name, product.units)
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    try:
        product = Product.objects.get(pk=pk)
    except Product.DoesNotExist:
        return Response({'message': 'Product not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        serializer = ProductSerializer(product)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        # PUT behaves as a partial update: only the provided fields change
        serializer = ProductSerializer(product, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Updated product %s fields: %s", product.id, ', '.join(sorted(request.data.keys())))
        return Response(serializer.data)
    else:  # DELETE
        product_name = product.name
        product.delete()
        logger.info("Deleted product %s (%s)", pk, product_name)
        return Response({'message': 'Product deleted successfully'})
