import logging
from django.db.models import Prefetch
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from .models import Bill, BillItem
from .filters import BillFilter
from .serializers import BillSerializer

logger = logging.getLogger(__name__)


def bill_queryset():
    """Bills with their items and referenced products loaded up front"""
    return Bill.objects.prefetch_related(
        Prefetch('items', queryset=BillItem.objects.select_related('product'))
    )


@api_view(['GET', 'POST'])
def bill_list_create(request):
    """List all bills (newest first) or create a new bill"""
    if request.method == 'GET':
        filterset = BillFilter(request.query_params, queryset=bill_queryset())
        serializer = BillSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    serializer = BillSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    bill = serializer.save()
    logger.info(
        "Created bill %s for %s: %s items, total %s",
        bill.bill_number, bill.customer_name, len(serializer.validated_data['items']), bill.total_amount
    )

    # Re-read so every item carries its current product details
    bill = bill_queryset().get(pk=bill.pk)
    return Response(BillSerializer(bill).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def bill_detail(request, pk):
    """Retrieve, update or delete a bill. Product stock is left as is on update and delete."""
    try:
        bill = bill_queryset().get(pk=pk)
    except Bill.DoesNotExist:
        return Response({'message': 'Bill not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        serializer = BillSerializer(bill)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = BillSerializer(bill, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        if 'items' in serializer.validated_data:
            logger.info("Bill %s items replaced; product stock not adjusted", bill.bill_number)
        logger.info("Updated bill %s", bill.bill_number)
        bill = bill_queryset().get(pk=bill.pk)
        return Response(BillSerializer(bill).data)
    else:  # DELETE
        bill_number = bill.bill_number
        bill.delete()
        logger.info("Deleted bill %s; product stock not restored", bill_number)
        return Response({'message': 'Bill deleted successfully'})
