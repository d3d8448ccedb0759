import logging
from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .archive import ArchiveStore
from .assembler import LineItemStager, OrderAssembler, list_orders
from .errors import DependencyError, NotFoundError, ValidationError
from .metrics import track_request
from .serializers import CreateOrderSerializer, OrderDetailSerializer, StageLineItemSerializer

logger = logging.getLogger(__name__)


def dependency_error_response(message, error):
    return Response(
        {"error": message, "details": error.details},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@api_view(["POST"])
@track_request("POST /line-items")
def stage_line_item(request):
    """
    Stage a product quantity for a client.

    Expected payload:
    {"clientId": "C1", "productId": "P1", "quantity": 2}

    Returns:
        201 Created: {"id": "<uuid>", "message": "..."}
        400 Bad Request: {"errors": {...}}
        404 Not Found: {"error": "Product not found"}
    """
    serializer = StageLineItemSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Invalid line item payload: {serializer.errors}")
        return Response({"errors": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data

    try:
        line_item = LineItemStager().stage(data["client_id"], data["product_id"], data["quantity"])
    except NotFoundError as e:
        logger.warning(str(e))
        return Response({"error": "Product not found"}, status=status.HTTP_404_NOT_FOUND)
    except DependencyError as e:
        return dependency_error_response("Error staging line item", e)

    return Response(
        {"id": str(line_item.id), "message": "Line item staged"},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET", "POST"])
def orders(request):
    if request.method == "POST":
        return create_order(request)
    return order_list(request)


@track_request("POST /orders")
def create_order(request):
    """
    Assemble an order from the client's staged line items and addresses.

    Expected payload:
    {"clientId": "C1"}

    Returns:
        201 Created: {"id", "message", "total", "documentUrl", "clientId"}
        400 Bad Request: missing clientId or no shipping address
        500 Internal Server Error: storage or rendering failure
    """
    serializer = CreateOrderSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Invalid order payload: {serializer.errors}")
        return Response({"errors": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    client_id = serializer.validated_data["client_id"]

    try:
        order = OrderAssembler().create_order(client_id)
    except ValidationError as e:
        return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DependencyError as e:
        return dependency_error_response("Error creating order", e)

    return Response(
        {
            "id": str(order.id),
            "message": "Order created and document generated",
            "total": str(order.total),
            "documentUrl": order.document_url,
            "clientId": order.client_id,
        },
        status=status.HTTP_201_CREATED,
    )


@track_request("GET /orders")
def order_list(request):
    client_id = request.query_params.get("clientId")

    try:
        found = list_orders(client_id)
    except DependencyError as e:
        return dependency_error_response("Error listing orders", e)

    return Response(OrderDetailSerializer(found, many=True).data)


@api_view(["GET"])
@track_request("GET /orders/{id}")
def download_order(request, order_id):
    """
    Return the archived document as an attachment and mark it read.

    Returns:
        200 OK: the PDF, with Content-Disposition attachment
        404 Not Found: no document is archived for the id. Older clients
            saw a 500 here; a missing document is now reported as such
        500 Internal Server Error: storage failure
    """
    try:
        document = ArchiveStore().fetch_and_mark_read(order_id)
    except NotFoundError as e:
        logger.warning(str(e))
        return Response({"error": "Order document not found"}, status=status.HTTP_404_NOT_FOUND)
    except DependencyError as e:
        return dependency_error_response("Error downloading order", e)

    response = HttpResponse(document.content, content_type=document.content_type)
    response["Content-Disposition"] = f'attachment; filename="{document.filename}"'
    return response
