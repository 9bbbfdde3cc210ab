"""DRF views for inventory movements.

Views validate input with serializers, call the inventory services and map
their typed errors to HTTP statuses. No stock logic lives here.
"""

import logging

from common.choices import MovementType
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import HasInventoryRole, IsOwner

from .exceptions import MovementError
from .selectors import get_movements, low_stock_products
from .serializers import (
    BulkMovementSerializer,
    InventoryMovementSerializer,
    LowStockProductSerializer,
    MovementCreateSerializer,
    MovementQuerySerializer,
    StockAdjustmentSerializer,
)
from .services import cancel_sale_movement, create_bulk_movements, create_movement, create_stock_adjustment

logger = logging.getLogger("stockledger.inventory")

STATUS_BY_CODE = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "insufficient_stock": status.HTTP_409_CONFLICT,
    "already_cancelled": status.HTTP_409_CONFLICT,
    "invalid_input": status.HTTP_400_BAD_REQUEST,
    "store_conflict": status.HTTP_503_SERVICE_UNAVAILABLE,
}

MOVEMENT_EXAMPLE = {
    "id": "42",
    "product_id": "7",
    "type": "SALE_OFFLINE",
    "qty": 3,
    "signed_qty": -3,
    "unit_price_cents": 1299,
    "note": None,
    "actor_id": "2",
    "reverses_id": None,
    "created_at": "2025-01-01T12:00:00Z",
}

MovementErrorResponse = inline_serializer(
    name="MovementErrorResponse",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)


def _error_response(request, exc: MovementError) -> Response:
    code = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
    logger.warning(
        "inventory.movement_rejected",
        extra={
            "event": "inventory.movement_rejected",
            "error_code": exc.code,
            "path": request.path,
            "user_id": getattr(request.user, "id", None),
        },
    )
    return Response(exc.as_dict(), status=code)


class InventoryHealthView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Inventory health",
        description="Simple healthcheck endpoint for the inventory app",
        examples=[OpenApiExample("Health OK", value={"status": "ok", "app": "inventory"})],
    )
    def get(self, request):
        return Response({"status": "ok", "app": "inventory"})


class MovementListCreateView(APIView):
    """List the ledger (cursor paginated) or record a single movement."""

    permission_classes = [HasInventoryRole]

    def initial(self, request, *args, **kwargs):
        self.throttle_scope = "movements_write" if request.method == "POST" else "movements"
        super().initial(request, *args, **kwargs)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List stock movements",
        description=(
            "Newest-first ledger entries. Filters: product_id, type, actor_id, start_date, end_date "
            "(YYYY-MM-DD or ISO-8601; a bare end_date includes that whole day). "
            "Pass `next_cursor` back as `cursor` to fetch the next page."
        ),
        parameters=[
            OpenApiParameter("product_id", int, location="query"),
            OpenApiParameter("type", str, location="query", enum=MovementType.values),
            OpenApiParameter("actor_id", int, location="query"),
            OpenApiParameter("start_date", str, location="query"),
            OpenApiParameter("end_date", str, location="query"),
            OpenApiParameter("cursor", str, location="query"),
            OpenApiParameter("limit", int, location="query", description="1..100, default 20"),
        ],
        examples=[
            OpenApiExample(
                "Movements page",
                value={"items": [MOVEMENT_EXAMPLE], "next_cursor": "42", "has_more": True},
                response_only=True,
            )
        ],
    )
    def get(self, request):
        query = MovementQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            page = get_movements(
                filters=query.filters(),
                cursor=query.validated_data.get("cursor"),
                limit=query.validated_data.get("limit"),
            )
        except MovementError as exc:
            return _error_response(request, exc)
        return Response(
            {
                "items": InventoryMovementSerializer(page.items, many=True).data,
                "next_cursor": page.next_cursor,
                "has_more": page.has_more,
            }
        )

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Create stock movement",
        description="Records one movement and updates the product's cached stock atomically.",
        request=MovementCreateSerializer,
        responses={
            201: InventoryMovementSerializer,
            400: MovementErrorResponse,
            403: MovementErrorResponse,
            404: MovementErrorResponse,
            409: MovementErrorResponse,
        },
        examples=[OpenApiExample("Created", value=MOVEMENT_EXAMPLE, response_only=True)],
    )
    def post(self, request):
        serializer = MovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            movement = create_movement(
                command=serializer.to_command(),
                actor_id=request.user.id,
                actor_role=request.user.role,
            )
        except MovementError as exc:
            return _error_response(request, exc)
        return Response(InventoryMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class BulkMovementView(APIView):
    """Record several movements in order; stops at the first failure."""

    permission_classes = [HasInventoryRole]
    throttle_scope = "movements_write"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Create stock movements in bulk",
        description=(
            "Applies movements in order, each in its own transaction. On failure, movements before "
            "`failed_index` stay committed and are listed in `committed_ids`; later ones are not attempted."
        ),
        request=BulkMovementSerializer,
        responses={
            201: inline_serializer(
                name="BulkMovementResponse",
                fields={
                    "movements": InventoryMovementSerializer(many=True),
                    "count": rf_serializers.IntegerField(),
                },
            ),
            400: MovementErrorResponse,
            409: MovementErrorResponse,
        },
        examples=[
            OpenApiExample(
                "Partial failure",
                value={
                    "detail": "Movement 1 failed: Insufficient stock. Available: 2, Requested: 5",
                    "code": "insufficient_stock",
                    "failed_index": 1,
                    "succeeded": 1,
                    "committed_ids": ["41"],
                    "cause": {"code": "insufficient_stock", "available": 2, "requested": 5},
                },
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request):
        serializer = BulkMovementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = create_bulk_movements(
                commands=serializer.to_commands(),
                actor_id=request.user.id,
                actor_role=request.user.role,
            )
        except MovementError as exc:
            return _error_response(request, exc)
        return Response(
            {"movements": InventoryMovementSerializer(result.movements, many=True).data, "count": result.count},
            status=status.HTTP_201_CREATED,
        )


class StockAdjustmentView(APIView):
    """Manual stock correction (owners only)."""

    permission_classes = [IsOwner]
    throttle_scope = "movements_write"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Adjust stock",
        description="Records a signed ADJUSTMENT in [-1000, 1000] with a mandatory reason.",
        request=StockAdjustmentSerializer,
        responses={
            201: InventoryMovementSerializer,
            400: MovementErrorResponse,
            404: MovementErrorResponse,
            409: MovementErrorResponse,
        },
    )
    def post(self, request):
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            movement = create_stock_adjustment(
                product_id=data["product_id"],
                adjustment_qty=data["adjustment_qty"],
                reason=data["reason"],
                actor_id=request.user.id,
            )
        except MovementError as exc:
            return _error_response(request, exc)
        return Response(InventoryMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class CancelSaleView(APIView):
    """Reverse an offline sale with a CANCEL_SALE entry (owners only)."""

    permission_classes = [IsOwner]
    throttle_scope = "movements_write"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Cancel sale",
        description="Appends a CANCEL_SALE entry restoring the sale's quantity. A sale can be cancelled once.",
        request=None,
        responses={
            201: InventoryMovementSerializer,
            400: MovementErrorResponse,
            404: MovementErrorResponse,
            409: MovementErrorResponse,
        },
    )
    def post(self, request, movement_id: int):
        try:
            movement = cancel_sale_movement(
                movement_id=movement_id,
                actor_id=request.user.id,
                actor_role=request.user.role,
            )
        except MovementError as exc:
            return _error_response(request, exc)
        return Response(InventoryMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class LowStockView(APIView):
    permission_classes = [HasInventoryRole]
    throttle_scope = "movements"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Low stock products",
        description="Active products whose cached stock is at or below `threshold` (default 5), lowest first.",
        parameters=[OpenApiParameter("threshold", int, location="query")],
        responses={
            200: inline_serializer(
                name="LowStockResponse",
                fields={"products": LowStockProductSerializer(many=True)},
            ),
            400: MovementErrorResponse,
        },
    )
    def get(self, request):
        try:
            products = low_stock_products(threshold=request.query_params.get("threshold"))
        except MovementError as exc:
            return _error_response(request, exc)
        return Response({"products": LowStockProductSerializer(products, many=True).data})


# EOF
