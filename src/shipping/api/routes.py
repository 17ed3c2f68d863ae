"""FastAPI endpoints for courier booking and order intake."""

import json

from fastapi import APIRouter, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shipping.api.schemas import (
    BookingResultSchema,
    CitiesResponse,
    CitySuggestionSchema,
    OrderIdResponse,
    ProductIdResponse,
    ProductWeightRequest,
    PushOrdersRequest,
    PushOrdersResponse,
    RegisterOrderRequest,
    ResolveCityRequest,
    ResolveCityResponse,
    SuggestionsResponse,
    TrackingResponse,
)
from shipping.courier import get_courier
from shipping.courier.dispatcher import BookingResult
from shipping.courier.errors import CourierConfigurationError, TrackingExhaustedError
from shipping.order.city_resolution import ResolveOrderCity
from shipping.order.registration import RegisterOrder
from shipping.product.weight import RecordProductWeight

courier_router = APIRouter(prefix="/courier", tags=["courier"])
order_router = APIRouter(prefix="/orders", tags=["orders"])

MIN_QUERY_LENGTH = 2


def _suggestion_schema(suggestion) -> CitySuggestionSchema:
    return CitySuggestionSchema(id=suggestion.city_id, name=suggestion.name, score=round(suggestion.score, 2))


def _result_schema(result: BookingResult) -> BookingResultSchema:
    return BookingResultSchema(
        order_id=result.order_id,
        ok=result.ok,
        code=result.code,
        error=result.error,
        consignment_no=result.consignment_no,
        tracking_number=result.tracking_number,
        slip=result.slip,
        suggestions=[_suggestion_schema(s) for s in result.suggestions],
        attempts=result.attempts,
        status=result.http_status,
    )


# ---------------------------------------------------------------------------
# Courier (LCS)
# ---------------------------------------------------------------------------
# Handlers that reach LCS are plain functions; FastAPI runs them in its threadpool.
@courier_router.post("/lcs/push", response_model=PushOrdersResponse)
def push_orders(body: PushOrdersRequest) -> PushOrdersResponse:
    try:
        results = get_courier().push_batch(body.order_ids, force_rebook=body.force_rebook)
    except CourierConfigurationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return PushOrdersResponse(count=len(results), results=[_result_schema(r) for r in results])


@courier_router.get("/lcs/track/{cn}", response_model=TrackingResponse)
def track_consignment(cn: str) -> TrackingResponse:
    try:
        report = get_courier().track(cn)
    except CourierConfigurationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except TrackingExhaustedError as exc:
        raise HTTPException(
            status_code=502,
            detail={"message": exc.message, "data": exc.response, "attempts": exc.attempts},
        ) from exc
    return TrackingResponse(data=report.to_dict(), raw=report.raw)


@courier_router.post("/lcs/resolve-city", response_model=ResolveCityResponse)
async def resolve_order_city(body: ResolveCityRequest) -> ResolveCityResponse:
    if not body.order_id or body.lcs_city_id in (None, ""):
        raise HTTPException(status_code=400, detail="orderId and lcsCityId are required")

    command = ResolveOrderCity(
        order_id=body.order_id,
        city_id=str(body.lcs_city_id),
        city_name=body.lcs_city_name,
    )
    try:
        current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Order not found") from exc
    return ResolveCityResponse(
        order_id=body.order_id,
        lcs_city_id=str(body.lcs_city_id),
        lcs_city_name=body.lcs_city_name,
    )


@courier_router.get("/lcs/suggest", response_model=SuggestionsResponse)
def suggest_cities(q: str = "", limit: int = 10) -> SuggestionsResponse:
    if len(q.strip()) < MIN_QUERY_LENGTH:
        return SuggestionsResponse(data=[])
    suggestions = get_courier().suggest_cities(q, limit)
    return SuggestionsResponse(data=[_suggestion_schema(s) for s in suggestions])


@courier_router.get("/lcs/cities", response_model=CitiesResponse)
def list_cities(force: bool = False) -> CitiesResponse:
    cities = get_courier().list_cities(force=force)
    return CitiesResponse(data=[city.raw for city in cities])


# ---------------------------------------------------------------------------
# Order intake
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def register_order(body: RegisterOrderRequest) -> OrderIdResponse:
    command = RegisterOrder(
        order_ref=body.order_ref,
        total_price=body.total_price,
        delivery_charges=body.delivery_charges,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        items=json.dumps([item.model_dump() for item in body.items]),
        ordered_at=body.ordered_at,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.put("/products/{product_id}/weight", response_model=ProductIdResponse)
async def record_product_weight(product_id: str, body: ProductWeightRequest) -> ProductIdResponse:
    command = RecordProductWeight(product_id=product_id, weight=body.weight, title=body.title)
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)
