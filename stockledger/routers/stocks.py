from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockledger.config import get_settings
from stockledger.core.context import RequestContext
from stockledger.core.stock_filters import normalize_direction, normalize_sort_field
from stockledger.dependencies import get_db, get_request_context
from stockledger.schemas.stock import (
    ActualStockUpdate,
    BillAdjustmentRequest,
    CarryForwardRequest,
    CarryForwardResult,
    FilterOptions,
    LowStockItem,
    StockEntryEdit,
    StockEntryReport,
    StockPage,
    StockSummaryRead,
)
from stockledger.services.stock_query_service import (
    StockQuery,
    get_stock_query_service,
    handle_sort_change,
)
from stockledger.services.stock_repository import load_filter_options, to_stock_row
from stockledger.services.stock_service import (
    adjust_stock_for_bill,
    carry_forward_stock,
    edit_stock_entry,
    record_actual_stock,
)
from stockledger.services.stock_value_service import low_stock_items, stock_value_report

router = APIRouter(prefix="/stocks", tags=["Stocks"])
settings = get_settings()


def _mutation_error(exc: Exception) -> HTTPException:
    if isinstance(exc, LookupError):
        return HTTPException(status_code=404, detail=str(exc).strip("'\""))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=503, detail="Stock update could not be saved.")


@router.get("", response_model=StockPage)
def list_stock_entries(
    date_from: Optional[date] = Query(None, description="First stock day (default: lookback window)"),
    date_to: Optional[date] = Query(None, description="Last stock day (default: today)"),
    search: str = Query("", description="Product, store or operator name"),
    shop_id: Optional[str] = Query(None, description="Store id, or 'all'"),
    product_id: Optional[str] = Query(None, description="Product id, or 'all'"),
    sort_field: str = Query("date", description="date | units_sold | sales_amount | profit | product_loss"),
    sort_direction: str = Query("desc", description="asc | desc"),
    toggle_sort: Optional[str] = Query(None, description="Column clicked; flips or switches the current sort"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    page_size = min(page_size or settings.STOCK_PAGE_SIZE, settings.STOCK_MAX_PAGE_SIZE)
    if toggle_sort:
        toggled_field, sort_direction = handle_sort_change(sort_field, sort_direction, toggle_sort)
        sort_field = toggled_field or sort_field
    query = StockQuery(
        date_from=date_from,
        date_to=date_to,
        search_term=search,
        store_filter=shop_id,
        product_filter=product_id,
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=page,
        page_size=page_size,
    )
    result = get_stock_query_service().run(db, query)
    return StockPage(
        entries=[StockEntryReport.from_row(row) for row in result.entries],
        filtered_count=result.filtered_count,
        total_count=result.total_count,
        page=page,
        page_size=page_size,
        date_from=result.date_from,
        date_to=result.date_to,
        sort_field=normalize_sort_field(sort_field) or sort_field,
        sort_direction=normalize_direction(sort_direction),
        summary=StockSummaryRead(**result.summary.as_dict()),
        error=result.error,
    )


@router.get("/filter-options", response_model=FilterOptions)
def stock_filter_options(db: Session = Depends(get_db)):
    return load_filter_options(db)


@router.get("/value")
def stock_value(
    stock_date: Optional[date] = Query(None, description="Stock day (default: today)"),
    db: Session = Depends(get_db),
):
    return stock_value_report(db, stock_date or date.today())


@router.get("/low-stock", response_model=list[LowStockItem])
def low_stock(
    stock_date: Optional[date] = Query(None, description="Stock day (default: today)"),
    db: Session = Depends(get_db),
):
    return low_stock_items(db, stock_date or date.today())


@router.post("/bill-adjustments", response_model=list[StockEntryReport])
def apply_bill_adjustment(
    payload: BillAdjustmentRequest,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context),
):
    try:
        entries = adjust_stock_for_bill(
            db,
            [item.model_dump() for item in payload.items],
            payload.shop_id,
            payload.adjustment_type,
            context=context,
            today=payload.stock_date,
        )
    except (LookupError, ValueError, SQLAlchemyError) as exc:
        raise _mutation_error(exc)
    return [StockEntryReport.from_row(to_stock_row(entry)) for entry in entries]


@router.put("/actual", response_model=StockEntryReport)
def update_actual_stock(
    payload: ActualStockUpdate,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context),
):
    try:
        entry = record_actual_stock(
            db,
            payload.product_id,
            payload.shop_id,
            payload.actual_stock,
            context=context,
            stock_date=payload.stock_date,
        )
    except (LookupError, ValueError, SQLAlchemyError) as exc:
        raise _mutation_error(exc)
    return StockEntryReport.from_row(to_stock_row(entry))


@router.post("/carry-forward", response_model=CarryForwardResult)
def run_carry_forward(
    payload: CarryForwardRequest,
    db: Session = Depends(get_db),
):
    target_date = payload.target_date or date.today()
    try:
        created = carry_forward_stock(db, target_date)
    except SQLAlchemyError as exc:
        raise _mutation_error(exc)
    return CarryForwardResult(target_date=target_date, created=created)


@router.patch("/{entry_id}", response_model=StockEntryReport)
def update_stock_entry(
    entry_id: int,
    payload: StockEntryEdit,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context),
):
    try:
        entry = edit_stock_entry(
            db,
            entry_id,
            opening_stock=payload.opening_stock,
            stock_added=payload.stock_added,
            actual_stock=payload.actual_stock,
            clear_actual=payload.clear_actual,
            operator_name=payload.operator_name,
            context=context,
        )
    except (LookupError, ValueError, SQLAlchemyError) as exc:
        raise _mutation_error(exc)
    return StockEntryReport.from_row(to_stock_row(entry))


__all__ = ["router"]
