from typing import Optional

from fastapi import Header

from stockledger.config import get_settings
from stockledger.core.context import RequestContext
from stockledger.database.session import get_db


def get_request_context(
    operator_name: Optional[str] = Header(None, alias="X-Operator-Name"),
) -> RequestContext:
    name = operator_name.strip() if operator_name else None
    return RequestContext(operator_name=name or None, settings=get_settings())


__all__ = ["get_db", "get_request_context"]
