# app/schemas.py
# Role: Request/response shapes for the JSON API.
#       Field names are camelCase on the wire (walletId, toWalletId, ...);
#       snake_case names are accepted too. Business rules live in
#       app/services, these models only check JSON types and id ranges.

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from models import MAX_ID

# ids outside this range can never match a row (SQLite INTEGER is 64-bit)
RowId = Annotated[StrictInt, Field(ge=1, le=MAX_ID)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -------------------------------------------------------------------
# Requests
# -------------------------------------------------------------------

class AuthPayload(ApiModel):
    username: StrictStr
    password: StrictStr


class WalletPayload(ApiModel):
    name: StrictStr
    type: Optional[StrictStr] = None
    # opening balance, minor units
    balance: Optional[StrictInt] = 0


class CategoryPayload(ApiModel):
    name: StrictStr
    kind: StrictStr = Field(validation_alias=AliasChoices("type", "kind"))


class TransactionPayload(ApiModel):
    amount: StrictInt
    type: StrictStr
    wallet_id: RowId
    to_wallet_id: Optional[RowId] = None
    category_id: Optional[RowId] = None
    description: Optional[StrictStr] = None
    date: Optional[StrictStr] = None  # "2025-11-18" or ISO datetime


# -------------------------------------------------------------------
# Responses
# -------------------------------------------------------------------

class MessageOut(ApiModel):
    message: str


class TokenOut(ApiModel):
    token: str


class UserOut(ApiModel):
    id: int
    username: str
    avatar_url: Optional[str] = None


class WalletOut(ApiModel):
    id: int
    user_id: int
    name: str
    type: str
    initial_balance: int
    balance: int


class CategoryOut(ApiModel):
    id: int
    user_id: int
    name: str
    kind: str


class TransactionOut(ApiModel):
    id: int
    user_id: int
    wallet_id: int
    wallet_name: Optional[str] = None
    to_wallet_id: Optional[int] = None
    to_wallet_name: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    amount: int
    type: str
    description: Optional[str] = None
    date: datetime
    created_at: datetime


class TotalOut(ApiModel):
    balance: int


class CategoryTotalOut(ApiModel):
    category_id: int
    name: str
    kind: str
    total: int


class SummaryOut(ApiModel):
    income: int
    expense: int
    balance: int
    month: Optional[str] = None
    by_category: List[CategoryTotalOut] = []
