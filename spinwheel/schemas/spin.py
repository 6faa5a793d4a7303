from datetime import datetime
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field


class SpinRequest(BaseModel):
    # name/email stay optional so missing values get the widget's 400 message instead of a 422
    name: Optional[str] = None
    email: Optional[str] = None
    domain: Optional[str] = None
    discount: Optional[Union[int, float]] = None
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")

    class Config:
        populate_by_name = True


class SpinRecordResponse(BaseModel):
    id: int
    name: str
    email: str
    domain: Optional[str] = None
    discount: Optional[Union[int, float]] = None
    coupon_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("coupon_code", "couponCode"),
        serialization_alias="couponCode",
    )
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )

    class Config:
        from_attributes = True


class SpinListResponse(BaseModel):
    count: int
    spins: List[SpinRecordResponse]


class SegmentResponse(BaseModel):
    label: str
    domain: str
    discount: int
    coupon_code: str = Field(
        validation_alias=AliasChoices("coupon_code", "couponCode"),
        serialization_alias="couponCode",
    )
    color: str

    class Config:
        from_attributes = True


class SegmentListResponse(BaseModel):
    count: int
    segments: List[SegmentResponse]
