from pydantic import BaseModel, field_validator
from typing import Optional


class HouseBase(BaseModel):
    name: str
    address: Optional[str] = None
    is_active: bool = True


class HouseCreate(HouseBase):
    pass


class HouseUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None


class HouseOut(HouseBase):
    id: int

    class Config:
        from_attributes = True


class ServiceCodeBase(BaseModel):
    code: str
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def code_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("code cannot be blank")
        return v.strip() if v else v


class ServiceCodeCreate(ServiceCodeBase):
    pass


class ServiceCodeUpdate(BaseModel):
    code: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class ServiceCodeOut(ServiceCodeBase):
    id: int

    class Config:
        from_attributes = True


class StaffBase(BaseModel):
    name: str
    role: Optional[str] = None
    is_active: bool = True


class StaffCreate(StaffBase):
    pass


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None


class StaffOut(StaffBase):
    id: int

    class Config:
        from_attributes = True
