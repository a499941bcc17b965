from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Employee(BaseModel):
    employee_id: int
    first_name: str
    last_name: str
    pay_rate: float = Field(default=0.0, ge=0)
    job_title: Optional[str] = None
    active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# MongoDB employees collection document schema
class EmployeeDocument(BaseModel):
    id: int = Field(alias="_id")
    first_name: str
    last_name: str
    pay_rate: float = Field(ge=0)
    job_title: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    def to_employee(self) -> Employee:
        return Employee(
            employee_id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            pay_rate=self.pay_rate,
            job_title=self.job_title,
            active=self.active,
        )
