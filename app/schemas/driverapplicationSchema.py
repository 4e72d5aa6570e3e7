from typing import ClassVar, List, Optional, Tuple

from app.schemas.submissionSchema import FormSubmission


class DriverApplication(FormSubmission):
    """Request schema for a driver job application."""

    LIST_FIELDS: ClassVar[Tuple[str, ...]] = ("route_type",)

    first_name: str
    last_name: str
    email: str
    phone: str
    age: Optional[str] = None
    cdl_license: Optional[str] = None
    otr_experience: Optional[str] = None
    years_experience: Optional[str] = None
    clean_record: Optional[str] = None
    dot_physical: Optional[str] = None
    route_type: Optional[List[str]] = None
    home_time: Optional[str] = None
    pay_expectation: Optional[str] = None
    additional_info: Optional[str] = None
