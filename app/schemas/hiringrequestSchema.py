from typing import ClassVar, List, Optional, Tuple

from app.schemas.submissionSchema import FormSubmission


class HiringRequest(FormSubmission):
    """Request schema for a company hiring request."""

    LIST_FIELDS: ClassVar[Tuple[str, ...]] = ("positions",)

    company_name: str
    contact_person: str
    email: str
    phone: str
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    industry: Optional[str] = None
    positions: Optional[List[str]] = None
    number_of_drivers_needed: Optional[str] = None
    experience_level: Optional[str] = None
    salary: Optional[str] = None
    benefits: Optional[str] = None
    job_description: Optional[str] = None
    additional_info: Optional[str] = None
