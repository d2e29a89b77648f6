import re
from datetime import date
from typing import Any, ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from soc_portal.models.user import USER_ROLE_TYPES


EMAIL_PATTERN = re.compile(r"^[^\s@]+@nagad\.com\.bd$")
NGD_ID_PATTERN = re.compile(r"^NGD\d{6}$")
PHONE_PATTERN = re.compile(r"^(017|013|019|014|018|016|015)\d{8}$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")

MIN_AGE_YEARS = 18

PHONE_RULE = "11 digits starting with 017,013,019,014,018,016 or 015"


def form_rule_error(message: str, field: str = "") -> PydanticCustomError:
    """A broken form rule; `field` is the form name reported back to the client"""
    return PydanticCustomError("form_rule", "{message}", {"message": message, "field": field})


class NewUserForm(BaseModel):
    """Admin add-user form (multipart fields use the camelCase aliases)"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    short_name: Optional[str] = Field(None, alias="shortName")
    ngd_id: Optional[str] = Field(None, alias="ngdId")
    date_of_birth: Optional[date] = Field(None, alias="dateOfBirth")
    joining_date: Optional[date] = Field(None, alias="joiningDate")
    resign_date: Optional[date] = Field(None, alias="resignDate")
    email: Optional[str] = None
    phone: Optional[str] = None
    emergency_contact: Optional[str] = Field(None, alias="emergencyContact")
    designation: Optional[str] = None
    blood_group: Optional[str] = Field(None, alias="bloodGroup")
    gender: Optional[str] = None
    password: Optional[str] = None
    role_type: Optional[str] = Field(None, alias="roleType")
    status: str = "Active"

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "first_name", "last_name", "ngd_id", "date_of_birth", "joining_date", "email",
        "phone", "designation", "blood_group", "gender", "password", "role_type",
    )
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("date_of_birth", "joining_date", "resign_date")

    @field_validator("date_of_birth", "joining_date", "resign_date", mode="before")
    @classmethod
    def blank_or_day_part(cls, v: Any) -> Any:
        # Browsers send "" for untouched inputs; ISO timestamps keep their date
        if isinstance(v, str):
            v = v.strip()
            return v[:10] or None
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return v or "Active"

    @model_validator(mode="after")
    def check_form_rules(self, info: ValidationInfo):
        """Required fields first, then each rule in form order"""
        missing = [
            type(self).model_fields[name].alias or name
            for name in self.REQUIRED_FIELDS
            if not getattr(self, name)
        ]
        if missing:
            raise form_rule_error(f"Required field validation failed: {', '.join(missing)}")

        if not EMAIL_PATTERN.match(self.email):
            raise form_rule_error("Email must be @nagad.com.bd domain", "email")

        if not NGD_ID_PATTERN.match(self.ngd_id):
            raise form_rule_error(
                "NGD ID must be in format NGD followed by 6 digits (e.g. NGD241079)", "ngdId"
            )

        if not PHONE_PATTERN.match(self.phone):
            raise form_rule_error(f"Phone must be {PHONE_RULE}", "phone")

        if self.emergency_contact and not PHONE_PATTERN.match(self.emergency_contact):
            raise form_rule_error(f"Emergency contact must be {PHONE_RULE}", "emergencyContact")

        if not PASSWORD_PATTERN.match(self.password):
            raise form_rule_error(
                "Password must be at least 8 characters and include uppercase, lowercase, and number",
                "password",
            )

        if self.role_type not in USER_ROLE_TYPES:
            raise form_rule_error("Invalid role type", "roleType")

        today = (info.context or {}).get("today") or date.today()
        if today.year - self.date_of_birth.year < MIN_AGE_YEARS:
            raise form_rule_error("User must be at least 18 years old", "dateOfBirth")

        if self.joining_date > today:
            raise form_rule_error("Joining date cannot be in the future", "joiningDate")

        if self.resign_date and self.resign_date < self.joining_date:
            raise form_rule_error("Resign date cannot be before joining date", "resignDate")

        return self
