"""Registration profile forms.

Each form is a list of steps (the wizard pages of the registration screens).
The server validates the whole submission at once and reports the first
failing field together with its step, so the template can reopen that step.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import age_on
from ..common.validators import (
    is_url,
    require_email,
    require_iso_date,
    require_min_length,
)
from ..core.constants import DEFAULT_NATIONALITY, MIN_STUDENT_AGE, MIN_TEACHER_AGE
from ..core.enums import Role
from ..core.exceptions import ValidationError

Rule = Callable[[str, str, date], Any]


def text(min_len: int = 0, *, default: str = "") -> Rule:
    def check(raw: str, label: str, today: date) -> str:
        if default and not (raw or "").strip():
            return default
        if min_len:
            return require_min_length(raw, label, min_len)
        return (raw or "").strip()

    return check


def choice(options: tuple[str, ...], *, required: bool = True) -> Rule:
    def check(raw: str, label: str, today: date) -> Optional[str]:
        value = (raw or "").strip()
        if not value and not required:
            return None
        if value not in options:
            raise ValidationError(f"{label}: please select one of {', '.join(options)}.")
        return value

    return check


def email(*, required: bool = True) -> Rule:
    def check(raw: str, label: str, today: date) -> str:
        value = (raw or "").strip()
        if not value and not required:
            return ""
        return require_email(value, label)

    return check


def url() -> Rule:
    def check(raw: str, label: str, today: date) -> str:
        value = (raw or "").strip()
        if value and not is_url(value):
            raise ValidationError(f"{label}: please enter a valid URL.")
        return value

    return check


def iso_date() -> Rule:
    def check(raw: str, label: str, today: date) -> str:
        return require_iso_date(raw, label).isoformat()

    return check


def number(*, minimum: Optional[int] = None, maximum: Optional[int] = None, up_to_this_year: bool = False) -> Rule:
    def check(raw: str, label: str, today: date) -> int:
        upper = today.year if up_to_this_year else maximum
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            raise ValidationError(f"{label} must be a number.")
        if minimum is not None and value < minimum:
            raise ValidationError(f"{label} must be at least {minimum}.")
        if upper is not None and value > upper:
            raise ValidationError(f"{label} must be at most {upper}.")
        return value

    return check


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    rule: Rule


@dataclass(frozen=True)
class FormStep:
    name: str
    fields: tuple[FormField, ...]


@dataclass(frozen=True)
class ProfileForm:
    role: Role
    title: str
    steps: tuple[FormStep, ...]
    min_age: Optional[int] = None

    @property
    def field_names(self) -> list[str]:
        return [f.name for step in self.steps for f in step.fields]

    def validate(self, data: Mapping[str, Any], *, today: date) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for step in self.steps:
            for f in step.fields:
                try:
                    cleaned[f.name] = f.rule(data.get(f.name, ""), f.label, today)
                except ValidationError as e:
                    raise ValidationError(f"{step.name}: {e}") from e

                if f.name == "dob" and self.min_age is not None:
                    age = age_on(date.fromisoformat(cleaned["dob"]), today)
                    if age < self.min_age:
                        raise ValidationError(f"{step.name}: Age must be at least {self.min_age}.")
                    cleaned["age"] = age
        return cleaned


def _f(name: str, label: str, rule: Rule) -> FormField:
    return FormField(name=name, label=label, rule=rule)


_GENDERS = ("male", "female", "other")

STUDENT_FORM = ProfileForm(
    role=Role.STUDENT,
    title="Student Registration Form",
    min_age=MIN_STUDENT_AGE,
    steps=(
        FormStep(
            "Student Information",
            (
                _f("fullName", "Full name", text(2)),
                _f("gender", "Gender", choice(_GENDERS)),
                _f("dob", "Date of birth", iso_date()),
                _f("bloodGroup", "Blood group", text()),
                _f("nationality", "Nationality", text(2, default=DEFAULT_NATIONALITY)),
                _f("aadharNumber", "Aadhar number", text()),
            ),
        ),
        FormStep(
            "Parent/Guardian Details",
            (
                _f("fatherName", "Father's name", text(2)),
                _f("fatherOccupation", "Father's occupation", text()),
                _f("fatherMobile", "Father's mobile", text(10)),
                _f("fatherEmail", "Father's email", email(required=False)),
                _f("motherName", "Mother's name", text(2)),
                _f("motherOccupation", "Mother's occupation", text()),
                _f("motherMobile", "Mother's mobile", text(10)),
                _f("motherEmail", "Mother's email", email(required=False)),
                _f("guardianName", "Guardian name", text()),
                _f("guardianRelationship", "Guardian relationship", text()),
                _f("guardianContact", "Guardian contact", text()),
            ),
        ),
        FormStep(
            "Contact Details",
            (
                _f("residentialAddress", "Residential address", text(10)),
                _f("permanentAddress", "Permanent address", text()),
                _f("state", "State", text()),
                _f("district", "District", text()),
                _f("city", "City", text()),
                _f("pincode", "Pincode", text()),
                _f("emergencyContact", "Emergency contact", text(10)),
            ),
        ),
        FormStep(
            "Health Information",
            (
                _f("medicalConditions", "Medical conditions", text()),
                _f("disability", "Disability", text()),
                _f("doctorName", "Doctor name", text()),
                _f("vaccinationStatus", "Vaccination status", text()),
            ),
        ),
        FormStep(
            "Documents Links",
            (
                _f("birthCertificateUrl", "Birth certificate", url()),
                _f("transferCertificateUrl", "Transfer certificate", url()),
                _f("aadharCardUrl", "Aadhar card", url()),
                _f("passportPhotoUrl", "Passport photo", url()),
                _f("previousReportCardUrl", "Previous report card", url()),
            ),
        ),
    ),
)

TEACHER_FORM = ProfileForm(
    role=Role.TEACHER,
    title="Teacher Registration Form",
    min_age=MIN_TEACHER_AGE,
    steps=(
        FormStep(
            "Personal Information",
            (
                _f("fullName", "Full name", text(2)),
                _f("gender", "Gender", choice(_GENDERS)),
                _f("dob", "Date of birth", iso_date()),
                _f("bloodGroup", "Blood group", text()),
                _f("nationality", "Nationality", text(2, default=DEFAULT_NATIONALITY)),
                _f("maritalStatus", "Marital status", choice(("single", "married", "divorced", "widowed"), required=False)),
                _f("aadharNumber", "Aadhar number", text()),
            ),
        ),
        FormStep(
            "Contact Information",
            (
                _f("mobileNumber", "Mobile number", text(10)),
                _f("alternateNumber", "Alternate number", text()),
                _f("emailAddress", "Email address", email()),
                _f("residentialAddress", "Residential address", text(10)),
                _f("permanentAddress", "Permanent address", text()),
                _f("emergencyContact", "Emergency contact", text(10)),
            ),
        ),
        FormStep(
            "Education & Qualification",
            (
                _f("highestQualification", "Highest qualification", text(2)),
                _f("otherDegrees", "Other degrees", text()),
                _f("specialization", "Specialization", text(2)),
                _f("yearOfPassing", "Year of passing", number(minimum=1950, up_to_this_year=True)),
                _f("university", "University/Board", text(2)),
                _f("certifications", "Certifications", text()),
            ),
        ),
        FormStep(
            "Teaching Experience",
            (
                _f("subjects", "Subjects", text(2)),
                _f("preferredClasses", "Preferred classes", text()),
                _f("totalExperience", "Total experience", number(minimum=0)),
                _f("previousSchools", "Previous schools", text()),
            ),
        ),
        FormStep(
            "Documents Links",
            (
                _f("resumeUrl", "Resume", url()),
                _f("photographUrl", "Photograph", url()),
                _f("idProofUrl", "ID proof", url()),
                _f("degreeCertificatesUrl", "Degree certificates", url()),
                _f("experienceCertificatesUrl", "Experience certificates", url()),
            ),
        ),
    ),
)

DRIVER_FORM = ProfileForm(
    role=Role.DRIVER,
    title="Driver Registration Form",
    steps=(
        FormStep(
            "Driver Details",
            (
                _f("mobileNumber", "Mobile number", text(10)),
                _f("drivingLicenseNumber", "Driving license number", text(5)),
                _f("licenseExpiryDate", "License expiry date", iso_date()),
            ),
        ),
    ),
)

PROFILE_FORMS: dict[Role, ProfileForm] = {
    Role.STUDENT: STUDENT_FORM,
    Role.TEACHER: TEACHER_FORM,
    Role.DRIVER: DRIVER_FORM,
}


def form_for(role: Role) -> Optional[ProfileForm]:
    return PROFILE_FORMS.get(role)
