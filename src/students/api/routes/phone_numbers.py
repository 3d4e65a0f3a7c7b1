"""Phone number endpoints, nested under a student and addressed by position."""

from fastapi import APIRouter, Depends, Request, Response, status

from students.api.dependencies import StudentServiceDep, get_current_user
from students.api.models import (
    APIResponse,
    PhoneNumberCreate,
    PhoneNumberResponse,
    PhoneNumberUpdate,
    phone_number_to_response,
)

router = APIRouter(
    prefix="/students/{student_id}/phone-numbers",
    tags=["phone-numbers"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "",
    response_model=APIResponse[PhoneNumberResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_phone_number(
    student_id: str,
    phone_number: PhoneNumberCreate,
    service: StudentServiceDep,
    request: Request,
    response: Response,
) -> APIResponse[PhoneNumberResponse]:
    """Append a phone number to a student."""
    added = service.add_phone_number(student_id, phone_number.to_phone_number())
    index = len(service.list_phone_numbers(student_id)) - 1
    response.headers["Location"] = str(
        request.url_for("get_phone_number", student_id=student_id, index=str(index))
    )
    return APIResponse(data=phone_number_to_response(added))


@router.get("", response_model=APIResponse[list[PhoneNumberResponse]])
def list_phone_numbers(
    student_id: str, service: StudentServiceDep
) -> APIResponse[list[PhoneNumberResponse]]:
    """List a student's phone numbers in order."""
    phones = service.list_phone_numbers(student_id)
    return APIResponse(data=[phone_number_to_response(p) for p in phones])


@router.get("/{index}", response_model=APIResponse[PhoneNumberResponse])
def get_phone_number(
    student_id: str, index: int, service: StudentServiceDep
) -> APIResponse[PhoneNumberResponse]:
    """Get the phone number at a position."""
    phone = service.get_phone_number(student_id, index)
    return APIResponse(data=phone_number_to_response(phone))


@router.put("/{index}", response_model=APIResponse[PhoneNumberResponse])
def replace_phone_number(
    student_id: str,
    index: int,
    phone_number: PhoneNumberCreate,
    service: StudentServiceDep,
) -> APIResponse[PhoneNumberResponse]:
    """Replace the phone number at a position."""
    phone = service.replace_phone_number(student_id, index, phone_number.to_phone_number())
    return APIResponse(data=phone_number_to_response(phone))


@router.patch("/{index}", response_model=APIResponse[PhoneNumberResponse])
def patch_phone_number(
    student_id: str,
    index: int,
    phone_number: PhoneNumberUpdate,
    service: StudentServiceDep,
) -> APIResponse[PhoneNumberResponse]:
    """Update the phone number at a position (partial update)."""
    phone = service.merge_phone_number(
        student_id,
        index,
        ddd=phone_number.ddd,
        number=phone_number.number,
        description=phone_number.description,
    )
    return APIResponse(data=phone_number_to_response(phone))


@router.delete("/{index}", status_code=status.HTTP_204_NO_CONTENT)
def delete_phone_number(student_id: str, index: int, service: StudentServiceDep) -> None:
    """Remove the phone number at a position."""
    service.remove_phone_number(student_id, index)
