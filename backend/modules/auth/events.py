"""
Analytics events emitted by the auth state manager.

Every public operation reports a start event, then either a success or a
fail event. The listener reports every value it publishes.
"""

from enum import Enum
from typing import Any, Optional

from shared.exceptions import AuthSyncError
from shared.models import AuthenticatedUser
from modules.analytics.models import EventRecord, EventSeverity

from .models import SignInOption


class AuthEventName(str, Enum):
    """Names of auth events as they appear in analytics."""

    LISTENER_SUCCESS = "Auth_Listener_Success"
    LISTENER_EMPTY = "Auth_Listener_Empty"
    SIGN_IN_START = "Auth_SignIn_Start"
    SIGN_IN_SUCCESS = "Auth_SignIn_Success"
    SIGN_IN_FAIL = "Auth_SignIn_Fail"
    SIGN_OUT_START = "Auth_SignOut_Start"
    SIGN_OUT_SUCCESS = "Auth_SignOut_Success"
    SIGN_OUT_FAIL = "Auth_SignOut_Fail"
    DELETE_ACCOUNT_START = "Auth_DeleteAccount_Start"
    DELETE_ACCOUNT_SUCCESS = "Auth_DeleteAccount_Success"
    DELETE_ACCOUNT_FAIL = "Auth_DeleteAccount_Fail"
    CREATE_USER_START = "Auth_CreateUser_Start"
    CREATE_USER_SUCCESS = "Auth_CreateUser_Success"
    CREATE_USER_FAIL = "Auth_CreateUser_Fail"
    RESET_PASSWORD_START = "Auth_ResetPassword_Start"
    RESET_PASSWORD_SUCCESS = "Auth_ResetPassword_Success"
    RESET_PASSWORD_FAIL = "Auth_ResetPassword_Fail"
    UPDATE_PASSWORD_START = "Auth_UpdatePassword_Start"
    UPDATE_PASSWORD_SUCCESS = "Auth_UpdatePassword_Success"
    UPDATE_PASSWORD_FAIL = "Auth_UpdatePassword_Fail"
    UPDATE_EMAIL_START = "Auth_UpdateEmail_Start"
    UPDATE_EMAIL_SUCCESS = "Auth_UpdateEmail_Success"
    UPDATE_EMAIL_FAIL = "Auth_UpdateEmail_Fail"


def error_parameters(error: BaseException) -> dict[str, Any]:
    """Describe an error for analytics."""
    params: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_description": str(error),
    }
    if isinstance(error, AuthSyncError):
        params["error_code"] = error.code
    return params


def _event(
    name: AuthEventName,
    parameters: Optional[dict[str, Any]] = None,
    severity: EventSeverity = EventSeverity.INFO,
) -> EventRecord:
    return EventRecord(name=name.value, parameters=parameters, severity=severity)


def _fail(name: AuthEventName, error: BaseException, **parameters: Any) -> EventRecord:
    return _event(name, {**parameters, **error_parameters(error)}, EventSeverity.SEVERE)


def _account_fail(name: AuthEventName, error: BaseException, **parameters: Any) -> EventRecord:
    # Reported at info with the error nested under error_message.
    return _event(name, {**parameters, "error_message": error_parameters(error)})


# Listener

def listener_success(user: AuthenticatedUser) -> EventRecord:
    return _event(AuthEventName.LISTENER_SUCCESS, user.event_parameters)


def listener_empty() -> EventRecord:
    return _event(AuthEventName.LISTENER_EMPTY, severity=EventSeverity.WARNING)


# Sign in / sign out / delete

def sign_in_start(option: SignInOption) -> EventRecord:
    return _event(AuthEventName.SIGN_IN_START, option.event_parameters)


def sign_in_success(
    option: SignInOption, user: AuthenticatedUser, is_new_user: bool
) -> EventRecord:
    params = {**user.event_parameters, **option.event_parameters, "is_new_user": is_new_user}
    return _event(AuthEventName.SIGN_IN_SUCCESS, params)


def sign_in_fail(error: BaseException) -> EventRecord:
    return _fail(AuthEventName.SIGN_IN_FAIL, error)


def sign_out_start() -> EventRecord:
    return _event(AuthEventName.SIGN_OUT_START)


def sign_out_success() -> EventRecord:
    return _event(AuthEventName.SIGN_OUT_SUCCESS)


def sign_out_fail(error: BaseException) -> EventRecord:
    return _fail(AuthEventName.SIGN_OUT_FAIL, error)


def delete_account_start() -> EventRecord:
    return _event(AuthEventName.DELETE_ACCOUNT_START)


def delete_account_success() -> EventRecord:
    return _event(AuthEventName.DELETE_ACCOUNT_SUCCESS)


def delete_account_fail(error: BaseException) -> EventRecord:
    return _fail(AuthEventName.DELETE_ACCOUNT_FAIL, error)


# Email & password. Passwords never appear in parameters.

def create_user_start(email: str) -> EventRecord:
    return _event(AuthEventName.CREATE_USER_START, {"email": email})


def create_user_success(email: str, user: AuthenticatedUser) -> EventRecord:
    return _event(AuthEventName.CREATE_USER_SUCCESS, {**user.event_parameters, "email": email})


def create_user_fail(email: str, error: BaseException) -> EventRecord:
    return _account_fail(AuthEventName.CREATE_USER_FAIL, error, email=email)


def reset_password_start(email: str) -> EventRecord:
    return _event(AuthEventName.RESET_PASSWORD_START, {"email": email})


def reset_password_success(email: str) -> EventRecord:
    return _event(AuthEventName.RESET_PASSWORD_SUCCESS, {"email": email})


def reset_password_fail(email: str, error: BaseException) -> EventRecord:
    return _account_fail(AuthEventName.RESET_PASSWORD_FAIL, error, email=email)


def update_password_start(user_id: str) -> EventRecord:
    return _event(AuthEventName.UPDATE_PASSWORD_START, {"user_id": user_id})


def update_password_success(user_id: str) -> EventRecord:
    return _event(AuthEventName.UPDATE_PASSWORD_SUCCESS, {"user_id": user_id})


def update_password_fail(user_id: str, error: BaseException) -> EventRecord:
    return _account_fail(AuthEventName.UPDATE_PASSWORD_FAIL, error, user_id=user_id)


def update_email_start(user_id: str, new_email: str) -> EventRecord:
    return _event(AuthEventName.UPDATE_EMAIL_START, {"user_id": user_id, "new_email": new_email})


def update_email_success(user_id: str, new_email: str) -> EventRecord:
    return _event(
        AuthEventName.UPDATE_EMAIL_SUCCESS, {"user_id": user_id, "new_email": new_email}
    )


def update_email_fail(user_id: str, new_email: str, error: BaseException) -> EventRecord:
    return _account_fail(
        AuthEventName.UPDATE_EMAIL_FAIL, error, user_id=user_id, new_email=new_email
    )
