from dataclasses import dataclass

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from course_checkout.config import Settings, get_settings
from course_checkout.errors import ForbiddenError, UnauthenticatedError

security = HTTPBearer(auto_error=False)


@dataclass
class Caller:
    id: str
    email: str
    account_type: str


def decode_token(token: str, settings: Settings) -> Caller:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise UnauthenticatedError("Token is invalid", error=str(exc)) from exc

    user_id = payload.get("id")
    if not user_id:
        raise UnauthenticatedError("Token is invalid")
    return Caller(id=str(user_id), email=payload.get("email", ""), account_type=payload.get("accountType", ""))


def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Security(security),
    settings: Settings = Depends(get_settings),
) -> Caller:
    if not credentials:
        raise UnauthenticatedError("Token is missing")
    return decode_token(credentials.credentials, settings)


def require_student(caller: Caller = Depends(get_current_caller)) -> Caller:
    if caller.account_type != "Student":
        raise ForbiddenError("This is a protected route for students")
    return caller
