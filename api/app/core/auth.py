import base64
import binascii
from dataclasses import dataclass


@dataclass(slots=True)
class BasicCredentials:
    username: str
    password: str


@dataclass(slots=True)
class Principal:
    subject: str


def parse_basic_authorization(authorization: str | None) -> BasicCredentials | None:
    if not authorization:
        return None
    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return BasicCredentials(username=username, password=password)
