# app/core/errors.py

# =================================================================================
# 🚫 Taxonomía de errores del motor RSVP
# ---------------------------------------------------------------------------------
# Cada rechazo del motor es una excepción tipada. El motor nunca conoce HTTP;
# `status_code` solo lo usa la capa FastAPI para traducir la respuesta.
# =================================================================================

from typing import Optional


class RSVPError(Exception):
    """Base de todos los errores de negocio y de almacenamiento."""

    status_code: int = 400
    default_message: str = "Request could not be processed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class MissingFields(RSVPError):
    default_message = "Names, phone number, and attendance status are required."


class InvalidGuestCount(RSVPError):
    default_message = "Please specify the number of guests (1-8 people)."


class InvalidPhone(RSVPError):
    default_message = "Please provide a valid phone number."


class NotOnGuestList(RSVPError):
    status_code = 403
    default_message = (
        "We couldn't find your name on our guest list. "
        "Please check your spelling or contact us directly."
    )


class DuplicateSubmission(RSVPError):
    status_code = 409
    default_message = (
        "An RSVP with this name and phone number already exists. "
        "Please contact us if you need to make changes."
    )


class NotFound(RSVPError):
    status_code = 404
    default_message = "Not found"


class AlreadyExists(RSVPError):
    default_message = "Guest already exists"


class Unauthorized(RSVPError):
    status_code = 401
    default_message = "Unauthorized"


class StorageFailure(RSVPError):
    status_code = 500
    default_message = "Something went wrong processing your request. Please try again later."
