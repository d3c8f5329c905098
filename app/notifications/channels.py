from enum import Enum


class Channel(str, Enum):
    INAPP_USER = "inapp_user"
    EMAIL_USER = "email_user"
