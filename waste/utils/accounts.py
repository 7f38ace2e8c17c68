# waste/utils/accounts.py
import logging
import re

from django.db import IntegrityError, transaction

from ..models import User

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = 'Anonymous user'


def username_from_email(email):
    """Derive a unique username from the local part of an email address."""
    base = re.sub(r'[^\w.@+-]', '', email.split('@')[0])[:140] or 'user'
    candidate = base
    suffix = 1
    while User.objects.filter(username=candidate).exists():
        suffix += 1
        candidate = f"{base}{suffix}"
    return candidate


def get_user_by_email(email):
    return User.objects.filter(email__iexact=email).first()


def get_or_create_user(email, display_name=None):
    """
    Return the local user for an authenticated identity, creating it on first sight.

    Returns (user, created). Safe to call on every sign-in.
    """
    email = (email or '').strip()
    if not email:
        raise ValueError("An email address is required to identify a user.")

    user = get_user_by_email(email)
    if user is not None:
        return user, False

    try:
        with transaction.atomic():
            user = User(
                username=username_from_email(email),
                email=email,
                display_name=display_name or DEFAULT_DISPLAY_NAME,
            )
            user.set_unusable_password()
            user.save()
    except IntegrityError:
        # Another sign-in for the same email won the race
        user = get_user_by_email(email)
        if user is None:
            raise
        return user, False

    logger.info("Created user %s for %s", user.pk, email)
    return user, True
