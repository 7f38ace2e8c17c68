# waste/adapters.py
from allauth.socialaccount.adapter import DefaultSocialAccountAdapter

from .utils.accounts import DEFAULT_DISPLAY_NAME, get_or_create_user


def display_name_from(data):
    name = (data.get('name') or '').strip()
    if not name:
        name = ' '.join(part for part in (data.get('given_name'), data.get('family_name')) if part).strip()
    return name or DEFAULT_DISPLAY_NAME


class SocialAccountAdapter(DefaultSocialAccountAdapter):
    """
    Google sign-in keyed on email: the first login creates the local user,
    later logins attach to it.
    """

    def pre_social_login(self, request, sociallogin):
        if sociallogin.is_existing:
            return
        email = sociallogin.user.email or sociallogin.account.extra_data.get('email')
        if not email:
            return
        user, _ = get_or_create_user(email, display_name_from(sociallogin.account.extra_data))
        sociallogin.connect(request, user)

    def populate_user(self, request, sociallogin, data):
        user = super().populate_user(request, sociallogin, data)
        if not user.display_name:
            user.display_name = display_name_from(data)
        return user
