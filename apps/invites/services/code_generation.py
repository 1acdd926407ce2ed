"""
Invite code text format.

``<PREFIX>-XXXX-XXXX-XXXX-XXXX-XXXX-XXXX`` where the prefix encodes the
role and the groups use an uppercase alphabet without 0, 1, O and I.
"""

import re
import secrets
from typing import Optional

from apps.accounts.models import UserRole

CODE_ALPHABET = '23456789ABCDEFGHJKLMNPQRSTUVWXYZ'
GROUP_COUNT = 6
GROUP_LENGTH = 4

ROLE_PREFIXES = {
    UserRole.STUDENT: 'ST',
    UserRole.CORE_MEMBER: 'CM',
    UserRole.ADMIN: 'AD',
}

CODE_PATTERN = re.compile(
    r'^(?P<prefix>[A-Z]{2})(?:-[%s]{%d}){%d}$' % (CODE_ALPHABET, GROUP_LENGTH, GROUP_COUNT)
)


def make_invite_code(role: str) -> str:
    """Return a random code for ``role``."""
    prefix = ROLE_PREFIXES[role]
    groups = [
        ''.join(secrets.choice(CODE_ALPHABET) for _ in range(GROUP_LENGTH))
        for _ in range(GROUP_COUNT)
    ]
    return '-'.join([prefix, *groups])


def role_for_code(code: str) -> Optional[str]:
    """Role encoded by a well-formed code's prefix, else None."""
    match = CODE_PATTERN.match(code or '')
    if not match:
        return None
    for role, prefix in ROLE_PREFIXES.items():
        if prefix == match.group('prefix'):
            return role
    return None
