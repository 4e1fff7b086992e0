"""
DeleteScope - who a deletion applies to.
"""

from enum import Enum


class DeleteScope(str, Enum):
    FOR_ME = "for_me"  # only the acting user stops seeing it
    FOR_EVERYONE = "for_everyone"  # removed from every participant's view
